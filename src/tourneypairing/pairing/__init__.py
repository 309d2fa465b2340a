"""Tournament formats: Swiss, round-robin and elimination."""

from tourneypairing.constants import (
    FORMAT_ELIMINATION,
    FORMAT_ROUND_ROBIN,
    FORMAT_SWISS,
)
from tourneypairing.exceptions import ConfigurationError
from tourneypairing.pairing.base import FormatStrategy, compare_players, seed_key
from tourneypairing.pairing.elimination import EliminationStrategy, plan_bracket
from tourneypairing.pairing.round_robin import RoundRobinStrategy, circle_schedule
from tourneypairing.pairing.swiss import PairingSearch, SwissStrategy

STRATEGIES = {
    FORMAT_SWISS: SwissStrategy,
    FORMAT_ROUND_ROBIN: RoundRobinStrategy,
    FORMAT_ELIMINATION: EliminationStrategy,
}


def create_strategy(format_name: str) -> FormatStrategy:
    """Return a fresh strategy for ``format_name``.

    Raises:
        ConfigurationError: If the format is unknown
    """
    try:
        return STRATEGIES[format_name]()
    except KeyError:
        raise ConfigurationError(f"Unknown format '{format_name}'") from None


__all__ = [
    "FormatStrategy",
    "SwissStrategy",
    "RoundRobinStrategy",
    "EliminationStrategy",
    "PairingSearch",
    "circle_schedule",
    "plan_bracket",
    "compare_players",
    "seed_key",
    "create_strategy",
]
