"""Data models shared by the pairing strategies and the tournament controller."""

from tourneypairing.models.match import Match
from tourneypairing.models.pairing_result import PairingResult
from tourneypairing.models.tournament_config import TournamentConfig

__all__ = [
    "Match",
    "PairingResult",
    "TournamentConfig",
]
