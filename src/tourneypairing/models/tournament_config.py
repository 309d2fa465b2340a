"""TournamentConfig data class."""

# Tourney Pairing
# Copyright (C) 2025  Tourney Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from tourneypairing.constants import (
    DEFAULT_SWISS_SEARCH_LIMIT,
    DEFAULT_TIEBREAK_ORDERS,
    DRAW_VALUE,
    FORMAT_SWISS,
    FORMATS,
    LOSS_VALUE,
    SORT_NONE,
    SORTINGS,
    SWISS_ADJACENT,
    SWISS_PAIRING_MODES,
    TIEBREAK_KEYS,
    WIN_VALUE,
)
from tourneypairing.exceptions import ConfigurationError


@dataclass
class TournamentConfig:
    """Tournament configuration settings.

    Attributes
    ----------
    name : str
        Tournament name.
    format : str
        "swiss", "round_robin" or "elimination".
    num_rounds : int, optional
        Swiss round count. When None it is derived from the field size when
        the first round starts.
    win_value, draw_value, loss_value : float
        Match points for each outcome.
    best_of : int
        Games per match; a bye is credited ``ceil(best_of / 2)`` game wins.
    tiebreak_order : list of str
        Ordered tiebreak keys used after match points. Empty means the
        format's default order.
    sorting : str
        How seeds order players: "none", "ascending" or "descending".
    swiss_pairing : str
        "adjacent" (1v2, 3v4) or "fold" (top half vs bottom half).
    colors : bool
        Track sides and balance them when pairing.
    allow_repeat_pairings : bool
        Permit reported rematches when no legal Swiss pairing exists.
    swiss_search_limit : int
        Node budget for the Swiss backtracking search.
    double_round_robin : bool
        Play every pairing twice with sides swapped.
    double_elimination : bool
        Add a losers bracket.
    third_place_match : bool
        Play off the semifinal losers in single elimination.
    bracket_reset : bool
        Play a second grand final if the losers-bracket survivor wins the first.
    max_players : int, optional
        Roster cap.
    tournament_over : bool
        Indicates whether the tournament is complete.
    """

    name: str = "Untitled Tournament"
    format: str = FORMAT_SWISS
    num_rounds: Optional[int] = None
    win_value: float = WIN_VALUE
    draw_value: float = DRAW_VALUE
    loss_value: float = LOSS_VALUE
    best_of: int = 1
    tiebreak_order: List[str] = field(default_factory=list)
    sorting: str = SORT_NONE
    swiss_pairing: str = SWISS_ADJACENT
    colors: bool = False
    allow_repeat_pairings: bool = True
    swiss_search_limit: int = DEFAULT_SWISS_SEARCH_LIMIT
    double_round_robin: bool = False
    double_elimination: bool = False
    third_place_match: bool = False
    bracket_reset: bool = False
    max_players: Optional[int] = None
    # Is the tournament complete?
    tournament_over: bool = False

    @property
    def effective_tiebreak_order(self) -> List[str]:
        """Configured order, or the format default when none is set."""
        if self.tiebreak_order:
            return list(self.tiebreak_order)
        return list(DEFAULT_TIEBREAK_ORDERS[self.format])

    @property
    def bye_game_wins(self) -> int:
        return -(-self.best_of // 2)

    def validate(self) -> None:
        """Check the settings for consistency.

        Raises:
            ConfigurationError: On the first invalid setting found
        """
        if self.format not in FORMATS:
            raise ConfigurationError(
                f"Unknown format '{self.format}', expected one of {FORMATS}"
            )
        if self.num_rounds is not None and self.num_rounds < 1:
            raise ConfigurationError(
                f"Number of rounds must be positive, got {self.num_rounds}"
            )
        if self.best_of < 1:
            raise ConfigurationError(f"best_of must be positive, got {self.best_of}")
        if not self.loss_value <= self.draw_value <= self.win_value:
            raise ConfigurationError(
                "Point values must satisfy loss <= draw <= win, got "
                f"{self.loss_value}/{self.draw_value}/{self.win_value}"
            )
        if self.win_value <= 0:
            raise ConfigurationError(
                f"Win value must be positive, got {self.win_value}"
            )
        if self.sorting not in SORTINGS:
            raise ConfigurationError(
                f"Unknown sorting '{self.sorting}', expected one of {SORTINGS}"
            )
        if self.swiss_pairing not in SWISS_PAIRING_MODES:
            raise ConfigurationError(
                f"Unknown Swiss pairing mode '{self.swiss_pairing}'"
            )
        if self.swiss_search_limit < 1:
            raise ConfigurationError("swiss_search_limit must be positive")
        if self.max_players is not None and self.max_players < 2:
            raise ConfigurationError(
                f"max_players must allow at least two players, got {self.max_players}"
            )
        unknown = [key for key in self.tiebreak_order if key not in TIEBREAK_KEYS]
        if unknown:
            raise ConfigurationError(f"Unknown tiebreak keys: {unknown}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["tiebreak_order"] = list(self.tiebreak_order)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """Deserialize configuration from dictionary.

        Unknown keys are ignored so older exports keep loading.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {key: value for key, value in data.items() if key in known}
        if "tiebreak_order" in kwargs:
            kwargs["tiebreak_order"] = list(kwargs["tiebreak_order"] or [])
        return cls(**kwargs)
