"""Interface shared by the tournament formats, plus the standings comparator."""

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

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from tourneypairing.constants import SORT_DESCENDING, TB_VERSUS
from tourneypairing.exceptions import ConfigurationError
from tourneypairing.models import Match, PairingResult
from tourneypairing.player import Player
from tourneypairing.utils import setup_logger

if TYPE_CHECKING:
    from tourneypairing.tournament.tiebreak_calculator import TiebreakCalculator
    from tourneypairing.tournament.tournament import Tournament

logger = setup_logger(__name__)


def seed_key(player: Player, sorting: str) -> Tuple[int, float]:
    """Sort key that puts the best seed first; unseeded players go last."""
    if player.seed is None:
        return (1, 0.0)
    return (0, -player.seed if sorting == SORT_DESCENDING else player.seed)


def compare_players(
    p1: Player,
    p2: Player,
    tiebreak_order: Sequence[str],
    calculator: TiebreakCalculator,
    sorting: str,
) -> int:
    """Compare two players for standings order.

    Returns:
        1 if p1 ranks higher, -1 if p2 ranks higher, 0 if equal
    """
    # Compare match points
    if p1.match_points != p2.match_points:
        return 1 if p1.match_points > p2.match_points else -1

    # Compare tiebreaks in order
    for tb_key in tiebreak_order:
        if tb_key == TB_VERSUS:
            p1_won, p2_won = calculator.calculate_head_to_head(p1, p2)
            if p1_won != p2_won:
                return 1 if p1_won > p2_won else -1
            continue
        tb1 = p1.tiebreakers.get(tb_key, 0.0)
        tb2 = p2.tiebreakers.get(tb_key, 0.0)
        if tb1 != tb2:
            return 1 if tb1 > tb2 else -1

    # Compare seed
    seed1, seed2 = seed_key(p1, sorting), seed_key(p2, sorting)
    if seed1 != seed2:
        return 1 if seed1 < seed2 else -1

    # Compare alias (alphabetically)
    if p1.alias != p2.alias:
        return 1 if p1.alias < p2.alias else -1

    return 0


class FormatStrategy(ABC):
    """Format specific behaviour plugged into a :class:`Tournament`.

    Strategies keep no state of their own: everything they build lives in the
    tournament's roster and match list, so a tournament restored with
    ``from_dict`` resumes with a fresh strategy instance.
    """

    format_name: str = ""

    def setup(self, tournament: Tournament) -> None:
        """Prepare the event when the first round starts.

        Raises:
            ConfigurationError: If the roster cannot be played in this format
        """
        active = tournament.active_players()
        if len(active) < 2:
            logger.error(
                f"Cannot start {self.format_name} event with {len(active)} players"
            )
            raise ConfigurationError(
                f"At least two active players are required, got {len(active)}"
            )

    @abstractmethod
    def generate_round(self, tournament: Tournament, round_number: int) -> PairingResult:
        """Return the matches that make up ``round_number``.

        Matches left with a missing or inactive player are resolved by the
        caller once the round is returned.
        """

    @abstractmethod
    def total_rounds(self, tournament: Tournament) -> Optional[int]:
        """Number of rounds the event will play, None if not known yet."""

    def is_complete(self, tournament: Tournament) -> bool:
        total = self.total_rounds(tournament)
        if total is None or tournament.current_round < total:
            return False
        return all(match.completed for match in tournament.matches)

    def compute_standings_order(
        self,
        tournament: Tournament,
        players: List[Player],
        tiebreak_order: Sequence[str],
    ) -> List[Player]:
        """Sort ``players`` best first. Tiebreaks must already be computed."""
        compare = functools.partial(
            compare_players,
            tiebreak_order=tiebreak_order,
            calculator=tournament.tiebreak_calculator,
            sorting=tournament.config.sorting,
        )
        return sorted(players, key=functools.cmp_to_key(compare), reverse=True)

    # ========== Result hooks ==========

    def validate_result(
        self,
        tournament: Tournament,
        match: Match,
        player_one_wins: int,
        player_two_wins: int,
        draws: int,
    ) -> None:
        """Reject a result before anything is mutated."""

    def on_result(self, tournament: Tournament, match: Match) -> None:
        """Called after a match was resolved by a result, bye or void."""

    def check_clear(self, tournament: Tournament, match: Match) -> None:
        """Reject clearing ``match`` before anything is mutated."""

    def on_clear(self, tournament: Tournament, match: Match) -> None:
        """Called before the result of ``match`` is reversed."""
