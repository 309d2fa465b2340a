"""Round-robin scheduling with the circle method.

The first player stays fixed while the others rotate one place per round.
With an odd field a bye slot joins the rotation, so every player sits out
exactly once per cycle.

Example:
    >>> schedule = circle_schedule(["a", "b", "c", "d"])
    >>> len(schedule)
    3
"""

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

from collections import deque
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from tourneypairing.constants import FORMAT_ROUND_ROBIN, SORT_NONE
from tourneypairing.exceptions import TournamentStateException
from tourneypairing.models import PairingResult
from tourneypairing.pairing.base import FormatStrategy, seed_key
from tourneypairing.type_hints import PairingIDs
from tourneypairing.utils import setup_logger

if TYPE_CHECKING:
    from tourneypairing.tournament.tournament import Tournament

logger = setup_logger(__name__)

# One round of (side one, side two) pairs; side two is None for a bye
RoundSchedule = List[Tuple[Optional[str], Optional[str]]]


def circle_schedule(player_ids: Sequence[str], double: bool = False) -> List[RoundSchedule]:
    """Build the full pairing schedule.

    Args:
        player_ids: Players in seeding order
        double: Play the cycle twice with sides swapped

    Returns:
        One list of pairs per round
    """
    slots: List[Optional[str]] = list(player_ids)
    if len(slots) % 2:
        slots.append(None)
    n = len(slots)

    fixed = slots[0]
    rotating = deque(slots[1:])
    schedule: List[RoundSchedule] = []
    for round_index in range(n - 1):
        order = [fixed] + list(rotating)
        pairs: RoundSchedule = []
        for i in range(n // 2):
            one, two = order[i], order[n - 1 - i]
            # Fixed player alternates sides
            if i == 0 and round_index % 2:
                one, two = two, one
            pairs.append((one, two))
        schedule.append(pairs)
        rotating.rotate(1)

    if double:
        schedule += [[(two, one) for one, two in pairs] for pairs in schedule]
    return schedule


def normalize_bye(pair: Tuple[Optional[str], Optional[str]]) -> PairingIDs:
    """Put the present player of a bye pair in slot one."""
    one, two = pair
    if one is None:
        return two, None
    return one, two


class RoundRobinStrategy(FormatStrategy):
    """Everyone plays everyone, once or twice."""

    format_name = FORMAT_ROUND_ROBIN

    def setup(self, tournament: Tournament) -> None:
        """Materialise the whole schedule as inactive matches."""
        super().setup(tournament)
        if tournament.matches:
            raise TournamentStateException("Round-robin schedule already exists")

        config = tournament.config
        players = tournament.active_players()
        if config.sorting != SORT_NONE:
            players = sorted(players, key=lambda p: seed_key(p, config.sorting))

        schedule = circle_schedule([p.id for p in players], config.double_round_robin)
        for round_number, pairs in enumerate(schedule, start=1):
            for number, pair in enumerate(pairs, start=1):
                one, two = normalize_bye(pair)
                tournament.new_match(round_number, number, one, two)

        config.num_rounds = len(schedule)
        logger.info(
            f"Round-robin schedule built: {len(players)} players, {len(schedule)} rounds"
        )

    def total_rounds(self, tournament: Tournament) -> Optional[int]:
        if not tournament.matches:
            return None
        return max(match.round for match in tournament.matches)

    def generate_round(self, tournament: Tournament, round_number: int) -> PairingResult:
        return PairingResult(
            round_number=round_number,
            matches=tournament.matches_for_round(round_number),
        )
