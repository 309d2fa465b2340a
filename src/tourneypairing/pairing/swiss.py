"""Swiss pairing.

Players are ranked by match points and paired down the ranking with a
bounded depth-first search that never repeats a pairing unless no other
pairing exists and repeats are allowed.
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

import math
from typing import TYPE_CHECKING, List, Optional, Tuple

from tourneypairing.constants import FORMAT_SWISS, SORT_NONE, SWISS_FOLD
from tourneypairing.exceptions import PairingImpossible
from tourneypairing.models import PairingResult
from tourneypairing.pairing.base import FormatStrategy, seed_key
from tourneypairing.player import Player
from tourneypairing.type_hints import Players
from tourneypairing.utils import setup_logger

if TYPE_CHECKING:
    from tourneypairing.tournament.tournament import Tournament

logger = setup_logger(__name__)

Pairs = List[Tuple[Player, Player]]


def default_round_count(num_players: int) -> int:
    """``ceil(log2(n))`` rounds, at least one."""
    return max(1, math.ceil(math.log2(max(num_players, 2))))


def assign_sides(higher: Player, lower: Player) -> Tuple[Player, Player]:
    """Order a pair as (side one, side two).

    The player who has played side one more often takes side two; on equal
    preference the higher-ranked player keeps side one.
    """
    if higher.color_preference > lower.color_preference:
        return lower, higher
    return higher, lower


class PairingSearch:
    """Depth-first search for a perfect pairing of a ranked list.

    The top remaining player is always paired first; candidates are tried in
    order and the most recent pair is undone when a branch dead-ends.
    ``limit`` caps the number of candidate expansions across every call to
    :meth:`run`.
    """

    def __init__(self, mode: str, limit: int, allow_repeats: bool = False) -> None:
        self.mode = mode
        self.limit = limit
        self.allow_repeats = allow_repeats
        self.nodes = 0

    @property
    def exhausted(self) -> bool:
        return self.nodes >= self.limit

    def run(self, players: Players) -> Optional[Pairs]:
        pairs: Pairs = []
        if self._extend(list(players), pairs):
            return pairs
        return None

    def _extend(self, remaining: Players, pairs: Pairs) -> bool:
        if not remaining:
            return True
        top = remaining[0]
        for candidate in self._candidates(top, remaining):
            if self.exhausted:
                return False
            self.nodes += 1
            pairs.append((top, candidate))
            rest = [p for p in remaining[1:] if p is not candidate]
            if self._extend(rest, pairs):
                return True
            pairs.pop()
        return False

    def _candidates(self, top: Player, remaining: Players) -> Players:
        others = remaining[1:]
        if self.mode == SWISS_FOLD:
            group = [p for p in others if p.match_points == top.match_points]
            half = (len(group) + 1) // 2
            outside = [p for p in others if p.match_points != top.match_points]
            # top v middle of its score group first, then outward
            others = group[half - 1 :] + group[: half - 1][::-1] + outside

        fresh = [p for p in others if not top.has_played(p.id)]
        if not self.allow_repeats:
            return fresh
        return fresh + [p for p in others if top.has_played(p.id)]


class SwissStrategy(FormatStrategy):
    """Swiss system with score ranking, rematch avoidance and side balancing."""

    format_name = FORMAT_SWISS

    def setup(self, tournament: Tournament) -> None:
        super().setup(tournament)
        config = tournament.config
        if config.num_rounds is None:
            config.num_rounds = default_round_count(len(tournament.active_players()))
            logger.info(f"Swiss event set to {config.num_rounds} rounds")

    def total_rounds(self, tournament: Tournament) -> Optional[int]:
        return tournament.config.num_rounds

    def rank_players(self, tournament: Tournament, round_number: int) -> Players:
        """Active players in pairing order, best first."""
        config = tournament.config
        active = tournament.active_players()
        if config.sorting != SORT_NONE:
            return sorted(
                active, key=lambda p: (-p.match_points, seed_key(p, config.sorting))
            )
        if round_number == 1 and not tournament.matches:
            ranked = list(active)
            tournament.shuffle(ranked)
            return ranked
        tournament.compute_tiebreakers()
        return self.compute_standings_order(
            tournament, active, config.effective_tiebreak_order
        )

    def generate_round(self, tournament: Tournament, round_number: int) -> PairingResult:
        """Pair the active field for ``round_number``.

        Raises:
            PairingImpossible: If no pairing exists within the rules in force
        """
        config = tournament.config
        ranked = self.rank_players(tournament, round_number)
        sitting_out = [p for p in ranked if p.initial_byes >= round_number]
        pool = [p for p in ranked if p.initial_byes < round_number]

        warnings: List[str] = []
        search = PairingSearch(config.swiss_pairing, config.swiss_search_limit)
        pairs, bye = self._pair_with_bye(pool, search)
        if pairs is None:
            if not config.allow_repeat_pairings:
                logger.error(
                    f"No pairing without rematches for round {round_number} "
                    f"({search.nodes} nodes searched)"
                )
                raise PairingImpossible(
                    f"Round {round_number} cannot be paired without repeat pairings"
                )
            search = PairingSearch(
                config.swiss_pairing, config.swiss_search_limit, allow_repeats=True
            )
            pairs, bye = self._pair_with_bye(pool, search)
            if pairs is None:
                raise PairingImpossible(
                    f"Round {round_number} cannot be paired "
                    f"within {config.swiss_search_limit} search steps"
                )
            for one, two in pairs:
                if one.has_played(two.id):
                    message = (
                        f"Round {round_number}: repeat pairing {one.alias} vs {two.alias}"
                    )
                    logger.warning(message)
                    warnings.append(message)

        if bye is not None and bye.byes > 0:
            message = f"Round {round_number}: second bye assigned to {bye.alias}"
            logger.warning(message)
            warnings.append(message)

        matches = []
        for number, (higher, lower) in enumerate(pairs, start=1):
            if config.colors:
                one, two = assign_sides(higher, lower)
            else:
                one, two = higher, lower
            matches.append(tournament.new_match(round_number, number, one.id, two.id))
            logger.debug(f"Round {round_number} board {number}: {one.alias} - {two.alias}")

        resting = sitting_out + ([bye] if bye is not None else [])
        for number, player in enumerate(resting, start=len(pairs) + 1):
            matches.append(tournament.new_match(round_number, number, player.id, None))

        return PairingResult(round_number=round_number, matches=matches, warnings=warnings)

    def _pair_with_bye(
        self, pool: Players, search: PairingSearch
    ) -> Tuple[Optional[Pairs], Optional[Player]]:
        """Pair ``pool``, removing one bye player first when it is odd.

        The bye goes to the lowest-ranked player without a bye whose removal
        leaves a pairable field; players who already had one are tried last.
        """
        if len(pool) % 2 == 0:
            return search.run(pool), None

        bottom_up = pool[::-1]
        candidates = [p for p in bottom_up if p.byes == 0]
        candidates += [p for p in bottom_up if p.byes > 0]
        for candidate in candidates:
            pairs = search.run([p for p in pool if p is not candidate])
            if pairs is not None:
                return pairs, candidate
            if search.exhausted:
                break
        return None, None
