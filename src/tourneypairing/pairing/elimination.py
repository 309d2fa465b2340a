"""Single and double elimination brackets.

The whole bracket is built when the first round starts. Every match knows
where its winner (and, in a double elimination winners bracket, its loser)
goes next through ``winner_path`` / ``loser_path``, which index the
tournament's match list. A match whose feeders have all finished but which
is still missing a player resolves on its own: as a bye when one player
arrived, as a void when none did.
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

import functools
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from tourneypairing.constants import (
    BRACKET_GRAND_FINAL,
    BRACKET_LOSERS,
    BRACKET_MAIN,
    BRACKET_RESET,
    BRACKET_THIRD_PLACE,
    BRACKET_WINNERS,
    FORMAT_ELIMINATION,
    SORT_NONE,
)
from tourneypairing.exceptions import (
    InvalidPlayerSlot,
    InvalidResultException,
    TournamentStateException,
)
from tourneypairing.models import Match, PairingResult
from tourneypairing.pairing.base import FormatStrategy, compare_players, seed_key
from tourneypairing.player import Player
from tourneypairing.utils import setup_logger

if TYPE_CHECKING:
    from tourneypairing.tournament.tournament import Tournament

logger = setup_logger(__name__)

WINNER = "winner"
LOSER = "loser"


@dataclass
class BracketNode:
    """A planned match, before it is added to a tournament."""

    bracket: str
    feeders: List[Tuple[int, str]] = field(default_factory=list)
    players: List[Optional[str]] = field(default_factory=lambda: [None, None])
    round: int = 1
    winner_path: Optional[int] = None
    winner_slot: Optional[int] = None
    loser_path: Optional[int] = None
    loser_slot: Optional[int] = None


def bracket_size(num_players: int) -> int:
    """Smallest power of two holding every player, at least 2."""
    return max(2, 1 << (num_players - 1).bit_length())


def seed_order(size: int) -> List[int]:
    """Seed numbers in bracket order, so 1 meets ``size`` and 2 meets ``size - 1``.

    >>> seed_order(8)
    [1, 8, 4, 5, 2, 7, 3, 6]
    """
    order = [1]
    while len(order) < size:
        total = 2 * len(order) + 1
        order = [x for seed in order for x in (seed, total - seed)]
    return order


def plan_bracket(
    entrants: Sequence[str],
    double: bool = False,
    third_place: bool = False,
    reset: bool = False,
) -> List[BracketNode]:
    """Lay out every match of a bracket.

    Args:
        entrants: Player ids, best seed first
        double: Add a losers bracket and grand final
        third_place: Play off the semifinal losers (single elimination only)
        reset: Add a second grand final (double elimination only)

    Returns:
        Nodes in creation order with rounds and paths filled in
    """
    size = bracket_size(len(entrants))
    nodes: List[BracketNode] = []

    def add(node: BracketNode) -> int:
        nodes.append(node)
        return len(nodes) - 1

    def pair_up(label: str, feeders: List[int], kind: str) -> List[int]:
        return [
            add(BracketNode(label, [(feeders[i], kind), (feeders[i + 1], kind)]))
            for i in range(0, len(feeders), 2)
        ]

    def seat(seed: int) -> Optional[str]:
        return entrants[seed - 1] if seed <= len(entrants) else None

    label = BRACKET_WINNERS if double else BRACKET_MAIN
    order = seed_order(size)
    first = [
        add(BracketNode(label, players=[seat(order[i]), seat(order[i + 1])]))
        for i in range(0, size, 2)
    ]
    winners = [first]
    while len(winners[-1]) > 1:
        winners.append(pair_up(label, winners[-1], WINNER))
    final = winners[-1][0]

    if third_place and not double and len(winners) >= 2:
        semis = winners[-2]
        add(BracketNode(BRACKET_THIRD_PLACE, [(semis[0], LOSER), (semis[1], LOSER)]))

    if double:
        if len(winners) == 1:
            # Two players: the loser goes straight to the grand final
            survivor = (final, LOSER)
        else:
            losers = [pair_up(BRACKET_LOSERS, winners[0], LOSER)]
            for drops in winners[1:]:
                previous = losers[-1]
                dropped = drops[::-1]
                losers.append(
                    [
                        add(
                            BracketNode(
                                BRACKET_LOSERS,
                                [(previous[m], WINNER), (dropped[m], LOSER)],
                            )
                        )
                        for m in range(len(previous))
                    ]
                )
                if len(losers[-1]) > 1:
                    losers.append(pair_up(BRACKET_LOSERS, losers[-1], WINNER))
            survivor = (losers[-1][0], WINNER)
        grand_final = add(BracketNode(BRACKET_GRAND_FINAL, [(final, WINNER), survivor]))
        if reset:
            add(BracketNode(BRACKET_RESET))

    for index, node in enumerate(nodes):
        if node.bracket == BRACKET_RESET:
            node.round = nodes[grand_final].round + 1
        elif node.feeders:
            node.round = 1 + max(nodes[f].round for f, _ in node.feeders)
        for slot, (feeder, kind) in enumerate(node.feeders, start=1):
            if kind == WINNER:
                nodes[feeder].winner_path = index
                nodes[feeder].winner_slot = slot
            else:
                nodes[feeder].loser_path = index
                nodes[feeder].loser_slot = slot
    return nodes


class EliminationStrategy(FormatStrategy):
    """Knockout bracket, single or double."""

    format_name = FORMAT_ELIMINATION

    def setup(self, tournament: Tournament) -> None:
        super().setup(tournament)
        if tournament.matches:
            raise TournamentStateException("Bracket already exists")

        config = tournament.config
        players = tournament.active_players()
        if config.sorting != SORT_NONE:
            players = sorted(players, key=lambda p: seed_key(p, config.sorting))
        else:
            players = list(players)
            tournament.shuffle(players)

        nodes = plan_bracket(
            [p.id for p in players],
            double=config.double_elimination,
            third_place=config.third_place_match,
            reset=config.bracket_reset,
        )
        base = len(tournament.matches)
        numbers: Dict[int, int] = defaultdict(int)
        for node in nodes:
            numbers[node.round] += 1
            match = tournament.new_match(
                node.round,
                numbers[node.round],
                node.players[0],
                node.players[1],
                bracket=node.bracket,
            )
            if node.winner_path is not None:
                match.winner_path = base + node.winner_path
                match.winner_slot = node.winner_slot
            if node.loser_path is not None:
                match.loser_path = base + node.loser_path
                match.loser_slot = node.loser_slot

        config.num_rounds = max(numbers)
        logger.info(
            f"Bracket built: {len(players)} players, {len(nodes)} matches, "
            f"{config.num_rounds} rounds"
        )

    def total_rounds(self, tournament: Tournament) -> Optional[int]:
        if not tournament.matches:
            return None
        return max(match.round for match in tournament.matches)

    def is_complete(self, tournament: Tournament) -> bool:
        return bool(tournament.matches) and all(
            match.completed for match in tournament.matches
        )

    def generate_round(self, tournament: Tournament, round_number: int) -> PairingResult:
        return PairingResult(
            round_number=round_number,
            matches=tournament.matches_for_round(round_number),
        )

    # ========== Result hooks ==========

    def validate_result(
        self,
        tournament: Tournament,
        match: Match,
        player_one_wins: int,
        player_two_wins: int,
        draws: int,
    ) -> None:
        """Reject draws and results whose advancement would collide.

        Raises:
            InvalidResultException: If the result is a draw
            InvalidPlayerSlot: If a downstream slot holds another player
        """
        if player_one_wins == player_two_wins:
            raise InvalidResultException(
                f"Match {match.id} needs a winner, got "
                f"{player_one_wins}-{player_two_wins}-{draws}"
            )
        if player_one_wins > player_two_wins:
            winner, loser = match.player_one, match.player_two
        else:
            winner, loser = match.player_two, match.player_one

        for path, slot, player_id in (
            (match.winner_path, match.winner_slot, winner),
            (match.loser_path, match.loser_slot, loser),
        ):
            if path is None:
                continue
            target = tournament.matches[path]
            current = target.get_slot(slot)
            if target.completed or (current is not None and current != player_id):
                raise InvalidPlayerSlot(
                    f"Slot {slot} of match {target.id} already holds {current}"
                )

    def on_result(self, tournament: Tournament, match: Match) -> None:
        self._advance(tournament, match)

    def check_clear(self, tournament: Tournament, match: Match) -> None:
        """Refuse to clear a result that a played match depends on.

        Raises:
            TournamentStateException: If a downstream match has been played
        """
        for target in self._downstream(tournament, match):
            if target.completed and not target.bye:
                raise TournamentStateException(
                    f"Match {target.id} depends on match {match.id} and has a result"
                )
            if target.completed:
                self.check_clear(tournament, target)

    def on_clear(self, tournament: Tournament, match: Match) -> None:
        self._retract_downstream(tournament, match)

    # ========== Bracket movement ==========

    def _downstream(self, tournament: Tournament, match: Match) -> List[Match]:
        targets = []
        if match.winner_path is not None and match.winner_id is not None:
            targets.append(tournament.matches[match.winner_path])
        if match.loser_path is not None and match.loser_id is not None:
            targets.append(tournament.matches[match.loser_path])
        if match.bracket == BRACKET_GRAND_FINAL:
            reset = self._reset_match(tournament)
            if reset is not None:
                targets.append(reset)
        return targets

    def _feeders(self, tournament: Tournament, index: int) -> List[Match]:
        return [
            m
            for m in tournament.matches
            if m.winner_path == index or m.loser_path == index
        ]

    def _reset_match(self, tournament: Tournament) -> Optional[Match]:
        for match in tournament.matches:
            if match.bracket == BRACKET_RESET:
                return match
        return None

    def _refresh_active(self, tournament: Tournament, match: Match) -> None:
        match.active = not match.completed and match.round <= tournament.current_round

    def _advance(self, tournament: Tournament, match: Match) -> None:
        """Move the winner and loser of a resolved match along their paths."""
        if match.bracket == BRACKET_GRAND_FINAL:
            self._settle_reset(tournament, match)

        moves = (
            (match.winner_path, match.winner_slot, match.winner_id),
            (match.loser_path, match.loser_slot, match.loser_id),
        )
        for path, slot, player_id in moves:
            if path is not None and player_id is not None:
                tournament.matches[path].set_slot(slot, player_id)
        for path, _, _ in moves:
            if path is not None:
                self._settle(tournament, path)

    def _settle(self, tournament: Tournament, index: int) -> None:
        """Resolve a match that can no longer receive a second player."""
        target = tournament.matches[index]
        if target.completed:
            return
        if target.is_ready or any(
            not feeder.completed for feeder in self._feeders(tournament, index)
        ):
            self._refresh_active(tournament, target)
            return

        config = tournament.config
        if target.player_one is not None:
            target.assign_bye(1, tournament.players, config.win_value, config.bye_game_wins)
        elif target.player_two is not None:
            target.assign_bye(2, tournament.players, config.win_value, config.bye_game_wins)
        else:
            target.void()
        logger.debug(f"Match {target.id} resolved without play")
        self._advance(tournament, target)

    def _settle_reset(self, tournament: Tournament, grand_final: Match) -> None:
        reset = self._reset_match(tournament)
        if reset is None:
            return
        if grand_final.winner_id == grand_final.player_one:
            # Winners bracket champion stays unbeaten
            reset.void()
            return
        reset.set_slot(1, grand_final.player_one)
        reset.set_slot(2, grand_final.player_two)
        self._refresh_active(tournament, reset)

    def _retract_downstream(self, tournament: Tournament, match: Match) -> None:
        if match.bracket == BRACKET_GRAND_FINAL:
            reset = self._reset_match(tournament)
            if reset is not None:
                if reset.completed:
                    reset.clear_bye(tournament.players)
                reset.player_one = None
                reset.player_two = None
                self._refresh_active(tournament, reset)
        if match.winner_path is not None and match.winner_id is not None:
            self._retract(tournament, match.winner_path, match.winner_slot)
        if match.loser_path is not None and match.loser_id is not None:
            self._retract(tournament, match.loser_path, match.loser_slot)

    def _retract(self, tournament: Tournament, index: int, slot: int) -> None:
        target = tournament.matches[index]
        if target.completed:
            assert target.bye, "played matches are rejected by check_clear"
            self._retract_downstream(tournament, target)
            target.clear_bye(tournament.players)
        target.set_slot(slot, None)
        self._refresh_active(tournament, target)

    # ========== Standings ==========

    def _eliminating(self, tournament: Tournament, match: Match) -> bool:
        if match.loser_path is not None or match.bracket == BRACKET_THIRD_PLACE:
            return False
        if match.bracket == BRACKET_GRAND_FINAL and match.loser_id == match.player_one:
            return self._reset_match(tournament) is None
        return True

    def placement(self, tournament: Tournament, player: Player) -> Tuple[int, int, int]:
        """Bracket placement, larger is better.

        Returns:
            (still alive, round eliminated in, third place tier)
        """
        for match in tournament.matches:
            if not match.completed or match.bye or not match.has_player(player.id):
                continue
            if match.bracket == BRACKET_THIRD_PLACE:
                return (0, match.round - 1, int(match.winner_id == player.id))
            if match.loser_id == player.id and self._eliminating(tournament, match):
                return (0, match.round, 0)
        if player.active:
            return (1, 0, 0)
        last_round = player.results[-1].round if player.results else 0
        return (0, last_round, 0)

    def compute_standings_order(
        self,
        tournament: Tournament,
        players: List[Player],
        tiebreak_order: Sequence[str],
    ) -> List[Player]:
        """Survivors first, then by elimination round, then points and tiebreaks."""
        placements = {p.id: self.placement(tournament, p) for p in players}

        def compare(p1: Player, p2: Player) -> int:
            if placements[p1.id] != placements[p2.id]:
                return 1 if placements[p1.id] > placements[p2.id] else -1
            return compare_players(
                p1,
                p2,
                tiebreak_order,
                tournament.tiebreak_calculator,
                tournament.config.sorting,
            )

        return sorted(players, key=functools.cmp_to_key(compare), reverse=True)
