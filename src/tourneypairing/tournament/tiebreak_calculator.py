"""Tiebreak calculation for tournaments.

This module handles calculation of the tiebreak systems used to order
players on equal match points.
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

import math
from typing import List, Tuple

from tourneypairing.constants import (
    COMPUTED_TIEBREAKS,
    MTG_PCT_FLOOR,
    OUTCOME_DRAW,
    OUTCOME_WIN,
    POKEMON_PCT_FLOOR,
    TB_CUMULATIVE,
    TB_CUT_ONE,
    TB_GAME_WIN_PCT,
    TB_MATCH_WIN_PCT_M,
    TB_MATCH_WIN_PCT_P,
    TB_MEDIAN,
    TB_NEUSTADTL,
    TB_OPP_CUMULATIVE,
    TB_OPP_GAME_WIN_PCT,
    TB_OPP_MATCH_WIN_PCT_M,
    TB_OPP_MATCH_WIN_PCT_P,
    TB_OPP_OPP_MATCH_WIN_PCT,
    TB_SOLKOFF,
    WIN_VALUE,
)
from tourneypairing.player import Player
from tourneypairing.type_hints import PlayerMap, TiebreakTable
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


def _mean(values: List[float]) -> float:
    return math.fsum(values) / len(values) if values else 0.0


class TiebreakCalculator:
    """Calculates tiebreak scores for tournament standings.

    This class implements:

    Percentage based (card game style):
    - Match win % with byes (floor 1/3) and without byes (floor 1/4)
    - Opponents' match win %, both variants
    - Game win % and opponents' game win %
    - Opponents' opponents' match win %

    Point based (chess style):
    - Solkoff: sum of opponents' match points
    - Median: Solkoff dropping highest and lowest
    - Cut-1: Solkoff dropping the lowest
    - Neustadtl (Sonneborn-Berger): defeated opponents' points plus half of
      drawn opponents' points
    - Cumulative: sum of the running score after each round, and the
      opponents' sum of it

    :meth:`compute` is a pure function of the players passed in; sums go
    through ``math.fsum`` so the same snapshot always yields the same bits.
    """

    def __init__(self, win_value: float = WIN_VALUE) -> None:
        self.win_value = win_value

    def calculate_all_tiebreaks(self, players: PlayerMap) -> TiebreakTable:
        """Compute tiebreaks and store a copy on each player.

        Args:
            players: Dictionary of all players (id -> Player)

        Returns:
            The computed table (player id -> tiebreak values)
        """
        table = self.compute(players)
        for player_id, values in table.items():
            players[player_id].tiebreakers = dict(values)
        return table

    def compute(self, players: PlayerMap) -> TiebreakTable:
        """Compute every tiebreak for every player without mutating anything.

        Args:
            players: Dictionary of all players (id -> Player)

        Returns:
            Dictionary of player id -> {tiebreak key: value}
        """
        table: TiebreakTable = {}

        # Pass 1: values that only need the player's own record
        for player in players.values():
            table[player.id] = {
                TB_MATCH_WIN_PCT_M: self._match_win_pct(player, include_byes=True),
                TB_MATCH_WIN_PCT_P: self._match_win_pct(player, include_byes=False),
                TB_GAME_WIN_PCT: self._game_win_pct(player),
                TB_CUMULATIVE: self._cumulative(player),
            }

        # Pass 2: values over opponents' own records
        for player in players.values():
            values = table[player.id]
            opponents = self._opponent_results(player, players)
            opponent_points = [players[opp_id].match_points for opp_id, _ in opponents]

            values[TB_OPP_MATCH_WIN_PCT_M] = _mean(
                [table[opp_id][TB_MATCH_WIN_PCT_M] for opp_id, _ in opponents]
            )
            values[TB_OPP_MATCH_WIN_PCT_P] = _mean(
                [table[opp_id][TB_MATCH_WIN_PCT_P] for opp_id, _ in opponents]
            )
            values[TB_OPP_GAME_WIN_PCT] = _mean(
                [table[opp_id][TB_GAME_WIN_PCT] for opp_id, _ in opponents]
            )
            values[TB_SOLKOFF] = math.fsum(opponent_points)
            values[TB_MEDIAN] = self._median(opponent_points)
            values[TB_CUT_ONE] = self._cut_one(opponent_points)
            values[TB_NEUSTADTL] = self._neustadtl(opponents, players)
            values[TB_OPP_CUMULATIVE] = math.fsum(
                table[opp_id][TB_CUMULATIVE] for opp_id, _ in opponents
            )

        # Pass 3: opponents' opponents
        for player in players.values():
            opponents = self._opponent_results(player, players)
            table[player.id][TB_OPP_OPP_MATCH_WIN_PCT] = _mean(
                [table[opp_id][TB_OPP_MATCH_WIN_PCT_M] for opp_id, _ in opponents]
            )

        for values in table.values():
            assert set(values) == set(COMPUTED_TIEBREAKS)
        return table

    def _opponent_results(
        self, player: Player, players: PlayerMap
    ) -> List[Tuple[str, str]]:
        """(opponent_id, outcome) for every played match against a known player."""
        return [
            (entry.opponent_id, entry.outcome)
            for entry in player.results
            if entry.opponent_id is not None and entry.opponent_id in players
        ]

    def _match_win_pct(self, player: Player, include_byes: bool) -> float:
        """Match points over the maximum possible, clamped to a floor.

        With byes the floor is 1/3, without byes it is 1/4.
        """
        entries = [e for e in player.results if include_byes or not e.is_bye]
        if not entries:
            return 0.0
        floor = MTG_PCT_FLOOR if include_byes else POKEMON_PCT_FLOOR
        pct = math.fsum(e.match_points for e in entries) / (
            len(entries) * self.win_value
        )
        return max(floor, pct)

    def _game_win_pct(self, player: Player) -> float:
        if player.games == 0:
            return 0.0
        return max(MTG_PCT_FLOOR, player.game_points / (player.games * self.win_value))

    def _cumulative(self, player: Player) -> float:
        """Sum of the running match-point total after each round."""
        totals = []
        score = 0.0
        for entry in player.results:
            score = math.fsum((score, entry.match_points))
            totals.append(score)
        return math.fsum(totals)

    def _median(self, opponent_points: List[float]) -> float:
        """Solkoff dropping both the highest and lowest opponent scores."""
        if len(opponent_points) <= 2:
            return math.fsum(opponent_points)
        return math.fsum(sorted(opponent_points)[1:-1])

    def _cut_one(self, opponent_points: List[float]) -> float:
        """Solkoff dropping the lowest opponent score."""
        if len(opponent_points) <= 1:
            return math.fsum(opponent_points)
        return math.fsum(sorted(opponent_points)[1:])

    def _neustadtl(
        self, opponents: List[Tuple[str, str]], players: PlayerMap
    ) -> float:
        """Defeated opponents' points plus half of drawn opponents' points."""
        parts = []
        for opp_id, outcome in opponents:
            if outcome == OUTCOME_WIN:
                parts.append(players[opp_id].match_points)
            elif outcome == OUTCOME_DRAW:
                parts.append(0.5 * players[opp_id].match_points)
        return math.fsum(parts)

    def calculate_head_to_head(self, player1: Player, player2: Player) -> Tuple[int, int]:
        """Count head-to-head match wins between two players.

        Args:
            player1: First player
            player2: Second player

        Returns:
            Tuple of (player1 wins, player2 wins)
        """
        p1_wins = 0
        p2_wins = 0
        for entry in player1.results:
            if entry.opponent_id != player2.id:
                continue
            if entry.outcome == OUTCOME_WIN:
                p1_wins += 1
            elif entry.outcome != OUTCOME_DRAW:
                p2_wins += 1
        return p1_wins, p2_wins
