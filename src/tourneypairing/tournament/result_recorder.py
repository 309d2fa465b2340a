"""Result recording for tournaments.

This module handles submitting and clearing match results, validating them
before anything is touched.
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

from typing import TYPE_CHECKING

from tourneypairing.exceptions import (
    InvalidMatch,
    InvalidPlayerSlot,
    InvalidResultException,
    MatchAlreadyResolved,
    MatchNotActive,
)
from tourneypairing.models import Match
from tourneypairing.pairing import FormatStrategy
from tourneypairing.utils import setup_logger

if TYPE_CHECKING:
    from tourneypairing.tournament.tournament import Tournament

logger = setup_logger(__name__)


class ResultRecorder:
    """Handles recording and validating match results.

    This class is responsible for:
    - Rejecting results for unknown, closed or unstarted matches
    - Rejecting malformed game counts
    - Updating both players through the match
    - Reversing results exactly
    """

    def __init__(self, strategy: FormatStrategy) -> None:
        self.strategy = strategy

    def submit(
        self,
        tournament: Tournament,
        match_id: str,
        player_one_wins: int,
        player_two_wins: int,
        draws: int = 0,
    ) -> Match:
        """Record the result of an active match.

        Raises:
            InvalidMatch: If the match id is unknown
            MatchAlreadyResolved: If the match already has a result
            InvalidPlayerSlot: If a slot is empty
            MatchNotActive: If the match's round has not started
            InvalidResultException: If the game counts are unusable
        """
        match = tournament.get_match(match_id)
        if match.completed:
            raise MatchAlreadyResolved(f"Match {match_id} already has a result")
        if not match.is_ready:
            raise InvalidPlayerSlot(f"Match {match_id} is missing a player")
        if not match.active:
            raise MatchNotActive(f"Match {match_id} is not open for results")
        self._validate_counts(match, player_one_wins, player_two_wins, draws)
        self.strategy.validate_result(
            tournament, match, player_one_wins, player_two_wins, draws
        )

        config = tournament.config
        match.record_result(
            player_one_wins,
            player_two_wins,
            draws,
            tournament.players,
            config.win_value,
            config.loss_value,
            config.draw_value,
            track_colors=config.colors,
        )
        self.strategy.on_result(tournament, match)
        logger.info(
            f"Result for match {match_id}: {player_one_wins}-{player_two_wins}-{draws}"
        )
        return match

    def clear(self, tournament: Tournament, match_id: str) -> Match:
        """Reverse the result of a played match and reopen it.

        Raises:
            InvalidMatch: If the match id is unknown, has no result, or is a bye
            TournamentStateException: If a later match depends on the result
        """
        match = tournament.get_match(match_id)
        if not match.completed:
            raise InvalidMatch(f"Match {match_id} has no result to clear")
        if match.bye:
            raise InvalidMatch(f"Match {match_id} is a bye and cannot be cleared")
        self.strategy.check_clear(tournament, match)

        self.strategy.on_clear(tournament, match)
        match.clear_result(tournament.players)
        logger.info(f"Cleared result of match {match_id}")
        return match

    def _validate_counts(
        self, match: Match, player_one_wins: int, player_two_wins: int, draws: int
    ) -> None:
        counts = (player_one_wins, player_two_wins, draws)
        if not all(isinstance(c, int) and not isinstance(c, bool) for c in counts):
            raise InvalidResultException(
                f"Game counts for match {match.id} must be integers, got {counts}"
            )
        if min(counts) < 0:
            logger.error(f"Negative game count for match {match.id}: {counts}")
            raise InvalidResultException(
                f"Game counts for match {match.id} must not be negative, got {counts}"
            )
