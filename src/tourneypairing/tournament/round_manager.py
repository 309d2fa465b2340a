"""Round management for tournaments.

This module handles round progression: checking that the previous round is
finished, asking the format for the next round and resolving the matches a
missing or dropped player cannot play.
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

from typing import TYPE_CHECKING, List

from tourneypairing.exceptions import TournamentStateException
from tourneypairing.models import Match, PairingResult
from tourneypairing.pairing import FormatStrategy
from tourneypairing.utils import setup_logger

if TYPE_CHECKING:
    from tourneypairing.tournament.tournament import Tournament

logger = setup_logger(__name__)


class RoundManager:
    """Manages round progression for a tournament.

    This class is responsible for:
    - Refusing to start a round while the current one is unfinished
    - Running the format's one-time setup before the first round
    - Activating the round's matches
    - Turning matches with an absent player into byes
    """

    def __init__(self, strategy: FormatStrategy) -> None:
        self.strategy = strategy

    def unfinished_matches(self, tournament: Tournament) -> List[Match]:
        """Matches of started rounds still waiting for a result."""
        return [
            m
            for m in tournament.matches
            if m.round <= tournament.current_round and not m.completed
        ]

    def start_round(self, tournament: Tournament) -> PairingResult:
        """Generate and open the next round.

        Returns:
            The round's matches, the players credited with a bye and any
            pairing warnings

        Raises:
            TournamentStateException: If the event is over or the current
                round still has open matches
            ConfigurationError: If the roster cannot start this format
            PairingImpossible: If a Swiss round cannot be paired
        """
        if tournament.is_complete:
            raise TournamentStateException("Tournament is already complete")

        open_matches = self.unfinished_matches(tournament)
        if open_matches:
            logger.error(
                f"Round {tournament.current_round}: still "
                f"{len(open_matches)} open matches"
            )
            raise TournamentStateException(
                f"Round {tournament.current_round} is not finished: "
                f"{len(open_matches)} matches without a result"
            )

        if tournament.current_round == 0:
            self.strategy.setup(tournament)

        total = self.strategy.total_rounds(tournament)
        if total is not None and tournament.current_round >= total:
            raise TournamentStateException(f"All {total} rounds have been played")

        round_number = tournament.current_round + 1
        result = self.strategy.generate_round(tournament, round_number)
        tournament.current_round = round_number

        for match in result.matches:
            if match.completed:
                if match.winner_id is not None and match.bye:
                    result.byes.append(match.winner_id)
                continue
            self._open_match(tournament, match, result)

        logger.info(
            f"Round {round_number} started: {len(result.pairing_ids)} matches, "
            f"{len(result.byes)} byes"
        )
        return result

    def _open_match(
        self, tournament: Tournament, match: Match, result: PairingResult
    ) -> None:
        """Activate ``match`` or resolve it when a side cannot play."""
        config = tournament.config
        present = [
            slot
            for slot in (1, 2)
            if match.get_slot(slot) is not None
            and tournament.players[match.get_slot(slot)].active
        ]
        if len(present) == 2:
            match.active = True
            return

        if present:
            player_id = match.assign_bye(
                present[0], tournament.players, config.win_value, config.bye_game_wins
            )
            result.byes.append(player_id)
            logger.debug(f"Round {match.round}: bye for {player_id}")
        else:
            match.void()
        self.strategy.on_result(tournament, match)
