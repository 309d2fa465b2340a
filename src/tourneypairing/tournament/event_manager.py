"""Registry of the tournaments run by one organiser."""

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

from typing import Any, Dict, List, Optional

from tourneypairing.constants import ID_LENGTH
from tourneypairing.exceptions import DuplicateTournamentId, TournamentNotFoundException
from tourneypairing.models import TournamentConfig
from tourneypairing.tournament.tournament import Tournament
from tourneypairing.type_hints import IdGenerator, Shuffler
from tourneypairing.utils import generate_unique_id, random_string, setup_logger

logger = setup_logger(__name__)


class EventManager:
    """Keeps tournaments by id.

    The id generator and shuffle given here are handed to every tournament
    the manager creates or reloads.
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        shuffle: Optional[Shuffler] = None,
    ) -> None:
        self.id_generator: IdGenerator = id_generator or random_string
        self.shuffle = shuffle
        self.tournaments: Dict[str, Tournament] = {}

    def create_tournament(
        self,
        config: Optional[TournamentConfig] = None,
        tournament_id: Optional[str] = None,
    ) -> Tournament:
        """Create and register a tournament.

        Args:
            config: Tournament settings, defaults to a Swiss event
            tournament_id: Explicit id, a fresh one is generated when omitted

        Raises:
            DuplicateTournamentId: If ``tournament_id`` is already registered
            ConfigurationError: If the settings are inconsistent
        """
        if tournament_id is None:
            tournament_id = generate_unique_id(
                self.tournaments, ID_LENGTH, self.id_generator
            )
        elif tournament_id in self.tournaments:
            logger.error(f"Tournament id {tournament_id} already exists")
            raise DuplicateTournamentId(f"Tournament id {tournament_id} already exists")

        tournament = Tournament(
            config=config,
            tournament_id=tournament_id,
            id_generator=self.id_generator,
            shuffle=self.shuffle,
        )
        self.tournaments[tournament.id] = tournament
        logger.info(f"Created {tournament.format} tournament {tournament.id}")
        return tournament

    def get_tournament(self, tournament_id: str) -> Tournament:
        try:
            return self.tournaments[tournament_id]
        except KeyError:
            raise TournamentNotFoundException(
                f"No tournament with id {tournament_id}"
            ) from None

    def list_tournaments(self) -> List[Tournament]:
        return list(self.tournaments.values())

    def remove_tournament(self, tournament_id: str) -> Tournament:
        """Unregister a tournament and return it.

        Raises:
            TournamentNotFoundException: If the id is unknown
        """
        tournament = self.get_tournament(tournament_id)
        del self.tournaments[tournament_id]
        logger.info(f"Removed tournament {tournament_id}")
        return tournament

    def reload_tournament(self, data: Dict[str, Any]) -> Tournament:
        """Rebuild a tournament from exported data and register it.

        A tournament already registered under the same id is replaced.
        """
        tournament = Tournament.from_dict(
            data, id_generator=self.id_generator, shuffle=self.shuffle
        )
        if tournament.id in self.tournaments:
            logger.info(f"Replacing tournament {tournament.id} with reloaded data")
        self.tournaments[tournament.id] = tournament
        return tournament
