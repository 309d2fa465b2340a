"""Core tournament class.

This module contains the main Tournament class that coordinates all
tournament operations through the round manager, the result recorder and
the tiebreak calculator.
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

from typing import Any, Dict, List, Optional, Sequence

from tourneypairing.constants import (
    BRACKET_MAIN,
    FORMAT_SWISS,
    ID_LENGTH,
    TIEBREAK_KEYS,
)
from tourneypairing.exceptions import (
    ConfigurationError,
    DuplicatePlayerId,
    InvalidMatch,
    PlayerNotFoundException,
    TournamentStateException,
)
from tourneypairing.models import Match, PairingResult, TournamentConfig
from tourneypairing.pairing import create_strategy
from tourneypairing.player import Player
from tourneypairing.tournament.result_recorder import ResultRecorder
from tourneypairing.tournament.round_manager import RoundManager
from tourneypairing.tournament.tiebreak_calculator import TiebreakCalculator
from tourneypairing.type_hints import IdGenerator, Players, Shuffler, TiebreakTable
from tourneypairing.utils import (
    generate_unique_id,
    random_string,
    setup_logger,
)
from tourneypairing.utils import shuffle as random_shuffle

logger = setup_logger(__name__)


class Tournament:
    """Main tournament management class.

    This class coordinates all tournament operations through specialized
    helpers:
    - FormatStrategy: builds rounds and moves players through a bracket
    - RoundManager: handles round progression and byes
    - ResultRecorder: manages result entry and correction
    - TiebreakCalculator: computes tiebreak scores

    Id generation and shuffling are injected so callers (and tests) can make
    an event fully deterministic.
    """

    def __init__(
        self,
        config: Optional[TournamentConfig] = None,
        tournament_id: Optional[str] = None,
        id_generator: Optional[IdGenerator] = None,
        shuffle: Optional[Shuffler] = None,
    ) -> None:
        """Initialize a new tournament.

        Args
        ----
        config: Tournament settings, defaults to a Swiss event
        tournament_id: Event id, generated when omitted
        id_generator: ``length -> str`` source for player and match ids
        shuffle: In-place shuffle used for unseeded events

        Raises
        ------
        ConfigurationError: If the settings are inconsistent
        """
        self.config = config if config is not None else TournamentConfig()
        self.config.validate()

        self.id_generator: IdGenerator = id_generator or random_string
        self.shuffle: Shuffler = shuffle or random_shuffle
        self.id: str = tournament_id or self.id_generator(ID_LENGTH)

        self.players: Dict[str, Player] = {}
        self.matches: List[Match] = []
        self.current_round: int = 0

        # Specialized helpers
        self.strategy = create_strategy(self.config.format)
        self.round_manager = RoundManager(self.strategy)
        self.result_recorder = ResultRecorder(self.strategy)
        self.tiebreak_calculator = TiebreakCalculator(self.config.win_value)

    # ========== Properties ==========

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def format(self) -> str:
        return self.config.format

    @property
    def tournament_over(self) -> bool:
        return self.config.tournament_over

    @property
    def is_complete(self) -> bool:
        """True once the format's end condition holds."""
        return self.strategy.is_complete(self)

    @property
    def has_started(self) -> bool:
        return self.current_round > 0

    # ========== Player Management ==========

    def create_player(
        self,
        alias: str,
        player_id: Optional[str] = None,
        seed: Optional[float] = None,
        initial_byes: int = 0,
    ) -> Player:
        """Register a new player.

        Args:
            alias: Display name
            player_id: Explicit id, generated when omitted
            seed: Optional seeding value
            initial_byes: Opening rounds the player sits out with a bye

        Returns:
            The new player

        Raises:
            DuplicatePlayerId: If ``player_id`` is already registered
            TournamentStateException: If the roster is closed or full
        """
        if player_id is not None and player_id in self.players:
            logger.error(f"Duplicate player id {player_id}")
            raise DuplicatePlayerId(f"Player id {player_id} is already registered")
        if self.has_started and self.config.format != FORMAT_SWISS:
            raise TournamentStateException(
                f"Cannot add players to a {self.config.format} event after it started"
            )
        max_players = self.config.max_players
        if max_players is not None and len(self.players) >= max_players:
            raise TournamentStateException(f"Tournament is full ({max_players} players)")
        if initial_byes < 0:
            raise ConfigurationError(
                f"initial_byes must not be negative, got {initial_byes}"
            )

        if player_id is None:
            player_id = generate_unique_id(self.players, ID_LENGTH, self.id_generator)
        player = Player(alias, player_id, seed=seed, initial_byes=initial_byes)
        self.players[player.id] = player
        logger.info(f"Added player {player.alias} ({player.id})")
        return player

    def get_player(self, player_id: str) -> Player:
        """Look up a player.

        Raises:
            PlayerNotFoundException: If the id is unknown
        """
        try:
            return self.players[player_id]
        except KeyError:
            raise PlayerNotFoundException(f"No player with id {player_id}") from None

    def drop_player(self, player_id: str) -> Player:
        """Withdraw a player from future pairings.

        Results already recorded stay. A dropped player's future matches are
        resolved as byes for their opponents when their round starts.
        """
        player = self.get_player(player_id)
        if not player.active:
            logger.warning(f"Player {player.alias} already dropped")
            return player
        player.active = False
        logger.info(f"Dropped player {player.alias} ({player.id})")
        return player

    def get_player_list(self, active_only: bool = False) -> Players:
        """Get list of players.

        Args:
            active_only: If True, only return active players
        """
        if active_only:
            return self.active_players()
        return list(self.players.values())

    def active_players(self) -> Players:
        return [p for p in self.players.values() if p.active]

    # ========== Match Management ==========

    def new_match(
        self,
        round_number: int,
        match_number: int,
        player_one: Optional[str] = None,
        player_two: Optional[str] = None,
        bracket: str = BRACKET_MAIN,
    ) -> Match:
        """Create a match, append it to the match list and return it."""
        assert all(
            (m.round, m.match_number) != (round_number, match_number)
            for m in self.matches
        ), f"duplicate match {round_number}.{match_number}"
        match_id = generate_unique_id(
            {m.id for m in self.matches}, ID_LENGTH, self.id_generator
        )
        match = Match(
            id=match_id,
            round=round_number,
            match_number=match_number,
            player_one=player_one,
            player_two=player_two,
            bracket=bracket,
        )
        self.matches.append(match)
        return match

    def get_match(self, match_id: str) -> Match:
        """Look up a match.

        Raises:
            InvalidMatch: If the id is unknown
        """
        for match in self.matches:
            if match.id == match_id:
                return match
        raise InvalidMatch(f"No match with id {match_id}")

    def matches_for_round(self, round_number: int) -> List[Match]:
        return [m for m in self.matches if m.round == round_number]

    def matches_for_player(self, player_id: str) -> List[Match]:
        return [m for m in self.matches if m.has_player(player_id)]

    # ========== Round Management ==========

    def start_round(self) -> PairingResult:
        """Generate and open the next round.

        Returns:
            PairingResult with the round's matches, byes and warnings
        """
        result = self.round_manager.start_round(self)
        # Byes and voids can finish a bracket without a submitted result
        self._update_completion()
        return result

    # ========== Results ==========

    def submit_result(
        self,
        match_id: str,
        player_one_wins: int,
        player_two_wins: int,
        draws: int = 0,
    ) -> Match:
        """Record a match result. See :meth:`ResultRecorder.submit`."""
        match = self.result_recorder.submit(
            self, match_id, player_one_wins, player_two_wins, draws
        )
        self._update_completion()
        return match

    def clear_result(self, match_id: str) -> Match:
        """Reverse a match result. See :meth:`ResultRecorder.clear`."""
        match = self.result_recorder.clear(self, match_id)
        self._update_completion()
        return match

    def _update_completion(self) -> None:
        over = self.is_complete
        if over and not self.config.tournament_over:
            logger.info(f"Tournament {self.name} is complete")
        self.config.tournament_over = over

    # ========== Standings ==========

    def compute_tiebreakers(self) -> TiebreakTable:
        """Calculate tiebreak scores for all players."""
        return self.tiebreak_calculator.calculate_all_tiebreaks(self.players)

    def standings(
        self,
        tiebreak_order: Optional[Sequence[str]] = None,
        active_only: bool = False,
    ) -> Players:
        """Get current tournament standings.

        Args:
            tiebreak_order: Tiebreak keys to apply after match points, the
                configured order when omitted
            active_only: Leave dropped players out

        Returns:
            List of players sorted by rank (best to worst)

        Raises:
            ConfigurationError: If an unknown tiebreak key is requested
        """
        if tiebreak_order is None:
            order = self.config.effective_tiebreak_order
        else:
            order = list(tiebreak_order)
            unknown = [key for key in order if key not in TIEBREAK_KEYS]
            if unknown:
                raise ConfigurationError(f"Unknown tiebreak keys: {unknown}")

        players = self.get_player_list(active_only=active_only)
        if not players:
            return []

        self.compute_tiebreakers()
        return self.strategy.compute_standings_order(self, players, order)

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary.

        Returns:
            Dictionary containing all tournament data
        """
        return {
            "id": self.id,
            "config": self.config.to_dict(),
            "current_round": self.current_round,
            "players": [p.to_dict() for p in self.players.values()],
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        id_generator: Optional[IdGenerator] = None,
        shuffle: Optional[Shuffler] = None,
    ) -> "Tournament":
        """Deserialize tournament from dictionary.

        Args:
            data: Dictionary produced by :meth:`to_dict`
            id_generator: Id source for anything created after loading
            shuffle: Shuffle used for anything paired after loading

        Returns:
            Reconstructed Tournament object
        """
        config = TournamentConfig.from_dict(data.get("config", {}))
        tournament = cls(
            config=config,
            tournament_id=data.get("id"),
            id_generator=id_generator,
            shuffle=shuffle,
        )
        for p_data in data.get("players", []):
            player = Player.from_dict(p_data)
            tournament.players[player.id] = player
        tournament.matches = [Match.from_dict(m) for m in data.get("matches", [])]
        tournament.current_round = data.get("current_round", 0)

        logger.info(f"Loaded tournament: {tournament.name}")
        return tournament

    def __repr__(self) -> str:
        return (
            f"Tournament(id='{self.id}', format='{self.format}', "
            f"players={len(self.players)}, round={self.current_round})"
        )
