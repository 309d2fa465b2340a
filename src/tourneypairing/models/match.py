"""Match data class."""

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

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from tourneypairing.constants import BRACKET_MAIN, SIDE_ONE, SIDE_TWO
from tourneypairing.exceptions import (
    InvalidMatch,
    InvalidPlayerSlot,
    InvalidResultException,
    MatchAlreadyResolved,
)
from tourneypairing.type_hints import PlayerMap
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class Match:
    """A single contest between two slots.

    ``winner_path`` and ``loser_path`` are indices into the owning
    tournament's match list; ``winner_slot`` / ``loser_slot`` say which side
    (1 or 2) of that match the advancing player takes.

    Attributes
    ----------
    id : str
        Unique match id.
    round : int
        Round the match belongs to.
    match_number : int
        Number of the match inside its round.
    player_one, player_two : str or None
        Player ids. None means a bye or a slot still waiting on a feeder.
    active : bool
        True while the match is open for a result.
    completed : bool
        True once a result, bye or void has been recorded.
    bye : bool
        True when the match was resolved as a bye.
    """

    id: str
    round: int
    match_number: int
    player_one: Optional[str] = None
    player_two: Optional[str] = None
    active: bool = False
    completed: bool = False
    bye: bool = False
    bye_slot: Optional[int] = None
    player_one_wins: int = 0
    player_two_wins: int = 0
    draws: int = 0
    winner_path: Optional[int] = None
    winner_slot: Optional[int] = None
    loser_path: Optional[int] = None
    loser_slot: Optional[int] = None
    bracket: str = BRACKET_MAIN

    # ========== Queries ==========

    @property
    def is_ready(self) -> bool:
        """Both slots are filled."""
        return self.player_one is not None and self.player_two is not None

    @property
    def is_empty(self) -> bool:
        return self.player_one is None and self.player_two is None

    @property
    def is_void(self) -> bool:
        """Closed without a result because no active player could play it."""
        return self.completed and self.bye and self.bye_slot is None

    @property
    def is_draw(self) -> bool:
        return (
            self.completed
            and not self.bye
            and self.is_ready
            and self.player_one_wins == self.player_two_wins
        )

    @property
    def winner_id(self) -> Optional[str]:
        """Winner of a completed match, the present player for a bye."""
        if not self.completed:
            return None
        if self.bye:
            return self.get_slot(self.bye_slot) if self.bye_slot else None
        if self.player_one_wins > self.player_two_wins:
            return self.player_one
        if self.player_two_wins > self.player_one_wins:
            return self.player_two
        return None

    @property
    def loser_id(self) -> Optional[str]:
        if not self.completed or self.bye:
            return None
        if self.player_one_wins > self.player_two_wins:
            return self.player_two
        if self.player_two_wins > self.player_one_wins:
            return self.player_one
        return None

    def has_player(self, player_id: str) -> bool:
        return player_id in (self.player_one, self.player_two)

    def slot_of(self, player_id: str) -> Optional[int]:
        if self.player_one == player_id:
            return 1
        if self.player_two == player_id:
            return 2
        return None

    def get_slot(self, slot: int) -> Optional[str]:
        return self.player_one if slot == 1 else self.player_two

    def set_slot(self, slot: int, player_id: Optional[str]) -> None:
        """Place ``player_id`` into slot 1 or 2.

        Raises:
            InvalidPlayerSlot: If the slot already holds a different player
        """
        current = self.get_slot(slot)
        if player_id is not None and current is not None and current != player_id:
            raise InvalidPlayerSlot(
                f"Slot {slot} of match {self.id} already holds {current}"
            )
        if slot == 1:
            self.player_one = player_id
        else:
            self.player_two = player_id

    # ========== Results ==========

    def record_result(
        self,
        player_one_wins: int,
        player_two_wins: int,
        draws: int,
        players: PlayerMap,
        win_value: float,
        loss_value: float,
        draw_value: float,
        track_colors: bool = False,
    ) -> Tuple[Optional[str], Optional[str]]:
        """Set the score, close the match and credit both players.

        Returns:
            Tuple of (winner_id, loser_id), both None for a draw

        Raises:
            MatchAlreadyResolved: If a result is already recorded
            InvalidPlayerSlot: If either slot is empty
            InvalidResultException: If a count is negative
        """
        if self.completed:
            raise MatchAlreadyResolved(f"Match {self.id} already has a result")
        if not self.is_ready:
            raise InvalidPlayerSlot(f"Match {self.id} is missing a player")
        if min(player_one_wins, player_two_wins, draws) < 0:
            raise InvalidResultException(
                f"Negative game count for match {self.id}: "
                f"{player_one_wins}-{player_two_wins}-{draws}"
            )

        one = players[self.player_one]
        two = players[self.player_two]
        one.apply_result(
            self.id,
            self.round,
            two.id,
            player_one_wins,
            player_two_wins,
            draws,
            win_value,
            loss_value,
            draw_value,
            side=SIDE_ONE if track_colors else None,
        )
        two.apply_result(
            self.id,
            self.round,
            one.id,
            player_two_wins,
            player_one_wins,
            draws,
            win_value,
            loss_value,
            draw_value,
            side=SIDE_TWO if track_colors else None,
        )

        self.player_one_wins = player_one_wins
        self.player_two_wins = player_two_wins
        self.draws = draws
        self.active = False
        self.completed = True

        logger.debug(
            "Recorded match %s: %s %s-%s-%s %s",
            self.id,
            one.alias,
            player_one_wins,
            player_two_wins,
            draws,
            two.alias,
        )
        return self.winner_id, self.loser_id

    def clear_result(self, players: PlayerMap) -> None:
        """Reverse a recorded result and reopen the match.

        Raises:
            InvalidMatch: If there is no played result to clear
        """
        if not self.completed or self.bye or not self.is_ready:
            raise InvalidMatch(f"Match {self.id} has no result to clear")

        players[self.player_one].reverse_result(self.id)
        players[self.player_two].reverse_result(self.id)

        self.player_one_wins = 0
        self.player_two_wins = 0
        self.draws = 0
        self.completed = False
        self.active = True
        logger.debug("Cleared result of match %s", self.id)

    def assign_bye(
        self, slot: int, players: PlayerMap, win_value: float, games_won: int = 0
    ) -> str:
        """Resolve the match as a bye for the player in ``slot``.

        The other side, if any, receives nothing.

        Returns:
            Id of the player credited with the bye
        """
        player_id = self.get_slot(slot)
        if player_id is None:
            raise InvalidPlayerSlot(f"Slot {slot} of match {self.id} is empty")
        if self.completed:
            raise MatchAlreadyResolved(f"Match {self.id} already has a result")

        players[player_id].assign_bye(self.id, self.round, win_value, games_won)
        if slot == 1:
            self.player_one_wins = games_won
        else:
            self.player_two_wins = games_won
        self.bye = True
        self.bye_slot = slot
        self.active = False
        self.completed = True
        return player_id

    def clear_bye(self, players: PlayerMap) -> Optional[str]:
        """Undo an automatic bye (or void) and return the credited player id."""
        assert self.completed and self.bye
        player_id = self.winner_id
        if player_id is not None:
            players[player_id].reverse_result(self.id)
        self.player_one_wins = 0
        self.player_two_wins = 0
        self.bye = False
        self.bye_slot = None
        self.completed = False
        return player_id

    def void(self) -> None:
        """Close the match without crediting anyone."""
        if self.completed:
            raise MatchAlreadyResolved(f"Match {self.id} already has a result")
        self.bye = True
        self.bye_slot = None
        self.active = False
        self.completed = True
        logger.debug("Voided match %s", self.id)

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "round": self.round,
            "match_number": self.match_number,
            "player_one": self.player_one,
            "player_two": self.player_two,
            "active": self.active,
            "completed": self.completed,
            "bye": self.bye,
            "bye_slot": self.bye_slot,
            "player_one_wins": self.player_one_wins,
            "player_two_wins": self.player_two_wins,
            "draws": self.draws,
            "winner_path": self.winner_path,
            "winner_slot": self.winner_slot,
            "loser_path": self.loser_path,
            "loser_slot": self.loser_slot,
            "bracket": self.bracket,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        return cls(
            id=data["id"],
            round=data["round"],
            match_number=data["match_number"],
            player_one=data.get("player_one"),
            player_two=data.get("player_two"),
            active=data.get("active", False),
            completed=data.get("completed", False),
            bye=data.get("bye", False),
            bye_slot=data.get("bye_slot"),
            player_one_wins=data.get("player_one_wins", 0),
            player_two_wins=data.get("player_two_wins", 0),
            draws=data.get("draws", 0),
            winner_path=data.get("winner_path"),
            winner_slot=data.get("winner_slot"),
            loser_path=data.get("loser_path"),
            loser_slot=data.get("loser_slot"),
            bracket=data.get("bracket", BRACKET_MAIN),
        )
