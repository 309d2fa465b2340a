"""A competitor in a tournament, with cumulative stats and match history."""

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

import bisect
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from tourneypairing.constants import (
    OUTCOME_DRAW,
    OUTCOME_LOSS,
    OUTCOME_WIN,
    SIDE_ONE,
)
from tourneypairing.type_hints import Outcome, Side
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class ResultEntry:
    """One line of a player's match history.

    Attributes:
        match_id: Match the entry came from
        round: Round the match belongs to
        opponent_id: Opponent id, None for a bye
        outcome: "win", "loss" or "draw"
        side: Side played ("one"/"two"), None when sides are not tracked
        match_points: Match points earned
        game_points: Game points earned
        games: Games played in the match
    """

    match_id: str
    round: int
    opponent_id: Optional[str]
    outcome: Outcome
    side: Optional[Side] = None
    match_points: float = 0.0
    game_points: float = 0.0
    games: int = 0

    @property
    def is_bye(self) -> bool:
        return self.opponent_id is None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResultEntry":
        return cls(
            match_id=data["match_id"],
            round=data["round"],
            opponent_id=data.get("opponent_id"),
            outcome=data["outcome"],
            side=data.get("side"),
            match_points=data.get("match_points", 0.0),
            game_points=data.get("game_points", 0.0),
            games=data.get("games", 0),
        )


class Player:
    """Represents a player in the tournament.

    Point and count fields are derived from ``results`` and only change
    through :meth:`apply_result`, :meth:`reverse_result` and
    :meth:`assign_bye`. Keeping the counters as exact sums over the entries
    means a reversed result leaves the player bit-identical to one that never
    had it.

    Attributes:
        id: Unique identifier for the player
        alias: Display name
        seed: Optional seeding value
        match_points: Match points earned
        game_points: Game points earned
        matches: Matches played, byes included
        games: Games played
        byes: Byes received
        initial_byes: Number of opening rounds the player sits out with a bye
        active: Whether the player can still be paired
        color_preference: +1 per side "one" played, -1 per side "two"
        colors_played: Sides played in round order
        results: Result entries in round order
        tiebreakers: Last computed tiebreak values
        etc: Free-form caller metadata
    """

    def __init__(
        self,
        alias: str,
        player_id: str,
        seed: Optional[float] = None,
        initial_byes: int = 0,
    ) -> None:
        self.id: str = str(player_id)
        self.alias: str = str(alias)
        self.seed: Optional[float] = seed if isinstance(seed, (int, float)) else None
        self.initial_byes: int = initial_byes

        self.active: bool = True

        self.match_points: float = 0.0
        self.game_points: float = 0.0
        self.matches: int = 0
        self.games: int = 0
        self.byes: int = 0

        self.color_preference: int = 0
        self.colors_played: List[Side] = []
        self.results: List[ResultEntry] = []

        # Tiebreakers (calculated externally)
        self.tiebreakers: Dict[str, float] = {}

        self.etc: Dict[str, str] = {}

    # ========== Queries ==========

    @property
    def opponent_ids(self) -> List[Optional[str]]:
        """Opponent ids in round order, None for byes."""
        return [entry.opponent_id for entry in self.results]

    def has_played(self, opponent_id: str) -> bool:
        """Return True if this player already met ``opponent_id``."""
        return any(entry.opponent_id == opponent_id for entry in self.results)

    def get_result(self, match_id: str) -> Optional[ResultEntry]:
        for entry in self.results:
            if entry.match_id == match_id:
                return entry
        return None

    @property
    def losses(self) -> int:
        return sum(1 for entry in self.results if entry.outcome == OUTCOME_LOSS)

    # ========== Mutators ==========

    def apply_result(
        self,
        match_id: str,
        round_number: int,
        opponent_id: str,
        wins: int,
        losses: int,
        draws: int,
        win_value: float,
        loss_value: float,
        draw_value: float,
        side: Optional[Side] = None,
    ) -> ResultEntry:
        """Record the outcome of a played match from this player's point of view.

        Args:
            match_id: Match being recorded
            round_number: Round of the match
            opponent_id: Opponent's id
            wins: Games this player won
            losses: Games the opponent won
            draws: Drawn games
            win_value: Points for a win
            loss_value: Points for a loss
            draw_value: Points for a draw
            side: Side played when sides are tracked

        Returns:
            The appended result entry
        """
        assert min(wins, losses, draws) >= 0, "game counts must not be negative"
        if self.get_result(match_id) is not None:
            raise ValueError(f"{self.alias} already has a result for match {match_id}")

        if wins > losses:
            outcome, points = OUTCOME_WIN, win_value
        elif wins < losses:
            outcome, points = OUTCOME_LOSS, loss_value
        else:
            outcome, points = OUTCOME_DRAW, draw_value

        entry = ResultEntry(
            match_id=match_id,
            round=round_number,
            opponent_id=opponent_id,
            outcome=outcome,
            side=side,
            match_points=points,
            game_points=wins * win_value + draws * draw_value,
            games=wins + losses + draws,
        )
        self._insert(entry)
        logger.debug(
            "%s: %s vs %s in match %s (%s-%s-%s)",
            self.alias,
            outcome,
            opponent_id,
            match_id,
            wins,
            losses,
            draws,
        )
        return entry

    def assign_bye(
        self,
        match_id: str,
        round_number: int,
        win_value: float,
        games_won: int = 0,
    ) -> ResultEntry:
        """Credit a full win without an opponent.

        Args:
            match_id: The bye match
            round_number: Round of the bye
            win_value: Points for a win
            games_won: Game wins credited with the bye

        Returns:
            The appended result entry
        """
        if self.get_result(match_id) is not None:
            raise ValueError(f"{self.alias} already has a result for match {match_id}")

        entry = ResultEntry(
            match_id=match_id,
            round=round_number,
            opponent_id=None,
            outcome=OUTCOME_WIN,
            match_points=win_value,
            game_points=games_won * win_value,
            games=games_won,
        )
        self._insert(entry)
        logger.debug("Player %s received a bye in round %s", self.alias, round_number)
        return entry

    def reverse_result(self, match_id: str) -> ResultEntry:
        """Remove the entry for ``match_id`` and restore the counters.

        Raises:
            KeyError: If the player has no result for the match
        """
        for index, entry in enumerate(self.results):
            if entry.match_id == match_id:
                del self.results[index]
                self._recount()
                logger.debug("Reversed result of match %s for %s", match_id, self.alias)
                return entry
        raise KeyError(f"{self.alias} has no result for match {match_id}")

    def _insert(self, entry: ResultEntry) -> None:
        # Keep round order so a re-entered result lands where it was
        rounds = [e.round for e in self.results]
        self.results.insert(bisect.bisect_right(rounds, entry.round), entry)
        self._recount()

    def _recount(self) -> None:
        self.match_points = math.fsum(e.match_points for e in self.results)
        self.game_points = math.fsum(e.game_points for e in self.results)
        self.matches = len(self.results)
        self.games = sum(e.games for e in self.results)
        self.byes = sum(1 for e in self.results if e.is_bye)
        self.colors_played = [e.side for e in self.results if e.side is not None]
        self.color_preference = sum(
            1 if side == SIDE_ONE else -1 for side in self.colors_played
        )
        assert self.games >= 0 and self.byes <= self.matches

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player data to dictionary format.

        Counters are derived from ``results`` and tiebreakers are recomputed
        on demand, so neither is exported.
        """
        return {
            "id": self.id,
            "alias": self.alias,
            "seed": self.seed,
            "initial_byes": self.initial_byes,
            "active": self.active,
            "results": [entry.to_dict() for entry in self.results],
            "etc": dict(self.etc),
        }

    @classmethod
    def from_dict(cls, player_data: Dict[str, Any]) -> "Player":
        """Create a Player instance from serialized dictionary data."""
        player = cls(
            alias=player_data["alias"],
            player_id=player_data["id"],
            seed=player_data.get("seed"),
            initial_byes=player_data.get("initial_byes", 0),
        )
        player.active = player_data.get("active", True)
        player.etc = dict(player_data.get("etc") or {})
        player.results = [
            ResultEntry.from_dict(entry) for entry in player_data.get("results", [])
        ]
        player._recount()
        return player

    def __repr__(self) -> str:
        return f"Player(alias='{self.alias}', seed={self.seed}, id='{self.id}')"

    def __str__(self) -> str:
        return f"{self.alias} ({self.match_points:g})"


