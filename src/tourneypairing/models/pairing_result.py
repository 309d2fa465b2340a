"""PairingResult data class."""

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

from dataclasses import dataclass, field
from typing import List

from tourneypairing.models.match import Match
from tourneypairing.type_hints import PairingIDs


@dataclass
class PairingResult:
    """Result of generating a single round.

    ``warnings`` carries recoverable events, such as a forced rematch, that
    the caller should surface but that did not stop the round.
    """

    round_number: int
    matches: List[Match] = field(default_factory=list)
    byes: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def pairing_ids(self) -> List[PairingIDs]:
        return [(m.player_one, m.player_two) for m in self.matches if not m.bye]


#  LocalWords:  PairingResult
