"""Tournament management for Tourney Pairing.

This package holds the tournament controller and the helpers it delegates
to: round progression, result recording, tiebreaks and the event registry.
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

from tourneypairing.tournament.tiebreak_calculator import TiebreakCalculator
from tourneypairing.tournament.result_recorder import ResultRecorder
from tourneypairing.tournament.round_manager import RoundManager
from tourneypairing.tournament.tournament import Tournament
from tourneypairing.tournament.event_manager import EventManager

__all__ = [
    "Tournament",
    "EventManager",
    "RoundManager",
    "ResultRecorder",
    "TiebreakCalculator",
]
