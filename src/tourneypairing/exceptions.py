"""Exceptions for use in Tourney Pairing"""

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


# ========== Base Application Exception ==========


class TourneyPairingException(Exception):
    """Base exception for all Tourney Pairing errors.

    All custom exceptions in the package inherit from this class.
    This enables catching all engine errors with a single except clause.
    """

    pass


# ========== Configuration Exceptions ==========


class ConfigurationError(TourneyPairingException):
    """Raised when tournament configuration or roster size is invalid."""

    pass


# ========== Pairing Exceptions ==========


class PairingException(TourneyPairingException):
    """Base exception for pairing-related errors."""

    pass


class PairingImpossible(PairingException):
    """Raised when no legal pairing exists for the remaining players."""

    pass


# ========== Tournament Exceptions ==========


class TournamentException(TourneyPairingException):
    """Base exception for tournament-related errors."""

    pass


class TournamentStateException(TournamentException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


class DuplicatePlayerId(TournamentException):
    """Raised when attempting to add a player whose id is already registered."""

    pass


class DuplicateTournamentId(TournamentException):
    """Raised when attempting to register a tournament id that already exists."""

    pass


class PlayerNotFoundException(TournamentException):
    """Raised when a requested player cannot be found."""

    pass


class TournamentNotFoundException(TournamentException):
    """Raised when a requested tournament cannot be found."""

    pass


# ========== Match Exceptions ==========


class MatchException(TourneyPairingException):
    """Base exception for match misuse."""

    pass


class InvalidMatch(MatchException):
    """Raised when a match id is unknown or the match cannot take the operation."""

    pass


class MatchNotActive(InvalidMatch):
    """Raised when a result is submitted for a match whose round has not started."""

    pass


class MatchAlreadyResolved(MatchException):
    """Raised when a result is re-submitted without clearing the previous one."""

    pass


class InvalidPlayerSlot(MatchException):
    """Raised when a player slot is empty for a non-bye match or already taken."""

    pass


# ========== Result Exceptions ==========


class ResultException(TourneyPairingException):
    """Base exception for result recording errors."""

    pass


class InvalidResultException(ResultException):
    """Raised when a result is invalid (e.g., negative counts, draw in a knockout)."""

    pass
