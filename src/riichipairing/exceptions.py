"""Exceptions for use in Riichi Pairing"""

# Riichi Pairing
# Copyright (C) 2025  Riichi Pairing developers
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


class RiichiPairingException(Exception):
    """Base exception for all Riichi Pairing errors.

    All custom exceptions in the package inherit from this class, so callers
    can catch every engine error with a single except clause.
    """

    pass


# ========== Validation Exceptions ==========


class ValidationException(RiichiPairingException):
    """Raised when input to an operation is invalid.

    Covers too few players to start, invalid round numbers and malformed
    game results. Raised before any state is modified.
    """

    pass


class InvalidGameResultException(ValidationException):
    """Raised when a submitted game does not fit its pairing."""

    pass


class DuplicatePlayerException(ValidationException):
    """Raised when a player is signed up twice."""

    pass


class InvalidPlayerDataException(ValidationException):
    """Raised when a player reference cannot be resolved to an ID."""

    pass


# ========== State Exceptions ==========


class TournamentStateException(RiichiPairingException):
    """Raised when the tournament is in an invalid state for the operation."""

    pass


class UnresolvedRoundException(TournamentStateException):
    """Raised when ending a round that still has missing or unverified games."""

    pass


class GameAlreadyRecordedException(TournamentStateException):
    """Raised when attaching a game to a pairing that already has one."""

    pass


# ========== Not Found Exceptions ==========


class NotFoundException(RiichiPairingException):
    """Base exception for lookups of things that do not exist."""

    pass


class RoundNotFoundException(NotFoundException):
    """Raised when a requested round does not exist."""

    pass


class PairingNotFoundException(NotFoundException):
    """Raised when a requested table does not exist in a round."""

    pass


class PlayerNotFoundException(NotFoundException):
    """Raised when a requested player is not part of the tournament."""

    pass


# ========== Pairing Exceptions ==========


class PairingException(RiichiPairingException):
    """Base exception for pairing-related errors."""

    pass


class NoPairingAvailableException(PairingException):
    """Raised when no valid pairing can be generated."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(RiichiPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass


# Short aliases matching the error taxonomy used by callers.
ValidationError = ValidationException
StateError = TournamentStateException
NotFoundError = NotFoundException
