"""Validation utilities for Riichi Pairing.

This module provides reusable validation functions with consistent error handling.
"""

from typing import TYPE_CHECKING, Any, Iterable, Optional

from riichipairing.constants import FILLER_ID_PREFIX, PLAYERS_PER_TABLE, VALID_RANKS
from riichipairing.exceptions import (
    InvalidGameResultException,
    InvalidPlayerDataException,
    ValidationException,
)

if TYPE_CHECKING:
    from riichipairing.models.tournament.game_result import GameResult


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Optional[Any] = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


def is_filler_id(player_id: str) -> bool:
    """Whether an ID belongs to a synthetic filler identity."""
    return player_id.startswith(FILLER_ID_PREFIX)


# ========== Round Number Validation ==========


def validate_round_number(round_number: Any) -> ValidationResult:
    """Validate a round number (a positive integer).

    Example:
        >>> bool(validate_round_number("3"))
        True
        >>> validate_round_number(0).error_message
        'Invalid round number: 0'
    """
    if isinstance(round_number, bool):
        return ValidationResult(
            is_valid=False, error_message=f"Invalid round number: {round_number}"
        )
    try:
        number = int(round_number)
    except (TypeError, ValueError):
        return ValidationResult(
            is_valid=False, error_message=f"Invalid round number: {round_number}"
        )
    if number < 1:
        return ValidationResult(
            is_valid=False, error_message=f"Invalid round number: {round_number}"
        )
    return ValidationResult(is_valid=True, sanitized_value=number)


def validate_round_number_strict(round_number: Any) -> int:
    """Validate a round number and raise if invalid.

    Raises:
        ValidationException: If the round number is not a positive integer
    """
    result = validate_round_number(round_number)
    if not result.is_valid:
        raise ValidationException(result.error_message)
    return result.sanitized_value


# ========== Player Validation ==========


def validate_real_player_id(player_id: str) -> None:
    """Reject IDs reserved for filler identities.

    Raises:
        InvalidPlayerDataException: If the ID is a filler ID
    """
    if is_filler_id(player_id):
        raise InvalidPlayerDataException(
            f"Player ID {player_id!r} is reserved for filler players"
        )


# ========== Game Validation ==========


def validate_game_players(
    pairing_player_ids: Iterable[str], game: "GameResult"
) -> ValidationResult:
    """Check that a game fits the pairing it is being attached to.

    The game must have exactly four distinct players, those players must be
    the pairing's players, and the ranks must be exactly 1, 2, 3 and 4.
    """
    game_ids = [p.player_id for p in game.players]
    if len(game_ids) != PLAYERS_PER_TABLE:
        return ValidationResult(
            is_valid=False,
            error_message=f"A game must have exactly {PLAYERS_PER_TABLE} players",
        )
    if len(set(game_ids)) != PLAYERS_PER_TABLE:
        return ValidationResult(
            is_valid=False, error_message="All players in a game must be unique"
        )
    if sorted(game_ids) != sorted(pairing_player_ids):
        return ValidationResult(
            is_valid=False, error_message="Game players must match the pairing players"
        )
    ranks = sorted(p.rank for p in game.players)
    if ranks != sorted(VALID_RANKS):
        return ValidationResult(
            is_valid=False, error_message="Player ranks must be 1, 2, 3, and 4"
        )
    return ValidationResult(is_valid=True, sanitized_value=game)


def validate_game_players_strict(
    pairing_player_ids: Iterable[str], game: "GameResult"
) -> None:
    """Validate a game against a pairing and raise if it does not fit.

    Raises:
        InvalidGameResultException: If the game does not fit the pairing
    """
    result = validate_game_players(pairing_player_ids, game)
    if not result.is_valid:
        raise InvalidGameResultException(result.error_message)
