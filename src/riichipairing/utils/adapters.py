"""Adapters for converting stored or API records into engine values.

Player references arrive from the storage layer either as bare identifiers or
as populated user records. Everything in this module resolves them to a plain
``str`` player ID once, at the boundary, so scheduling and lifecycle code
only ever sees one representation.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

from riichipairing.exceptions import InvalidPlayerDataException
from riichipairing.type_hints import PlayerId
from riichipairing.utils import setup_logger

logger = setup_logger(__name__)

# Keys checked, in order, when a populated record is given instead of an ID
_ID_KEYS = ("_id", "id", "player_id", "player")


def resolve_player_id(ref: Any) -> PlayerId:
    """Resolve a player reference to its string ID.

    Args:
        ref: A string/integer ID, or a mapping (or object) carrying one of
            ``_id``, ``id``, ``player_id`` or ``player``. Nested references
            such as ``{"player": {"_id": "abc"}}`` are followed.

    Returns:
        The player ID as a non-empty string

    Raises:
        InvalidPlayerDataException: If no ID can be found

    Example:
        >>> resolve_player_id({"_id": "64af", "displayName": "Ren"})
        '64af'
    """
    if ref is None or isinstance(ref, bool):
        raise InvalidPlayerDataException(f"Invalid player reference: {ref!r}")

    if isinstance(ref, (str, int)):
        player_id = str(ref).strip()
        if not player_id:
            raise InvalidPlayerDataException("Player reference is empty")
        return player_id

    if isinstance(ref, dict):
        for key in _ID_KEYS:
            if ref.get(key) is not None:
                return resolve_player_id(ref[key])
    else:
        for key in _ID_KEYS:
            value = getattr(ref, key, None)
            if value is not None:
                return resolve_player_id(value)

    raise InvalidPlayerDataException(f"Cannot resolve player reference: {ref!r}")


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a stored date (ISO 8601 string or datetime)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(str(value))
    except ValueError:
        logger.warning("Could not parse date: %s", value)
        return None


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Format a date for storage."""
    return value.isoformat() if value is not None else None


def game_record_to_dict(record: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a stored game record to a ``GameResult`` dictionary.

    Stored games list their players with a ``position`` (1-4) and may carry
    populated player objects; the engine wants ``rank`` and plain IDs.

    Args:
        record: Raw game record from the game subsystem

    Returns:
        Dictionary compatible with ``GameResult.from_dict()``
    """
    players: List[Dict[str, Any]] = []
    for entry in record.get("players", []):
        rank = entry.get("rank", entry.get("position"))
        players.append(
            {
                "player_id": resolve_player_id(entry.get("player", entry)),
                "score": float(entry.get("score", 0)),
                "rank": int(rank) if rank is not None else 0,
            }
        )

    game_id = record.get("game_id", record.get("_id", record.get("id")))
    return {
        "game_id": str(game_id) if game_id is not None else None,
        "players": players,
        "verified": bool(record.get("verified", False)),
    }
