"""Roster records for a tournament: entries, waitlist and penalties."""

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

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from riichipairing.type_hints import PlayerId
from riichipairing.utils.adapters import (
    format_datetime,
    parse_datetime,
    resolve_player_id,
)


@dataclass
class PlayerEntry:
    """
    A player's standing in one tournament.

    Attributes
    ----------
    player_id : str
        Resolved player identifier.
    uma : float
        Accumulated standings delta from regular rounds, minus penalties.
        Reset to 0 for finalists when finals are seeded.
    finals_uma : float
        UMA accumulated in finals rounds only.
    dropped : bool
        Whether the player has left (or been removed from) the tournament.
    qualifying_uma : float or None
        UMA the player held when seeded into the finals. Used to break ties
        in the final ranking. ``None`` for non-finalists.
    joined_at : datetime or None
        When the player entered the active roster.
    """

    player_id: PlayerId
    uma: float = 0.0
    finals_uma: float = 0.0
    dropped: bool = False
    qualifying_uma: Optional[float] = None
    joined_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        """Whether the player is still playing."""
        return not self.dropped

    @property
    def is_finalist(self) -> bool:
        """Whether the player was seeded into the finals."""
        return self.qualifying_uma is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player entry to dictionary."""
        return {
            "player_id": self.player_id,
            "uma": self.uma,
            "finals_uma": self.finals_uma,
            "dropped": self.dropped,
            "qualifying_uma": self.qualifying_uma,
            "joined_at": format_datetime(self.joined_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerEntry":
        """Deserialize player entry from dictionary."""
        qualifying = data.get("qualifying_uma")
        return cls(
            player_id=resolve_player_id(data.get("player_id", data.get("player"))),
            uma=float(data.get("uma", 0.0) or 0.0),
            finals_uma=float(data.get("finals_uma", 0.0) or 0.0),
            dropped=bool(data.get("dropped", False)),
            qualifying_uma=float(qualifying) if qualifying is not None else None,
            joined_at=parse_datetime(data.get("joined_at")),
        )


@dataclass
class WaitlistEntry:
    """A player waiting for a free roster slot. Ordered by ``added_at``."""

    player_id: PlayerId
    added_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Serialize waitlist entry to dictionary."""
        return {
            "player_id": self.player_id,
            "added_at": format_datetime(self.added_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WaitlistEntry":
        """Deserialize waitlist entry from dictionary."""
        return cls(
            player_id=resolve_player_id(data.get("player_id", data.get("player"))),
            added_at=parse_datetime(data.get("added_at")),
        )


@dataclass
class UmaPenalty:
    """A standings penalty. ``amount`` is subtracted from the player's UMA."""

    player_id: PlayerId
    amount: float
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize penalty to dictionary."""
        return {
            "player_id": self.player_id,
            "amount": self.amount,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UmaPenalty":
        """Deserialize penalty from dictionary."""
        return cls(
            player_id=resolve_player_id(data.get("player_id", data.get("player"))),
            amount=float(data.get("amount", 0.0) or 0.0),
            description=data.get("description", ""),
        )
