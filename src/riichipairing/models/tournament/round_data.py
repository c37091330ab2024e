"""Data model for tournament rounds and table pairings."""

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

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil.relativedelta import relativedelta

from riichipairing.constants import STAGE_FINALS, STAGE_REGULAR
from riichipairing.exceptions import GameAlreadyRecordedException
from riichipairing.models.tournament.game_result import GameResult
from riichipairing.type_hints import PlayerId, Seat
from riichipairing.utils.adapters import (
    format_datetime,
    parse_datetime,
    resolve_player_id,
)
from riichipairing.utils.validation import is_filler_id


@dataclass
class SeatAssignment:
    """A player sitting at a table.

    Attributes
    ----------
    player_id : str
        The seated player (or filler identity).
    seat : str
        Wind seat: East, South, West or North.
    substituted_for : str or None
        For a filler that took over a dropped player's seat, the dropped
        player's ID.
    """

    player_id: PlayerId
    seat: Seat
    substituted_for: Optional[PlayerId] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize seat assignment to dictionary."""
        data = {"player_id": self.player_id, "seat": self.seat}
        if self.substituted_for is not None:
            data["substituted_for"] = self.substituted_for
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeatAssignment":
        """Deserialize seat assignment from dictionary."""
        substituted = data.get("substituted_for")
        return cls(
            player_id=resolve_player_id(data.get("player_id", data.get("player"))),
            seat=data["seat"],
            substituted_for=(
                resolve_player_id(substituted) if substituted is not None else None
            ),
        )


@dataclass
class Pairing:
    """One table in a round.

    ``players`` holds exactly four seat assignments in slot order (the order
    the scheduler produced them). Games are attached through
    ``attach_game``, which refuses to replace one.
    """

    table_number: int
    players: List[SeatAssignment] = field(default_factory=list)
    game: Optional[GameResult] = None

    @property
    def player_ids(self) -> List[PlayerId]:
        """IDs in slot order, fillers included."""
        return [p.player_id for p in self.players]

    @property
    def real_player_ids(self) -> List[PlayerId]:
        """IDs of real players only."""
        return [p.player_id for p in self.players if not is_filler_id(p.player_id)]

    @property
    def has_game(self) -> bool:
        """Whether a game has been attached."""
        return self.game is not None

    @property
    def is_all_filler(self) -> bool:
        """A table of fillers only; it never produces a game."""
        return bool(self.players) and not self.real_player_ids

    @property
    def is_resolved(self) -> bool:
        """Whether the table no longer blocks the end of its round."""
        if self.is_all_filler:
            return True
        return self.game is not None and self.game.verified

    def contains(self, player_id: PlayerId) -> bool:
        """Whether the player is seated at this table."""
        return any(p.player_id == player_id for p in self.players)

    def seat_of(self, player_id: PlayerId) -> Optional[Seat]:
        """Return the player's seat, or None if not at this table."""
        for assignment in self.players:
            if assignment.player_id == player_id:
                return assignment.seat
        return None

    def attach_game(self, game: GameResult) -> None:
        """Associate a game with this table (only once).

        Raises:
            GameAlreadyRecordedException: If the table already has a game
        """
        if self.game is not None:
            raise GameAlreadyRecordedException(
                f"Table {self.table_number} already has an associated game"
            )
        self.game = game

    def substitute(self, player_id: PlayerId, filler_id: PlayerId) -> bool:
        """Put a filler into a player's seat.

        Returns:
            True if the player was found and replaced, False otherwise
        """
        if self.game is not None:
            return False
        for assignment in self.players:
            if assignment.player_id == player_id:
                assignment.player_id = filler_id
                assignment.substituted_for = player_id
                return True
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize pairing to dictionary."""
        return {
            "table_number": self.table_number,
            "players": [p.to_dict() for p in self.players],
            "game": self.game.to_dict() if self.game is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pairing":
        """Deserialize pairing from dictionary."""
        game = data.get("game")
        return cls(
            table_number=int(data["table_number"]),
            players=[SeatAssignment.from_dict(p) for p in data.get("players", [])],
            game=GameResult.from_dict(game) if isinstance(game, dict) else None,
        )


@dataclass
class RoundData:
    """Container for all data related to a single tournament round.

    Attributes
    ----------
    round_number : int
        Round number (1-indexed). Finals rounds follow the last regular round.
    start_date : datetime or None
        When the round's pairings were published.
    pairings : list of Pairing
        Tables in table-number order. Empty after a reset.
    is_completed : bool
        Set once the round has been scored. A completed round is never
        scored again.
    stage : str
        ``"regular"`` or ``"finals"``.
    """

    round_number: int
    start_date: Optional[datetime] = None
    pairings: List[Pairing] = field(default_factory=list)
    is_completed: bool = False
    stage: str = STAGE_REGULAR

    @property
    def is_finals(self) -> bool:
        """Whether this is a finals round."""
        return self.stage == STAGE_FINALS

    @property
    def player_ids(self) -> List[PlayerId]:
        """Every seated ID across all tables, fillers included."""
        return [pid for pairing in self.pairings for pid in pairing.player_ids]

    @property
    def real_player_ids(self) -> List[PlayerId]:
        """Every seated real player across all tables."""
        return [pid for pairing in self.pairings for pid in pairing.real_player_ids]

    @property
    def has_games(self) -> bool:
        """Whether any table already has a game attached."""
        return any(p.has_game for p in self.pairings)

    def get_pairing(self, table_number: int) -> Optional[Pairing]:
        """Get a table by its number, or None."""
        for pairing in self.pairings:
            if pairing.table_number == table_number:
                return pairing
        return None

    def find_player(self, player_id: PlayerId) -> Optional[Pairing]:
        """Return the table seating a player, or None."""
        for pairing in self.pairings:
            if pairing.contains(player_id):
                return pairing
        return None

    def unresolved_pairings(self) -> List[Pairing]:
        """Tables still waiting for a verified game."""
        return [p for p in self.pairings if not p.is_resolved]

    def expected_end(self, duration_minutes: int) -> Optional[datetime]:
        """When the round is scheduled to end."""
        if self.start_date is None:
            return None
        return self.start_date + relativedelta(minutes=+duration_minutes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round data to dictionary."""
        return {
            "round_number": self.round_number,
            "start_date": format_datetime(self.start_date),
            "pairings": [p.to_dict() for p in self.pairings],
            "is_completed": self.is_completed,
            "stage": self.stage,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundData":
        """Deserialize round data from dictionary."""
        return cls(
            round_number=int(data["round_number"]),
            start_date=parse_datetime(data.get("start_date")),
            pairings=[Pairing.from_dict(p) for p in data.get("pairings", [])],
            is_completed=data.get("is_completed", False),
            stage=data.get("stage", STAGE_REGULAR),
        )
