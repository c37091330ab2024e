"""Game result data classes."""

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
from typing import Any, Dict, List, Optional

from riichipairing.type_hints import PlayerId
from riichipairing.utils.adapters import resolve_player_id


@dataclass
class GamePlayerResult:
    """One player's line in a game result.

    Attributes
    ----------
    player_id : str
        ID of the player
    score : float
        Final point count at the end of the game
    rank : int
        Finishing place, 1 to 4
    """

    player_id: PlayerId
    score: float
    rank: int

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {"player_id": self.player_id, "score": self.score, "rank": self.rank}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GamePlayerResult":
        """Deserialize from dictionary."""
        return cls(
            player_id=resolve_player_id(data.get("player_id", data.get("player"))),
            score=float(data["score"]),
            rank=int(data["rank"]),
        )


@dataclass
class GameResult:
    """Represents a game reported by the game subsystem.

    Attributes
    ----------
    game_id : str or None
        Reference to the stored game
    players : list of GamePlayerResult
        The four players' scores and ranks
    verified : bool
        Whether the result has been verified. Only verified games count
        toward standings.
    """

    game_id: Optional[str]
    players: List[GamePlayerResult] = field(default_factory=list)
    verified: bool = False

    @property
    def player_ids(self) -> List[PlayerId]:
        """IDs of the players in the game."""
        return [p.player_id for p in self.players]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize game result to dictionary."""
        return {
            "game_id": self.game_id,
            "players": [p.to_dict() for p in self.players],
            "verified": self.verified,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameResult":
        """Deserialize game result from dictionary."""
        game_id = data.get("game_id")
        return cls(
            game_id=str(game_id) if game_id is not None else None,
            players=[GamePlayerResult.from_dict(p) for p in data.get("players", [])],
            verified=bool(data.get("verified", False)),
        )
