"""Factory for synthetic filler identities."""

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

from typing import Any, Dict, List, Optional

from riichipairing.constants import DROP_FILLER_PREFIX, PADDING_FILLER_PREFIX
from riichipairing.type_hints import PlayerId
from riichipairing.utils import setup_logger
from riichipairing.utils.validation import is_filler_id

logger = setup_logger(__name__)


class FillerFactory:
    """Creates and caches filler identities for one tournament.

    Two kinds of filler exist:

    - padding fillers, which top a roster up to a multiple of four when a
      round is generated. They are numbered from zero for every round, so
      ``filler:pad-0`` is the same identity in every round.
    - drop fillers, which take over the seat of a player who left after the
      pairings were made. Each dropped player gets their own filler, created
      on first use and reused if the same player drops again.

    Filler IDs all start with ``filler:`` and can never be signed up, so they
    are never mistaken for real participants.

    Example:
        >>> factory = FillerFactory()
        >>> factory.filler_for("p-17")
        'filler:drop-0'
        >>> factory.filler_for("p-17")
        'filler:drop-0'
        >>> factory.padding_ids(2)
        ['filler:pad-0', 'filler:pad-1']
    """

    def __init__(self, assigned: Optional[Dict[PlayerId, PlayerId]] = None):
        # dropped player ID -> filler ID
        self._assigned: Dict[PlayerId, PlayerId] = dict(assigned or {})

    def filler_for(self, player_id: PlayerId) -> PlayerId:
        """Return the filler identity standing in for a dropped player."""
        filler_id = self._assigned.get(player_id)
        if filler_id is None:
            filler_id = f"{DROP_FILLER_PREFIX}{len(self._assigned)}"
            self._assigned[player_id] = filler_id
            logger.info(f"Created filler {filler_id} for dropped player {player_id}")
        return filler_id

    def replaced_player(self, filler_id: PlayerId) -> Optional[PlayerId]:
        """Return the dropped player a filler was created for, if any."""
        for player_id, assigned in self._assigned.items():
            if assigned == filler_id:
                return player_id
        return None

    @staticmethod
    def padding_ids(count: int) -> List[PlayerId]:
        """Return ``count`` distinct padding filler IDs."""
        return [f"{PADDING_FILLER_PREFIX}{i}" for i in range(count)]

    @staticmethod
    def is_filler(player_id: PlayerId) -> bool:
        """Whether an ID belongs to any filler identity."""
        return is_filler_id(player_id)

    @property
    def assigned(self) -> Dict[PlayerId, PlayerId]:
        """Copy of the dropped player to filler mapping."""
        return dict(self._assigned)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize filler assignments to dictionary."""
        return {"assigned": dict(self._assigned)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FillerFactory":
        """Deserialize filler assignments from dictionary."""
        return cls(assigned={str(k): str(v) for k, v in data.get("assigned", {}).items()})
