"""Opponent history derived from previous rounds."""

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
from itertools import combinations
from typing import TYPE_CHECKING, Any, Dict, Iterable, Sequence

from riichipairing.constants import PLAYERS_PER_TABLE
from riichipairing.type_hints import PlayerId, PlayerPair

if TYPE_CHECKING:
    from riichipairing.models.tournament.round_data import RoundData


@dataclass
class PairingHistory:
    """
    Counts how many times each pair of players has shared a table.

    Attributes
    ----------
    counts : dict of frozenset of str to int
        Mapping from an unordered pair of player IDs to the number of
        previous tables the two players sat at together.
    """

    counts: Dict[PlayerPair, int] = field(default_factory=dict)

    def add_table(self, player_ids: Sequence[PlayerId]) -> None:
        """Record one table: every pair of its players met once more."""
        for a, b in combinations(player_ids, 2):
            pair = frozenset((a, b))
            self.counts[pair] = self.counts.get(pair, 0) + 1

    def times_played(self, player1_id: PlayerId, player2_id: PlayerId) -> int:
        """How many times two players have shared a table."""
        return self.counts.get(frozenset((player1_id, player2_id)), 0)

    def have_played(self, player1_id: PlayerId, player2_id: PlayerId) -> bool:
        """Check if two players have previously shared a table."""
        return self.times_played(player1_id, player2_id) > 0

    def table_penalty(self, player_ids: Sequence[PlayerId]) -> int:
        """Rematch penalty of one table: sum of squared previous meetings."""
        penalty = 0
        for a, b in combinations(player_ids, 2):
            times = self.counts.get(frozenset((a, b)), 0)
            penalty += times * times
        return penalty

    @property
    def total_meetings(self) -> int:
        """Sum of all pair counts."""
        return sum(self.counts.values())

    def to_dict(self) -> Dict[str, Any]:
        """Serialize pairing history to dictionary."""
        return {
            "counts": [
                {"players": sorted(pair), "count": count}
                for pair, count in self.counts.items()
            ]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairingHistory":
        """Deserialize pairing history from dictionary."""
        return cls(
            counts={
                frozenset(map(str, item["players"])): int(item["count"])
                for item in data.get("counts", [])
            }
        )


def build_opponent_history(rounds: Iterable["RoundData"]) -> PairingHistory:
    """Build the opponent history from previous rounds.

    Every pairing with four players adds one meeting for each of its six
    player pairs. Rounds without pairings are skipped. The result depends
    only on the rounds passed in; it is rebuilt for every new round rather
    than updated in place.

    Args:
        rounds: Previous rounds, in any order

    Returns:
        A fresh PairingHistory
    """
    history = PairingHistory()
    for round_data in rounds:
        for pairing in round_data.pairings:
            if len(pairing.players) != PLAYERS_PER_TABLE:
                continue
            history.add_table(pairing.player_ids)
    return history
