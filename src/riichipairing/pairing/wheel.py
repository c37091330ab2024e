"""Wheel system: deterministic rotating table assignment for large rosters.

Round 1 deals a shuffled roster into four position lists A, B, C and D, and
table ``t`` is ``{A[t], B[t], C[t], D[t]}``. Later rounds rebuild the lists
from round 1 and rotate list ``i`` left by ``(round - 1) * (i + 1)``
positions, so players in different lists slide past each other at different
speeds and rarely meet twice while the roster is large enough.
"""

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

import random
from typing import List, Optional, Sequence

from riichipairing.constants import PLAYERS_PER_TABLE
from riichipairing.exceptions import NoPairingAvailableException, ValidationException
from riichipairing.models.player.filler import FillerFactory
from riichipairing.models.tournament.round_data import Pairing
from riichipairing.type_hints import PlayerId, Tables
from riichipairing.utils import make_rng, setup_logger

logger = setup_logger(__name__)

WheelLists = List[List[PlayerId]]


def reconstruct_wheel_lists(first_round_pairings: Sequence[Pairing]) -> WheelLists:
    """Rebuild the four position lists from round 1.

    A player's list is the slot (0-3) they occupied at their round 1 table;
    tables are read in table-number order.
    """
    lists: WheelLists = [[] for _ in range(PLAYERS_PER_TABLE)]
    for pairing in sorted(first_round_pairings, key=lambda p: p.table_number):
        if len(pairing.players) != PLAYERS_PER_TABLE:
            continue
        for slot, player_id in enumerate(pairing.player_ids):
            lists[slot].append(player_id)
    return lists


def rotate_wheel_lists(lists: WheelLists, round_number: int) -> WheelLists:
    """Rotate list ``i`` left by ``(round_number - 1) * (i + 1)`` positions."""
    rotated: WheelLists = []
    for list_index, players in enumerate(lists):
        if not players:
            rotated.append([])
            continue
        moves = ((round_number - 1) * (list_index + 1)) % len(players)
        rotated.append(players[moves:] + players[:moves])
    return rotated


def zip_wheel_lists(lists: WheelLists) -> Tables:
    """Form tables from the position lists."""
    return [list(table) for table in zip(*lists)]


class WheelScheduler:
    """Generates wheel-system tables.

    Args:
        rng: Random source used for the round 1 shuffle
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = make_rng(rng)

    def generate(
        self,
        player_ids: Sequence[PlayerId],
        round_number: int,
        first_round_pairings: Optional[Sequence[Pairing]] = None,
    ) -> Tables:
        """Generate tables for a round.

        Args:
            player_ids: Active roster padded to a multiple of four
            round_number: Round being generated (1-indexed)
            first_round_pairings: Round 1 tables, required when round_number > 1

        Returns:
            Player IDs per table, in table order

        Raises:
            ValidationException: If the roster is not a multiple of four
            NoPairingAvailableException: If round 1 is unavailable or the
                roster no longer fits the round 1 lists
        """
        if len(player_ids) % PLAYERS_PER_TABLE != 0:
            raise ValidationException(
                f"Number of active players must be divisible by {PLAYERS_PER_TABLE}"
            )
        if round_number == 1:
            return self.first_round(player_ids)

        if not first_round_pairings:
            raise NoPairingAvailableException(
                "First round pairings required for wheel system"
            )
        lists = reconstruct_wheel_lists(first_round_pairings)
        lists = self._refill_vacancies(lists, player_ids)
        return zip_wheel_lists(rotate_wheel_lists(lists, round_number))

    def first_round(self, player_ids: Sequence[PlayerId]) -> Tables:
        """Shuffle once and deal player ``i`` into list ``i mod 4``."""
        shuffled = list(player_ids)
        self.rng.shuffle(shuffled)
        lists: WheelLists = [[] for _ in range(PLAYERS_PER_TABLE)]
        for index, player_id in enumerate(shuffled):
            lists[index % PLAYERS_PER_TABLE].append(player_id)
        return zip_wheel_lists(lists)

    @staticmethod
    def _refill_vacancies(lists: WheelLists, player_ids: Sequence[PlayerId]) -> WheelLists:
        """Fit the current roster into the round 1 lists.

        Slots whose occupant is no longer in the roster (dropped players,
        fillers) go to players who joined after round 1, in roster order,
        and then to padding fillers. Fails if the newcomers do not fit.
        """
        roster = [pid for pid in player_ids if not FillerFactory.is_filler(pid)]
        roster_set = set(roster)
        seated = {pid for players in lists for pid in players}
        newcomers = [pid for pid in roster if pid not in seated]

        vacancies = sum(
            1 for players in lists for pid in players if pid not in roster_set
        )
        if len(newcomers) > vacancies:
            raise NoPairingAvailableException(
                f"{len(newcomers)} new players do not fit the "
                f"{vacancies} open wheel slots"
            )

        replacements = newcomers + FillerFactory.padding_ids(vacancies - len(newcomers))
        if vacancies:
            logger.info(
                f"Refilling {vacancies} wheel slots with {len(newcomers)} new "
                f"players and {vacancies - len(newcomers)} fillers"
            )
        refill = iter(replacements)
        return [
            [pid if pid in roster_set else next(refill) for pid in players]
            for players in lists
        ]
