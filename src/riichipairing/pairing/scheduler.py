"""Scheduler selection and seat assignment for a new round.

Small and mid-sized rosters are paired by the optimizer. Once a roster is
too large for the optimizer to keep rematches down cheaply (more than
``12 * (round - 1) + 4`` active players), rounds after the first use the
wheel system instead.
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

from riichipairing.constants import (
    DEFAULT_PAIRING_ITERATIONS,
    PLAYERS_PER_TABLE,
    SEATS,
    WHEEL_BASE_PLAYERS,
    WHEEL_PLAYERS_PER_ROUND,
)
from riichipairing.exceptions import PairingException, ValidationException
from riichipairing.models.player.filler import FillerFactory
from riichipairing.models.tournament.pairing_history import build_opponent_history
from riichipairing.models.tournament.round_data import Pairing, RoundData, SeatAssignment
from riichipairing.pairing.optimizer import PairingOptimizer
from riichipairing.pairing.wheel import WheelScheduler
from riichipairing.type_hints import PlayerId, Tables
from riichipairing.utils import make_rng, setup_logger

logger = setup_logger(__name__)


def wheel_threshold(round_number: int) -> int:
    """Roster size above which a round uses the wheel system."""
    return WHEEL_PLAYERS_PER_ROUND * (round_number - 1) + WHEEL_BASE_PLAYERS


def use_wheel(active_count: int, round_number: int) -> bool:
    """Whether a round should be generated by the wheel system."""
    return round_number > 1 and active_count > wheel_threshold(round_number)


def pad_player_ids(player_ids: Sequence[PlayerId]) -> List[PlayerId]:
    """Top the roster up to a multiple of four with padding fillers."""
    padded = list(player_ids)
    missing = -len(padded) % PLAYERS_PER_TABLE
    padded.extend(FillerFactory.padding_ids(missing))
    return padded


def assign_seats(
    tables: Tables, rng: random.Random, first_table_number: int = 1
) -> List[Pairing]:
    """Turn tables into pairings, shuffling the winds at each table.

    The slot order of each table is kept; only the seat labels are shuffled.
    """
    pairings = []
    for offset, table in enumerate(tables):
        seats = list(SEATS)
        rng.shuffle(seats)
        pairings.append(
            Pairing(
                table_number=first_table_number + offset,
                players=[
                    SeatAssignment(player_id=player_id, seat=seat)
                    for player_id, seat in zip(table, seats)
                ],
            )
        )
    return pairings


class RoundScheduler:
    """Picks the pairing method for a round and seats the players.

    Args:
        optimizer: Optimizer used for small rosters and as the wheel fallback
        wheel: Wheel scheduler used for large rosters
        rng: Random source for seat shuffles
    """

    def __init__(
        self,
        optimizer: Optional[PairingOptimizer] = None,
        wheel: Optional[WheelScheduler] = None,
        rng: Optional[random.Random] = None,
        iterations: int = DEFAULT_PAIRING_ITERATIONS,
    ):
        self.rng = make_rng(rng)
        self.optimizer = optimizer or PairingOptimizer(iterations=iterations, rng=self.rng)
        self.wheel = wheel or WheelScheduler(rng=self.rng)

    def generate(
        self,
        active_player_ids: Sequence[PlayerId],
        round_number: int,
        rounds: Sequence[RoundData],
    ) -> List[Pairing]:
        """Generate the pairings for a round.

        Args:
            active_player_ids: Active (non-dropped) real players
            round_number: Round being generated
            rounds: All rounds of the tournament so far

        Returns:
            Seated pairings covering every active player

        Raises:
            ValidationException: If the roster contains duplicates
        """
        if len(set(active_player_ids)) != len(active_player_ids):
            raise ValidationException("Active roster contains duplicate players")

        padded = pad_player_ids(active_player_ids)
        tables: Optional[Tables] = None

        if use_wheel(len(active_player_ids), round_number):
            first_round = next((r for r in rounds if r.round_number == 1), None)
            try:
                tables = self.wheel.generate(
                    padded,
                    round_number,
                    first_round.pairings if first_round is not None else None,
                )
                logger.info(
                    f"Round {round_number}: wheel system for "
                    f"{len(active_player_ids)} players"
                )
            except PairingException as e:
                logger.warning(
                    f"Round {round_number}: wheel system unavailable ({e}), "
                    "falling back to optimizer"
                )

        if tables is None:
            previous = [
                r for r in rounds if r.round_number < round_number and r.pairings
            ]
            history = build_opponent_history(previous)
            result = self.optimizer.optimize(padded, history)
            tables = result.tables
            logger.info(
                f"Round {round_number}: optimizer paired {len(active_player_ids)} "
                f"players, rematch penalty {result.score} after "
                f"{result.iterations_run} shuffles"
            )

        return assign_seats(tables, self.rng)
