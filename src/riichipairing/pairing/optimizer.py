"""Randomized search for low-rematch table assignments.

The optimizer tries many random shuffles of the roster, cuts each shuffle
into consecutive tables of four, scores each arrangement by how often its
table-mates have met before, and keeps the best one seen. It gives no
optimality guarantee: the result is the best of the shuffles it tried.
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
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from riichipairing.constants import (
    DEFAULT_PAIRING_ITERATIONS,
    MIN_PAIRING_ITERATIONS,
    PAIRING_WORK_BUDGET,
    PLAYERS_PER_TABLE,
)
from riichipairing.exceptions import ValidationException
from riichipairing.models.tournament.pairing_history import PairingHistory
from riichipairing.type_hints import PlayerId, Tables
from riichipairing.utils import make_rng, setup_logger

logger = setup_logger(__name__)


@dataclass
class OptimizerResult:
    """Best arrangement found by the optimizer.

    Attributes
    ----------
    tables : list of list of str
        Player IDs per table, in table order.
    score : int
        Rematch penalty of the arrangement (lower is better).
    iterations_run : int
        Number of shuffles tried before returning.
    """

    tables: Tables = field(default_factory=list)
    score: int = 0
    iterations_run: int = 0


def score_tables(tables: Sequence[Sequence[PlayerId]], history: PairingHistory) -> int:
    """Total rematch penalty of an arrangement.

    Each pair of table-mates that met ``n`` times before adds ``n ** 2``.
    """
    return sum(history.table_penalty(table) for table in tables)


def split_into_tables(player_ids: Sequence[PlayerId]) -> Tables:
    """Cut an ordered roster into consecutive tables of four."""
    return [
        list(player_ids[start : start + PLAYERS_PER_TABLE])
        for start in range(0, len(player_ids), PLAYERS_PER_TABLE)
    ]


class PairingOptimizer:
    """Best-of-K random search over table arrangements.

    Args:
        iterations: Upper bound on the number of shuffles tried
        rng: Random source; pass a seeded ``random.Random`` for repeatable output
        min_iterations: Floor on shuffles tried, however large the roster
        work_budget: Shuffled player slots allowed per call. The effective
            number of shuffles is ``work_budget // len(players)``, clamped
            between ``min_iterations`` and ``iterations``.
    """

    def __init__(
        self,
        iterations: int = DEFAULT_PAIRING_ITERATIONS,
        rng: Optional[random.Random] = None,
        min_iterations: int = MIN_PAIRING_ITERATIONS,
        work_budget: int = PAIRING_WORK_BUDGET,
    ):
        self.iterations = iterations
        self.rng = make_rng(rng)
        self.min_iterations = min_iterations
        self.work_budget = work_budget

    def iterations_for(self, num_players: int) -> int:
        """Number of shuffles to try for a roster size."""
        if num_players <= 0:
            return 0
        scaled = self.work_budget // num_players
        return max(min(self.min_iterations, self.iterations), min(self.iterations, scaled))

    def optimize(
        self, player_ids: Sequence[PlayerId], history: PairingHistory
    ) -> OptimizerResult:
        """Find a low-penalty partition of the roster into tables.

        Args:
            player_ids: Roster already padded to a multiple of four
            history: Previous meetings between players

        Returns:
            The best arrangement seen

        Raises:
            ValidationException: If the roster is not a multiple of four
        """
        if len(player_ids) % PLAYERS_PER_TABLE != 0:
            raise ValidationException(
                f"Cannot generate pairings: {len(player_ids)} players is not "
                f"divisible by {PLAYERS_PER_TABLE}"
            )
        if not player_ids:
            return OptimizerResult()

        iterations = self.iterations_for(len(player_ids))
        shuffled: List[PlayerId] = list(player_ids)
        best_tables: Tables = []
        best_score: Optional[int] = None
        iterations_run = 0

        for _ in range(iterations):
            iterations_run += 1
            self.rng.shuffle(shuffled)
            tables = split_into_tables(shuffled)
            score = score_tables(tables, history)

            if best_score is None or score < best_score:
                best_score = score
                best_tables = tables
            if best_score == 0:
                break

        logger.debug(
            f"Optimizer tried {iterations_run}/{iterations} shuffles for "
            f"{len(player_ids)} players, best penalty {best_score}"
        )
        return OptimizerResult(
            tables=best_tables, score=best_score or 0, iterations_run=iterations_run
        )
