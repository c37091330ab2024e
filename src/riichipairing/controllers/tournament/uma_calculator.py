"""UMA scoring for tournament games.

A player's UMA for a game is their point difference from the starting stack,
in thousands, plus a fixed bonus for their finishing place.
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

from typing import Dict, Iterable, Sequence

from riichipairing.constants import RANK_UMA_BONUS, UMA_POINT_DIVISOR
from riichipairing.exceptions import InvalidGameResultException
from riichipairing.models.player import PlayerEntry, UmaPenalty
from riichipairing.models.tournament.game_result import GameResult
from riichipairing.models.tournament.round_data import RoundData
from riichipairing.type_hints import PlayerId, UmaDeltas
from riichipairing.utils import setup_logger

logger = setup_logger(__name__)


class UmaCalculator:
    """Turns verified games into standings changes.

    This class is responsible for:
    - Computing per-game UMA deltas
    - Applying a round's deltas to the roster
    - Recomputing UMA from scratch for audits
    """

    def __init__(self, starting_point_value: int):
        self.starting_point_value = starting_point_value

    def calculate_deltas(self, game: GameResult) -> UmaDeltas:
        """UMA change for every player in a game.

        Args:
            game: A game with four ranked players

        Returns:
            Mapping of player ID to delta

        Raises:
            InvalidGameResultException: If a rank is outside 1-4
        """
        return calculate_deltas(game, self.starting_point_value)

    def round_deltas(self, round_data: RoundData) -> UmaDeltas:
        """Summed deltas over the verified games of a round."""
        totals: Dict[PlayerId, float] = {}
        for pairing in round_data.pairings:
            game = pairing.game
            if game is None or not game.verified:
                continue
            for player_id, delta in self.calculate_deltas(game).items():
                totals[player_id] = totals.get(player_id, 0.0) + delta
        return totals

    def apply_round(
        self, round_data: RoundData, entries: Dict[PlayerId, PlayerEntry]
    ) -> UmaDeltas:
        """Add a round's deltas to the roster.

        Regular rounds change ``uma``; finals rounds change ``finals_uma``.
        IDs without a roster entry (fillers) are skipped.

        Returns:
            The deltas that were applied
        """
        applied: UmaDeltas = {}
        for player_id, delta in self.round_deltas(round_data).items():
            entry = entries.get(player_id)
            if entry is None:
                continue
            if round_data.is_finals:
                entry.finals_uma += delta
            else:
                entry.uma += delta
            applied[player_id] = delta

        logger.info(
            f"Applied UMA for round {round_data.round_number} "
            f"({round_data.stage}) to {len(applied)} players"
        )
        return applied

    def compute_uma_map(
        self,
        rounds: Iterable[RoundData],
        penalties: Sequence[UmaPenalty] = (),
        finals_only: bool = False,
    ) -> UmaDeltas:
        """Recompute UMA from the recorded games.

        Args:
            rounds: Rounds to include
            penalties: Penalties, subtracted from the regular map only
            finals_only: Count finals rounds instead of regular rounds

        Returns:
            Mapping of player ID to total UMA. Fillers are included when they
            appear in recorded games.
        """
        totals: Dict[PlayerId, float] = {}
        for round_data in rounds:
            if round_data.is_finals != finals_only:
                continue
            for player_id, delta in self.round_deltas(round_data).items():
                totals[player_id] = totals.get(player_id, 0.0) + delta

        if not finals_only:
            for penalty in penalties:
                totals[penalty.player_id] = (
                    totals.get(penalty.player_id, 0.0) - penalty.amount
                )
        return totals


def calculate_deltas(game: GameResult, starting_point_value: int) -> UmaDeltas:
    """UMA change for each player of one game.

    ``delta = (score - starting_point_value) / 1000 + bonus[rank]`` where the
    rank bonus is +30, +10, -10, -30 for first through fourth.

    Example:
        A first place finish with 45,000 points from a 30,000 start is worth
        ``15 + 30 = 45``.
    """
    deltas: UmaDeltas = {}
    for result in game.players:
        bonus = RANK_UMA_BONUS.get(result.rank)
        if bonus is None:
            raise InvalidGameResultException(f"Invalid rank {result.rank}")
        deltas[result.player_id] = (
            result.score - starting_point_value
        ) / UMA_POINT_DIVISOR + bonus
    return deltas
