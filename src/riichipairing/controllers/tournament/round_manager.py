"""Round management for tournaments.

This module handles round creation for both stages of a tournament: regular
rounds paired by the scheduler, and finals rounds that seat the same four
finalists again with fresh winds.
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
    FINALISTS_COUNT,
    PLAYERS_PER_TABLE,
    STAGE_FINALS,
    STAGE_REGULAR,
)
from riichipairing.exceptions import (
    NoPairingAvailableException,
    RoundNotFoundException,
    TournamentStateException,
    ValidationException,
)
from riichipairing.models.player import PlayerEntry
from riichipairing.models.tournament.round_data import RoundData
from riichipairing.pairing.scheduler import RoundScheduler, assign_seats
from riichipairing.type_hints import Clock, PlayerId
from riichipairing.utils import make_rng, setup_logger, utc_now

logger = setup_logger(__name__)


def select_finalists(active_entries: Sequence[PlayerEntry]) -> List[PlayerEntry]:
    """Top four active players by UMA.

    Ties keep roster order, so the earlier signup wins.

    Raises:
        NoPairingAvailableException: If fewer than four players are active
    """
    if len(active_entries) < FINALISTS_COUNT:
        raise NoPairingAvailableException(
            f"Finals need {FINALISTS_COUNT} active players, "
            f"only {len(active_entries)} remain"
        )
    ranked = sorted(active_entries, key=lambda e: -e.uma)
    return ranked[:FINALISTS_COUNT]


class RoundManager:
    """Manages round creation and the list of rounds of a tournament.

    This class is responsible for:
    - Generating regular rounds through the scheduler
    - Creating finals rounds for the four finalists
    - Keeping rounds ordered by number, replacing empty (reset) rounds
    """

    def __init__(
        self,
        scheduler: Optional[RoundScheduler] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = utc_now,
    ):
        """Initialize the round manager.

        Args:
            scheduler: Pairing method selection for regular rounds
            rng: Random source for finals seat shuffles
            clock: Returns the current time, stamped as the round start
        """
        self.rng = make_rng(rng)
        self.scheduler = scheduler or RoundScheduler(rng=self.rng)
        self.clock = clock
        self.rounds: List[RoundData] = []

    @property
    def current_round(self) -> Optional[RoundData]:
        """The highest-numbered round that has pairings."""
        with_pairings = [r for r in self.rounds if r.pairings]
        return with_pairings[-1] if with_pairings else None

    def get_round(self, round_number: int) -> Optional[RoundData]:
        """Get data for a specific round, or None if it does not exist."""
        for round_data in self.rounds:
            if round_data.round_number == round_number:
                return round_data
        return None

    def require_round(self, round_number: int) -> RoundData:
        """Get a round or raise.

        Raises:
            RoundNotFoundException: If the round does not exist
        """
        round_data = self.get_round(round_number)
        if round_data is None:
            raise RoundNotFoundException(f"Round {round_number} not found")
        return round_data

    def first_finals_round(self) -> Optional[RoundData]:
        finals = [r for r in self.rounds if r.is_finals and r.pairings]
        return finals[0] if finals else None

    # ========== Round Creation ==========

    def create_regular_round(
        self, round_number: int, active_player_ids: Sequence[PlayerId]
    ) -> RoundData:
        """Pair the active roster for a regular round.

        Raises:
            ValidationException: If fewer than four players are active
            TournamentStateException: If the round already has pairings
        """
        if len(active_player_ids) < PLAYERS_PER_TABLE:
            raise ValidationException(
                f"Need at least {PLAYERS_PER_TABLE} active players to pair "
                f"round {round_number}, got {len(active_player_ids)}"
            )
        self._check_round_free(round_number)

        logger.info(
            f"Creating round {round_number} with {len(active_player_ids)} active players"
        )
        pairings = self.scheduler.generate(active_player_ids, round_number, self.rounds)
        round_data = RoundData(
            round_number=round_number,
            start_date=self.clock(),
            pairings=pairings,
            stage=STAGE_REGULAR,
        )
        return self._store_round(round_data)

    def create_finals_round(
        self, round_number: int, finalist_ids: Sequence[PlayerId]
    ) -> RoundData:
        """Seat the finalists at a single table with shuffled winds.

        Slot order follows ``finalist_ids``; only the winds are random.

        Raises:
            NoPairingAvailableException: If there are not exactly four finalists
            TournamentStateException: If the round already has pairings
        """
        if len(finalist_ids) != FINALISTS_COUNT:
            raise NoPairingAvailableException(
                f"Finals need exactly {FINALISTS_COUNT} players, got {len(finalist_ids)}"
            )
        self._check_round_free(round_number)

        round_data = RoundData(
            round_number=round_number,
            start_date=self.clock(),
            pairings=assign_seats([list(finalist_ids)], self.rng),
            stage=STAGE_FINALS,
        )
        logger.info(f"Created finals round {round_number}: {list(finalist_ids)}")
        return self._store_round(round_data)

    def reset_round_pairings(self, round_number: int) -> RoundData:
        """Clear the pairings of a round so it can be generated again.

        Raises:
            RoundNotFoundException: If the round does not exist
        """
        round_data = self.require_round(round_number)
        if round_data.has_games:
            logger.warning(
                f"Resetting round {round_number} although some tables already "
                "have games attached"
            )
        round_data.pairings = []
        logger.info(f"Reset pairings for round {round_number}")
        return round_data

    def _check_round_free(self, round_number: int) -> None:
        existing = self.get_round(round_number)
        if existing is not None and existing.pairings:
            raise TournamentStateException(
                f"Round {round_number} already has pairings"
            )

    def _store_round(self, round_data: RoundData) -> RoundData:
        """Append a round, or replace an existing round with no pairings."""
        self.rounds = [
            r for r in self.rounds if r.round_number != round_data.round_number
        ]
        self.rounds.append(round_data)
        self.rounds.sort(key=lambda r: r.round_number)
        return round_data
