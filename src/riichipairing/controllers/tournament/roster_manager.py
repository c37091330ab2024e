"""Roster management for tournaments.

This module handles signups, the waitlist, and players leaving a tournament,
including handing a departing player's unplayed seats to a filler.
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

from typing import Dict, List, Optional, Sequence

from riichipairing.exceptions import (
    DuplicatePlayerException,
    PlayerNotFoundException,
    TournamentStateException,
    ValidationException,
)
from riichipairing.models.enums import TournamentState
from riichipairing.models.player import FillerFactory, PlayerEntry, WaitlistEntry
from riichipairing.models.tournament.round_data import RoundData
from riichipairing.type_hints import Clock, PlayerId
from riichipairing.utils import setup_logger, utc_now
from riichipairing.utils.validation import validate_real_player_id

logger = setup_logger(__name__)


class RosterManager:
    """Keeps the active roster and the waitlist of one tournament.

    This class is responsible for:
    - Admitting players up to ``max_players`` and queueing the rest
    - Promoting waitlisted players before the tournament starts
    - Dropping and kicking players, replacing them in unplayed tables

    Entries are kept in signup order, which is the roster order used to
    break UMA ties when the finals are seeded.
    """

    def __init__(
        self,
        max_players: Optional[int] = None,
        filler_factory: Optional[FillerFactory] = None,
        clock: Clock = utc_now,
    ):
        """Initialize the roster manager.

        Args:
            max_players: Active roster capacity, or None for no limit
            filler_factory: Per-tournament source of filler identities
            clock: Returns the current time, for signup and waitlist stamps
        """
        self.max_players = max_players
        self.filler_factory = filler_factory or FillerFactory()
        self.clock = clock
        self.entries: Dict[PlayerId, PlayerEntry] = {}
        self.waitlist: List[WaitlistEntry] = []

    # ========== Queries ==========

    @property
    def active_entries(self) -> List[PlayerEntry]:
        """Entries of players still playing, in roster order."""
        return [e for e in self.entries.values() if e.is_active]

    @property
    def active_player_ids(self) -> List[PlayerId]:
        """IDs of players still playing, in roster order."""
        return [e.player_id for e in self.active_entries]

    @property
    def open_slots(self) -> Optional[int]:
        """Free places on the active roster, or None when unlimited."""
        if self.max_players is None:
            return None
        return max(0, self.max_players - len(self.active_entries))

    def get_entry(self, player_id: PlayerId) -> Optional[PlayerEntry]:
        return self.entries.get(player_id)

    def is_waitlisted(self, player_id: PlayerId) -> bool:
        return any(w.player_id == player_id for w in self.waitlist)

    def _has_capacity(self) -> bool:
        slots = self.open_slots
        return slots is None or slots > 0

    # ========== Signup and Waitlist ==========

    def signup(self, player_id: PlayerId, state: TournamentState) -> bool:
        """Add a player to the roster, or to the waitlist when full.

        A player who dropped earlier is re-enabled in their old roster
        entry, even when the roster is full; they are never waitlisted.

        Args:
            player_id: Player signing up
            state: Current tournament state

        Returns:
            True if the player is on the active roster, False if waitlisted

        Raises:
            TournamentStateException: If the tournament is completed
            InvalidPlayerDataException: If the ID is a filler ID
            DuplicatePlayerException: If the player is already active or waitlisted
        """
        if state == TournamentState.COMPLETED:
            raise TournamentStateException(
                "Cannot sign up for a completed tournament"
            )
        validate_real_player_id(player_id)

        entry = self.entries.get(player_id)
        if entry is not None and entry.is_active:
            raise DuplicatePlayerException(
                f"Player {player_id} is already signed up for this tournament"
            )
        if self.is_waitlisted(player_id):
            raise DuplicatePlayerException(
                f"Player {player_id} is already on the waitlist"
            )

        if entry is not None:
            entry.dropped = False
            logger.info(f"Re-enabled dropped player {player_id}")
            return True

        if not self._has_capacity():
            self.waitlist.append(WaitlistEntry(player_id=player_id, added_at=self.clock()))
            logger.info(
                f"Roster full ({self.max_players}), waitlisted player {player_id} "
                f"at position {len(self.waitlist)}"
            )
            return False

        self.entries[player_id] = PlayerEntry(player_id=player_id, joined_at=self.clock())
        logger.info(f"Signed up player {player_id}")
        return True

    def promote_waitlist(self, state: TournamentState) -> List[PlayerId]:
        """Move waitlisted players onto the roster, first come first served.

        Only runs before the tournament starts; afterwards the waitlist is
        left untouched.

        Returns:
            IDs of the promoted players
        """
        if state != TournamentState.NOT_STARTED:
            logger.debug(f"Waitlist promotion skipped, tournament is {state.value}")
            return []

        promoted: List[PlayerId] = []
        while self.waitlist and self._has_capacity():
            waiting = self.waitlist.pop(0)
            self.entries[waiting.player_id] = PlayerEntry(
                player_id=waiting.player_id, joined_at=self.clock()
            )
            promoted.append(waiting.player_id)

        if promoted:
            logger.info(f"Promoted {len(promoted)} players from waitlist: {promoted}")
        return promoted

    # ========== Leaving ==========

    def drop(
        self,
        player_id: PlayerId,
        state: TournamentState,
        rounds: Sequence[RoundData] = (),
    ) -> List[PlayerId]:
        """Remove a player who leaves the tournament.

        Before the start the entry is deleted and the waitlist promoted.
        Once started the entry is kept, marked dropped, and the player's
        seat in every unplayed table of an unfinished round goes to their
        filler.

        Args:
            player_id: Player leaving
            state: Current tournament state
            rounds: Rounds whose unplayed tables should lose the player

        Returns:
            IDs promoted from the waitlist as a result

        Raises:
            TournamentStateException: If the tournament is completed
            PlayerNotFoundException: If the player is not signed up
            ValidationException: If the player already dropped
        """
        if state == TournamentState.COMPLETED:
            raise TournamentStateException(
                "Cannot remove players from a completed tournament"
            )

        if self.is_waitlisted(player_id):
            self.waitlist = [w for w in self.waitlist if w.player_id != player_id]
            logger.info(f"Removed player {player_id} from waitlist")
            return []

        entry = self.entries.get(player_id)
        if entry is None:
            raise PlayerNotFoundException(
                f"Player {player_id} is not signed up for this tournament"
            )
        if entry.dropped:
            raise ValidationException(
                f"Player {player_id} has already dropped from this tournament"
            )

        if state == TournamentState.NOT_STARTED:
            del self.entries[player_id]
            logger.info(f"Removed player {player_id} before start")
            return self.promote_waitlist(state)

        entry.dropped = True
        replaced = self.replace_in_pending_pairings(player_id, rounds)
        logger.info(
            f"Dropped player {player_id}, filler took over {replaced} unplayed tables"
        )
        return []

    def kick(
        self,
        player_id: PlayerId,
        state: TournamentState,
        rounds: Sequence[RoundData] = (),
    ) -> List[PlayerId]:
        """Remove a player on an organizer's decision. Same rules as drop."""
        logger.info(f"Kicking player {player_id}")
        return self.drop(player_id, state, rounds)

    def replace_in_pending_pairings(
        self, player_id: PlayerId, rounds: Sequence[RoundData]
    ) -> int:
        """Give a player's seats in unplayed tables to the player's filler.

        Tables with a game attached and rounds already completed keep the
        player.

        Returns:
            Number of tables changed
        """
        replaced = 0
        for round_data in rounds:
            if round_data.is_completed:
                continue
            for pairing in round_data.pairings:
                if pairing.has_game or not pairing.contains(player_id):
                    continue
                filler_id = self.filler_factory.filler_for(player_id)
                if pairing.substitute(player_id, filler_id):
                    replaced += 1
                    logger.debug(
                        f"Round {round_data.round_number} table "
                        f"{pairing.table_number}: {filler_id} replaces {player_id}"
                    )
        return replaced
