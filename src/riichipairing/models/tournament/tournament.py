"""Main Tournament class - orchestrates all tournament operations.

This is the primary interface for running a tournament. It owns the round
lifecycle (NotStarted, InProgress, Completed) and coordinates the roster,
round and UMA managers.
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

import functools
import random
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from riichipairing.constants import MIN_PLAYERS_TO_START
from riichipairing.exceptions import (
    GameAlreadyRecordedException,
    PairingNotFoundException,
    PlayerNotFoundException,
    RiichiPairingException,
    TournamentStateException,
    UnresolvedRoundException,
    ValidationException,
)
from riichipairing.models.enums import TournamentState
from riichipairing.models.player import (
    FillerFactory,
    PlayerEntry,
    UmaPenalty,
    WaitlistEntry,
)
from riichipairing.notifications import Notifier, RoundNotification
from riichipairing.type_hints import Clock, PlayerId, UmaDeltas
from riichipairing.utils import make_rng, setup_logger, utc_now
from riichipairing.utils.validation import (
    validate_game_players_strict,
    validate_round_number_strict,
)

from .game_result import GameResult
from .round_data import Pairing, RoundData
from .tournament_config import TournamentConfig, default_max_rounds

from riichipairing.controllers.tournament import (
    RosterManager,
    RoundManager,
    UmaCalculator,
    select_finalists,
)
from riichipairing.pairing.scheduler import RoundScheduler

logger = setup_logger(__name__)


@dataclass
class EndRoundResult:
    """Outcome of ending a round.

    Attributes
    ----------
    round_number : int
        The round that was ended.
    already_completed : bool
        True when the round had been scored before; nothing changed.
    uma_deltas : dict
        Deltas applied to the roster, by player ID.
    next_round : RoundData or None
        The round generated as a result, if any.
    completed : bool
        Whether this call finished the tournament.
    warnings : list of str
        Problems that did not undo the scoring, such as a failure to
        generate the next round.
    """

    round_number: int
    already_completed: bool = False
    uma_deltas: UmaDeltas = field(default_factory=dict)
    next_round: Optional[RoundData] = None
    completed: bool = False
    warnings: List[str] = field(default_factory=list)


def synchronized(method):
    """Run a method under the tournament's lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class Tournament:
    """Main tournament management class.

    This class coordinates all tournament operations through specialized managers:
    - RosterManager: signups, waitlist, drops and kicks
    - RoundManager: regular and finals round creation
    - UmaCalculator: standings deltas from verified games

    Every mutating call holds the tournament's lock and bumps ``version``,
    so a storage layer can detect concurrent writers. Tournaments share
    nothing with each other.
    """

    def __init__(
        self,
        config: Optional[TournamentConfig] = None,
        tournament_id: Optional[str] = None,
        rng: Optional[Union[int, random.Random]] = None,
        clock: Clock = utc_now,
        notifier: Optional[Notifier] = None,
        filler_factory: Optional[FillerFactory] = None,
    ) -> None:
        """Initialize a new tournament.

        Args
        ----
        config: Tournament settings
        tournament_id: Identifier used in notifications; generated if omitted
        rng: Seed or random source for pairings and seat shuffles
        clock: Returns the current time
        notifier: Receives a notification for every round started
        filler_factory: Source of filler identities for dropped players
        """
        self.config = config or TournamentConfig()
        self.config.validate()
        self.id = tournament_id or uuid.uuid4().hex
        self.rng = make_rng(rng)
        self.clock = clock
        self.notifier = notifier or Notifier()

        self.state = TournamentState.NOT_STARTED
        self.version = 0
        self.penalties: List[UmaPenalty] = []
        self.final_standings: List[PlayerId] = []
        self._lock = threading.RLock()

        # Specialized managers
        self.roster = RosterManager(
            max_players=self.config.max_players,
            filler_factory=filler_factory or FillerFactory(),
            clock=clock,
        )
        self.round_manager = RoundManager(
            scheduler=RoundScheduler(
                rng=self.rng, iterations=self.config.pairing_iterations
            ),
            rng=self.rng,
            clock=clock,
        )
        self.uma_calculator = UmaCalculator(self.config.starting_point_value)

    # ========== Properties ==========

    @property
    def name(self) -> str:
        """Get tournament name."""
        return self.config.name

    @property
    def max_rounds(self) -> Optional[int]:
        return self.config.max_rounds

    @property
    def players(self) -> Dict[PlayerId, PlayerEntry]:
        """Roster entries by player ID, in signup order."""
        return self.roster.entries

    @property
    def waitlist(self) -> List[WaitlistEntry]:
        return self.roster.waitlist

    @property
    def rounds(self) -> List[RoundData]:
        return self.round_manager.rounds

    @property
    def filler_factory(self) -> FillerFactory:
        return self.roster.filler_factory

    @property
    def current_round(self) -> Optional[RoundData]:
        """Latest round with pairings."""
        return self.round_manager.current_round

    def get_round(self, round_number: int) -> Optional[RoundData]:
        return self.round_manager.get_round(round_number)

    def _touch(self) -> None:
        self.version += 1

    def _require_not_completed(self, action: str) -> None:
        if self.state == TournamentState.COMPLETED:
            raise TournamentStateException(f"Cannot {action}: tournament is completed")

    # ========== Roster ==========

    @synchronized
    def signup(self, player_id: PlayerId) -> bool:
        """Sign a player up, or waitlist them when the roster is full.

        Returns:
            True if the player is on the active roster, False if waitlisted
        """
        joined = self.roster.signup(player_id, self.state)
        self._touch()
        return joined

    @synchronized
    def promote_waitlist(self) -> List[PlayerId]:
        """Fill open roster slots from the waitlist (before the start only)."""
        promoted = self.roster.promote_waitlist(self.state)
        if promoted:
            self._touch()
        return promoted

    @synchronized
    def drop(self, player_id: PlayerId) -> List[PlayerId]:
        """A player leaves the tournament.

        Returns:
            IDs promoted from the waitlist as a result
        """
        promoted = self.roster.drop(player_id, self.state, self.rounds)
        self._touch()
        return promoted

    @synchronized
    def kick(self, player_id: PlayerId) -> List[PlayerId]:
        """An organizer removes a player from the tournament."""
        promoted = self.roster.kick(player_id, self.state, self.rounds)
        self._touch()
        return promoted

    @synchronized
    def add_penalty(
        self, player_id: PlayerId, amount: float, description: str = ""
    ) -> UmaPenalty:
        """Deduct UMA from a player.

        Args:
            player_id: Penalized player
            amount: Positive number of UMA points to subtract
            description: Reason, shown in standings

        Raises:
            TournamentStateException: If the tournament is completed, or the
                player is a finalist (finals ranking ignores regular UMA)
            ValidationException: If the amount is not positive
            PlayerNotFoundException: If the player is not on the roster
        """
        self._require_not_completed("add a penalty")
        if amount <= 0:
            raise ValidationException(f"Penalty amount must be positive, got {amount}")
        entry = self.roster.get_entry(player_id)
        if entry is None:
            raise PlayerNotFoundException(
                f"Player {player_id} is not signed up for this tournament"
            )
        if entry.is_finalist:
            raise TournamentStateException(
                f"Cannot penalize finalist {player_id} once finals are seeded"
            )

        penalty = UmaPenalty(player_id=player_id, amount=amount, description=description)
        self.penalties.append(penalty)
        entry.uma -= amount
        self._touch()
        logger.info(f"Penalty of {amount} UMA for {player_id}: {description}")
        return penalty

    # ========== Lifecycle ==========

    @synchronized
    def start(self) -> RoundData:
        """Start the tournament and pair round 1.

        Returns:
            Round 1

        Raises:
            TournamentStateException: If the tournament already started
            ValidationException: If fewer than eight players are active
        """
        if self.state != TournamentState.NOT_STARTED:
            raise TournamentStateException(
                f"Tournament cannot be started from state {self.state.value}"
            )
        active_ids = self.roster.active_player_ids
        if len(active_ids) < MIN_PLAYERS_TO_START:
            raise ValidationException(
                f"Tournament must have at least {MIN_PLAYERS_TO_START} players "
                f"to start, has {len(active_ids)}"
            )

        if self.config.max_rounds is None:
            self.config.max_rounds = default_max_rounds(len(active_ids))
            logger.info(
                f"max_rounds set to {self.config.max_rounds} for {len(active_ids)} players"
            )

        first_round = self.get_round(1)
        if first_round is None or not first_round.pairings:
            first_round = self.round_manager.create_regular_round(1, active_ids)

        self.state = TournamentState.IN_PROGRESS
        self._touch()
        logger.info(
            f"Started tournament {self.name} with {len(active_ids)} players, "
            f"{self.config.max_rounds} regular rounds"
        )
        self._notify(first_round)
        return first_round

    @synchronized
    def end_round(self, round_number: int) -> EndRoundResult:
        """Score a finished round and move the tournament on.

        Every table must have a verified game (tables of fillers only are
        exempt). The round's UMA is committed first; if the next round then
        cannot be generated, the failure is returned as a warning and the
        round stays scored.

        Args:
            round_number: Round to end (1-indexed)

        Returns:
            What happened; see EndRoundResult

        Raises:
            ValidationException: If the round number is invalid
            TournamentStateException: If the tournament has not started, the
                round has no pairings, or a game is missing or unverified
            RoundNotFoundException: If the round does not exist
        """
        round_number = validate_round_number_strict(round_number)
        if self.state == TournamentState.NOT_STARTED:
            raise TournamentStateException("Tournament has not started")
        round_data = self.round_manager.require_round(round_number)

        if round_data.is_completed:
            logger.info(f"Round {round_number} already completed, nothing to do")
            return EndRoundResult(round_number=round_number, already_completed=True)
        self._require_not_completed("end a round")
        if not round_data.pairings:
            raise TournamentStateException(f"Round {round_number} has no pairings")

        unresolved = round_data.unresolved_pairings()
        if unresolved:
            missing = [p.table_number for p in unresolved if p.game is None]
            unverified = [p.table_number for p in unresolved if p.game is not None]
            raise UnresolvedRoundException(
                f"Cannot end round {round_number}: tables {missing} have no game, "
                f"tables {unverified} are not verified"
            )

        deltas = self.uma_calculator.apply_round(round_data, self.players)
        round_data.is_completed = True
        result = EndRoundResult(round_number=round_number, uma_deltas=deltas)

        try:
            if round_data.is_finals:
                if round_number < self.config.last_round_number:
                    result.next_round = self._create_next_finals_round(round_number + 1)
                else:
                    self._complete()
                    result.completed = True
            elif round_number < self.config.max_rounds:
                result.next_round = self.round_manager.create_regular_round(
                    round_number + 1, self.roster.active_player_ids
                )
            else:
                result.next_round = self._seed_finals(round_number + 1)
        except RiichiPairingException as e:
            logger.error(
                f"Round {round_number} scored but the next round could not be "
                f"generated: {e}",
                exc_info=True,
            )
            result.warnings.append(f"Next round could not be generated: {e}")

        self._touch()
        logger.info(f"Ended round {round_number}")
        if result.next_round is not None:
            self._notify(result.next_round)
        return result

    @synchronized
    def generate_round(self, round_number: int) -> RoundData:
        """Generate a round by hand, after a reset or a failed automatic attempt.

        Raises:
            ValidationException: If the round number is invalid or beyond
                the last finals round
            TournamentStateException: If the tournament is not in progress,
                the previous round is not completed, or the round already
                has pairings
        """
        round_number = validate_round_number_strict(round_number)
        if self.state != TournamentState.IN_PROGRESS:
            raise TournamentStateException(
                f"Rounds can only be generated while in progress, not {self.state.value}"
            )
        if round_number > self.config.last_round_number:
            raise ValidationException(
                f"Round {round_number} is beyond the last round "
                f"({self.config.last_round_number})"
            )
        if round_number > 1:
            previous = self.get_round(round_number - 1)
            if previous is None or not previous.is_completed:
                raise TournamentStateException(
                    f"Round {round_number - 1} must be completed before "
                    f"round {round_number} is generated"
                )

        if round_number <= self.config.max_rounds:
            round_data = self.round_manager.create_regular_round(
                round_number, self.roster.active_player_ids
            )
        elif self.round_manager.first_finals_round() is None:
            round_data = self._seed_finals(round_number)
        else:
            round_data = self._create_next_finals_round(round_number)

        self._touch()
        self._notify(round_data)
        return round_data

    @synchronized
    def reset_round_pairings(self, round_number: int) -> RoundData:
        """Clear a round's pairings so it can be generated again.

        The caller is expected to only reset rounds whose games have not
        been played; a warning is logged otherwise.
        """
        round_number = validate_round_number_strict(round_number)
        self._require_not_completed("reset a round")
        round_data = self.round_manager.reset_round_pairings(round_number)
        self._touch()
        return round_data

    # ========== Finals ==========

    def _finalist_ids(self) -> List[PlayerId]:
        """Finalists in seeding order."""
        finalists = [e for e in self.players.values() if e.is_finalist]
        finalists.sort(key=lambda e: -e.qualifying_uma)
        return [e.player_id for e in finalists]

    def _seed_finals(self, round_number: int) -> RoundData:
        """Seat the top four for the first finals round.

        Finalists keep their regular UMA as ``qualifying_uma``, and their
        ``uma`` restarts from zero. Seeding happens once; regenerating the
        round after a reset reuses the same finalists.
        """
        finalist_ids = self._finalist_ids()
        if not finalist_ids:
            finalists = select_finalists(self.roster.active_entries)
            for entry in finalists:
                entry.qualifying_uma = entry.uma
                entry.uma = 0.0
            finalist_ids = [e.player_id for e in finalists]
            logger.info(f"Seeded finals: {finalist_ids}")
        return self.round_manager.create_finals_round(round_number, finalist_ids)

    def _create_next_finals_round(self, round_number: int) -> RoundData:
        """Same four seats as the first finals round, winds reshuffled.

        A finalist who dropped is replaced by their filler.
        """
        seats: List[PlayerId] = []
        for player_id in self._finals_slot_order():
            entry = self.roster.get_entry(player_id)
            if entry is not None and entry.dropped:
                seats.append(self.filler_factory.filler_for(player_id))
            else:
                seats.append(player_id)
        return self.round_manager.create_finals_round(round_number, seats)

    def _finals_slot_order(self) -> Dict[PlayerId, int]:
        """Slot index of each finalist in the first finals table.

        Seats taken over by a filler still count for the finalist who left.
        """
        first_finals = self.round_manager.first_finals_round()
        if first_finals is None:
            return {pid: slot for slot, pid in enumerate(self._finalist_ids())}
        return {
            assignment.substituted_for or assignment.player_id: slot
            for slot, assignment in enumerate(first_finals.pairings[0].players)
        }

    def finals_ranking(self) -> List[PlayerId]:
        """Finalists ranked by finals UMA, then qualifying UMA, then slot order."""
        slots = self._finals_slot_order()
        finalists = [self.players[pid] for pid in slots if pid in self.players]
        finalists.sort(
            key=lambda e: (
                -e.finals_uma,
                -(e.qualifying_uma or 0.0),
                slots[e.player_id],
            )
        )
        return [e.player_id for e in finalists]

    def _complete(self) -> None:
        self.final_standings = self.finals_ranking()
        self.state = TournamentState.COMPLETED
        logger.info(f"Tournament {self.name} completed: {self.final_standings}")

    # ========== Games ==========

    def _require_pairing(self, round_number: int, table_number: int) -> Pairing:
        round_data = self.round_manager.require_round(round_number)
        pairing = round_data.get_pairing(table_number)
        if pairing is None:
            raise PairingNotFoundException(
                f"Table {table_number} not found in round {round_number}"
            )
        return pairing

    @synchronized
    def record_game(
        self,
        round_number: int,
        table_number: int,
        game: Union[GameResult, Dict[str, Any]],
    ) -> Pairing:
        """Attach a reported game to its table.

        Args:
            round_number: Round of the table
            table_number: Table the game was played at
            game: The game, or its dictionary form

        Raises:
            TournamentStateException: If the tournament is not in progress, the
                round is completed, or the table already has a game
            RoundNotFoundException: If the round does not exist
            PairingNotFoundException: If the table does not exist
            InvalidGameResultException: If the game does not match the table
        """
        round_number = validate_round_number_strict(round_number)
        if self.state != TournamentState.IN_PROGRESS:
            raise TournamentStateException(
                f"Games can only be recorded while in progress, not {self.state.value}"
            )
        if isinstance(game, dict):
            game = GameResult.from_dict(game)

        pairing = self._require_pairing(round_number, table_number)
        if self.get_round(round_number).is_completed:
            raise TournamentStateException(f"Round {round_number} is already completed")
        if pairing.has_game:
            raise GameAlreadyRecordedException(
                f"Table {table_number} in round {round_number} already has a game"
            )
        validate_game_players_strict(pairing.player_ids, game)

        pairing.attach_game(game)
        self._touch()
        logger.info(
            f"Recorded game {game.game_id} for round {round_number} table {table_number}"
        )
        return pairing

    @synchronized
    def verify_game(self, round_number: int, table_number: int) -> GameResult:
        """Mark a table's game as verified so it counts toward standings.

        Raises:
            TournamentStateException: If the table has no game
        """
        round_number = validate_round_number_strict(round_number)
        self._require_not_completed("verify a game")
        pairing = self._require_pairing(round_number, table_number)
        if pairing.game is None:
            raise TournamentStateException(
                f"Table {table_number} in round {round_number} has no game to verify"
            )
        pairing.game.verified = True
        self._touch()
        logger.info(f"Verified game for round {round_number} table {table_number}")
        return pairing.game

    def find_player_pairing(
        self, player_id: PlayerId
    ) -> Optional[Tuple[RoundData, Pairing]]:
        """The player's table in the latest round that seats them."""
        with self._lock:
            for round_data in sorted(
                self.rounds, key=lambda r: r.round_number, reverse=True
            ):
                if not round_data.pairings:
                    continue
                pairing = round_data.find_player(player_id)
                if pairing is not None:
                    return round_data, pairing
            return None

    # ========== Standings ==========

    def get_standings(self, active_only: bool = False) -> List[PlayerEntry]:
        """Current standings, best first.

        Once finals are seeded the finalists lead in finals order, followed
        by everyone else by UMA. Ties keep roster order.
        """
        with self._lock:
            entries = [
                e for e in self.players.values() if e.is_active or not active_only
            ]
            finalist_order = (
                self.final_standings
                if self.state == TournamentState.COMPLETED
                else self.finals_ranking()
            )
            included = {e.player_id for e in entries}
            leaders = [self.players[pid] for pid in finalist_order if pid in included]
            rest = [e for e in entries if e.player_id not in finalist_order]
            rest.sort(key=lambda e: -e.uma)
            return leaders + rest

    def compute_uma_map(self, finals_only: bool = False) -> UmaDeltas:
        """Recompute UMA from the recorded verified games."""
        with self._lock:
            return self.uma_calculator.compute_uma_map(
                self.rounds, self.penalties, finals_only=finals_only
            )

    # ========== Notifications ==========

    def _notify(self, round_data: RoundData) -> None:
        self.notifier.notify(
            RoundNotification(tournament_id=self.id, round_number=round_data.round_number)
        )

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary.

        Returns:
            Dictionary containing all tournament data
        """
        with self._lock:
            return {
                "id": self.id,
                "config": self.config.to_dict(),
                "state": self.state.value,
                "version": self.version,
                "players": [e.to_dict() for e in self.players.values()],
                "waitlist": [w.to_dict() for w in self.waitlist],
                "penalties": [p.to_dict() for p in self.penalties],
                "rounds": [r.to_dict() for r in self.rounds],
                "fillers": self.filler_factory.to_dict(),
                "final_standings": list(self.final_standings),
            }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        rng: Optional[Union[int, random.Random]] = None,
        clock: Clock = utc_now,
        notifier: Optional[Notifier] = None,
    ) -> "Tournament":
        """Deserialize tournament from dictionary.

        Args:
            data: Dictionary containing tournament data
            rng: Seed or random source for rounds generated from now on
            clock: Returns the current time
            notifier: Receives round notifications

        Returns:
            Reconstructed Tournament object
        """
        config = TournamentConfig.from_dict(data.get("config", {}))
        tournament = cls(
            config=config,
            tournament_id=data.get("id"),
            rng=rng,
            clock=clock,
            notifier=notifier,
            filler_factory=FillerFactory.from_dict(data.get("fillers", {})),
        )

        tournament.state = TournamentState(data.get("state", TournamentState.NOT_STARTED))
        tournament.version = int(data.get("version", 0))
        for entry_data in data.get("players", []):
            entry = PlayerEntry.from_dict(entry_data)
            tournament.roster.entries[entry.player_id] = entry
        tournament.roster.waitlist = [
            WaitlistEntry.from_dict(w) for w in data.get("waitlist", [])
        ]
        tournament.penalties = [UmaPenalty.from_dict(p) for p in data.get("penalties", [])]
        tournament.round_manager.rounds = sorted(
            (RoundData.from_dict(r) for r in data.get("rounds", [])),
            key=lambda r: r.round_number,
        )
        tournament.final_standings = [str(pid) for pid in data.get("final_standings", [])]

        logger.info(f"Loaded tournament: {tournament.name}")
        return tournament
