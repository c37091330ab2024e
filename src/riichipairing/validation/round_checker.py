"""Round Checker - consistency validation for generated rounds.

Checks a round's tables against the structural rules every round must keep
(four distinct players per table, distinct winds, no player seated twice,
unique table numbers) and reports rematches as a quality measure.
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

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from riichipairing.constants import PLAYERS_PER_TABLE
from riichipairing.models.tournament.pairing_history import (
    PairingHistory,
    build_opponent_history,
)
from riichipairing.models.tournament.round_data import RoundData
from riichipairing.type_hints import PlayerId
from riichipairing.utils import setup_logger
from riichipairing.utils.validation import is_filler_id, validate_game_players

logger = setup_logger(__name__)


class CheckStatus(Enum):
    """Status of a single check."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class Severity(Enum):
    STRUCTURAL = "STRUCTURAL"  # round is unusable
    QUALITY = "QUALITY"  # round is usable but could be better


@dataclass
class CheckResult:
    """Result of one check on a round."""

    check: str
    status: CheckStatus
    severity: Optional[Severity] = None
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.status == CheckStatus.FAILED


@dataclass
class RoundReport:
    """All check results for one round."""

    round_number: int
    results: List[CheckResult] = field(default_factory=list)

    @property
    def errors(self) -> List[CheckResult]:
        """Failed structural checks."""
        return [
            r for r in self.results if r.failed and r.severity == Severity.STRUCTURAL
        ]

    @property
    def warnings(self) -> List[CheckResult]:
        """Failed quality checks."""
        return [r for r in self.results if r.failed and r.severity == Severity.QUALITY]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def summary(self) -> str:
        if self.is_valid:
            return (
                f"Round {self.round_number}: structure valid, "
                f"{len(self.warnings)} quality warnings"
            )
        return (
            f"Round {self.round_number}: {len(self.errors)} structural errors, "
            f"{len(self.warnings)} quality warnings"
        )


def _passed(check: str, description: str) -> CheckResult:
    return CheckResult(check=check, status=CheckStatus.PASSED, description=description)


def _failed(
    check: str, severity: Severity, description: str, **details: object
) -> CheckResult:
    return CheckResult(
        check=check,
        status=CheckStatus.FAILED,
        severity=severity,
        description=description,
        details=dict(details),
    )


class RoundChecker:
    """Validates the tables of a round."""

    def check_unique_tables(self, round_data: RoundData) -> CheckResult:
        """Table numbers are unique within the round."""
        counts = Counter(p.table_number for p in round_data.pairings)
        duplicates = sorted(t for t, n in counts.items() if n > 1)
        if duplicates:
            return _failed(
                "unique_tables",
                Severity.STRUCTURAL,
                f"Duplicate table numbers: {duplicates}",
                tables=duplicates,
            )
        return _passed("unique_tables", "Table numbers are unique")

    def check_table_sizes(self, round_data: RoundData) -> CheckResult:
        """Every table seats four distinct identities."""
        bad_tables = [
            p.table_number
            for p in round_data.pairings
            if len(p.players) != PLAYERS_PER_TABLE
            or len(set(p.player_ids)) != PLAYERS_PER_TABLE
        ]
        if bad_tables:
            return _failed(
                "table_sizes",
                Severity.STRUCTURAL,
                f"Tables without {PLAYERS_PER_TABLE} distinct players: {bad_tables}",
                tables=bad_tables,
            )
        return _passed("table_sizes", "Every table has four distinct players")

    def check_unique_seats(self, round_data: RoundData) -> CheckResult:
        """No wind is assigned twice at a table."""
        bad_tables = [
            p.table_number
            for p in round_data.pairings
            if len({a.seat for a in p.players}) != len(p.players)
        ]
        if bad_tables:
            return _failed(
                "unique_seats",
                Severity.STRUCTURAL,
                f"Tables with a repeated wind: {bad_tables}",
                tables=bad_tables,
            )
        return _passed("unique_seats", "Winds are unique at every table")

    def check_no_double_seating(self, round_data: RoundData) -> CheckResult:
        """No identity sits at two tables of the round."""
        counts = Counter(round_data.player_ids)
        duplicates = sorted(pid for pid, n in counts.items() if n > 1)
        if duplicates:
            return _failed(
                "no_double_seating",
                Severity.STRUCTURAL,
                f"Players seated more than once: {duplicates}",
                players=duplicates,
            )
        return _passed("no_double_seating", "Every player is seated once")

    def check_roster_coverage(
        self, round_data: RoundData, active_player_ids: Optional[Iterable[PlayerId]]
    ) -> CheckResult:
        """The round seats exactly the given active roster (plus fillers)."""
        if active_player_ids is None:
            return CheckResult(
                check="roster_coverage",
                status=CheckStatus.NOT_APPLICABLE,
                description="No roster given",
            )
        expected = set(active_player_ids)
        seated = set(round_data.real_player_ids)
        missing = sorted(expected - seated)
        extra = sorted(seated - expected)
        if missing or extra:
            return _failed(
                "roster_coverage",
                Severity.STRUCTURAL,
                f"Roster mismatch: missing {missing}, not on roster {extra}",
                missing=missing,
                extra=extra,
            )
        return _passed("roster_coverage", "Round covers the active roster")

    def check_games(self, round_data: RoundData) -> CheckResult:
        """Attached games match the tables they belong to."""
        bad_tables = []
        for pairing in round_data.pairings:
            if pairing.game is None:
                continue
            if not validate_game_players(pairing.player_ids, pairing.game):
                bad_tables.append(pairing.table_number)
        if bad_tables:
            return _failed(
                "games_match_tables",
                Severity.STRUCTURAL,
                f"Games not matching their table: {bad_tables}",
                tables=bad_tables,
            )
        return _passed("games_match_tables", "Attached games match their tables")

    def check_rematches(
        self, round_data: RoundData, history: PairingHistory
    ) -> CheckResult:
        """Real players meeting someone they already played."""
        rematches = []
        for pairing in round_data.pairings:
            real = [pid for pid in pairing.player_ids if not is_filler_id(pid)]
            for i, first in enumerate(real):
                for second in real[i + 1 :]:
                    times = history.times_played(first, second)
                    if times:
                        rematches.append(
                            {"players": sorted([first, second]), "times": times}
                        )
        if rematches:
            return _failed(
                "rematches",
                Severity.QUALITY,
                f"{len(rematches)} pairs of players meet again",
                rematches=rematches,
            )
        return _passed("rematches", "No rematches")

    def check_round(
        self,
        round_data: RoundData,
        previous_rounds: Sequence[RoundData] = (),
        active_player_ids: Optional[Iterable[PlayerId]] = None,
    ) -> RoundReport:
        """Run every check on a round.

        Args:
            round_data: Round to check
            previous_rounds: Earlier rounds, for the rematch check
            active_player_ids: Roster the round was generated for, if known

        Returns:
            Report with one result per check
        """
        history = build_opponent_history(
            r for r in previous_rounds if r.round_number < round_data.round_number
        )
        report = RoundReport(
            round_number=round_data.round_number,
            results=[
                self.check_unique_tables(round_data),
                self.check_table_sizes(round_data),
                self.check_unique_seats(round_data),
                self.check_no_double_seating(round_data),
                self.check_roster_coverage(round_data, active_player_ids),
                self.check_games(round_data),
                self.check_rematches(round_data, history),
            ],
        )
        if report.is_valid:
            logger.debug(report.summary)
        else:
            logger.warning(report.summary)
        return report

    def check_rounds(self, rounds: Sequence[RoundData]) -> List[RoundReport]:
        """Check every round that has pairings, each against the ones before it."""
        ordered = sorted(rounds, key=lambda r: r.round_number)
        return [
            self.check_round(round_data, ordered[:index])
            for index, round_data in enumerate(ordered)
            if round_data.pairings
        ]


def rematches_inevitable(num_players: int, num_rounds: int) -> bool:
    """Whether the schedule is too long to avoid repeat opponents.

    Each round a player meets three new opponents, out of
    ``num_players - 1`` possible ones.
    """
    if num_players < PLAYERS_PER_TABLE or num_rounds < 1:
        return False
    return num_rounds * (PLAYERS_PER_TABLE - 1) > num_players - 1


def check_round(
    round_data: RoundData,
    previous_rounds: Sequence[RoundData] = (),
    active_player_ids: Optional[Iterable[PlayerId]] = None,
) -> RoundReport:
    """Quick validation function for a single round."""
    return RoundChecker().check_round(round_data, previous_rounds, active_player_ids)
