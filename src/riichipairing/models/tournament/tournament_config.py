"""TournamentConfig data class."""

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

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from riichipairing.constants import (
    DEFAULT_NUMBER_OF_FINALS_MATCHES,
    DEFAULT_PAIRING_ITERATIONS,
    DEFAULT_ROUND_DURATION_MINUTES,
    DEFAULT_STARTING_POINT_VALUE,
    PLAYERS_PER_TABLE,
    WHEEL_BASE_PLAYERS,
    WHEEL_PLAYERS_PER_ROUND,
)
from riichipairing.exceptions import InvalidConfigurationException


def default_max_rounds(active_players: int) -> int:
    """Number of regular rounds for a roster size.

    Grows by one round for every twelve players past the first four, which
    is the rate at which the wheel system runs out of fresh opponents.
    """
    return max(
        1,
        math.ceil(
            (active_players - WHEEL_BASE_PLAYERS) / WHEEL_PLAYERS_PER_ROUND + 1
        ),
    )


@dataclass
class TournamentConfig:
    """Tournament configuration settings.

    Attributes
    ----------
    name : str
        Tournament name.
    max_rounds : int or None
        Number of regular rounds. When ``None`` it is derived from the
        active roster size when the tournament starts.
    starting_point_value : int
        Points each player starts a game with. UMA is measured from here.
    number_of_finals_matches : int
        Finals games played by the top four after the regular rounds.
    max_players : int or None
        Active roster capacity. Further signups go to the waitlist.
        ``None`` means unlimited.
    round_duration_minutes : int
        Scheduled length of a round.
    pairing_iterations : int
        Upper bound on random shuffles tried by the pairing optimizer.
    """

    name: str = "Untitled Tournament"
    max_rounds: Optional[int] = None
    starting_point_value: int = DEFAULT_STARTING_POINT_VALUE
    number_of_finals_matches: int = DEFAULT_NUMBER_OF_FINALS_MATCHES
    max_players: Optional[int] = None
    round_duration_minutes: int = DEFAULT_ROUND_DURATION_MINUTES
    pairing_iterations: int = DEFAULT_PAIRING_ITERATIONS

    def validate(self) -> None:
        """Check the settings are usable.

        Raises:
            InvalidConfigurationException: If any setting is out of range
        """
        if self.max_rounds is not None and self.max_rounds < 1:
            raise InvalidConfigurationException(
                f"max_rounds must be at least 1, got {self.max_rounds}"
            )
        if self.number_of_finals_matches < 1:
            raise InvalidConfigurationException(
                "number_of_finals_matches must be at least 1, "
                f"got {self.number_of_finals_matches}"
            )
        if self.max_players is not None and self.max_players < PLAYERS_PER_TABLE:
            raise InvalidConfigurationException(
                f"max_players must be at least {PLAYERS_PER_TABLE}, got {self.max_players}"
            )
        if self.round_duration_minutes <= 0:
            raise InvalidConfigurationException(
                "round_duration_minutes must be positive, "
                f"got {self.round_duration_minutes}"
            )
        if self.pairing_iterations < 1:
            raise InvalidConfigurationException(
                f"pairing_iterations must be at least 1, got {self.pairing_iterations}"
            )

    @property
    def last_round_number(self) -> Optional[int]:
        """Number of the final finals round, once max_rounds is known."""
        if self.max_rounds is None:
            return None
        return self.max_rounds + self.number_of_finals_matches

    def is_finals_round(self, round_number: int) -> bool:
        """Whether a round number falls in the finals stage."""
        return self.max_rounds is not None and round_number > self.max_rounds

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "name": self.name,
            "max_rounds": self.max_rounds,
            "starting_point_value": self.starting_point_value,
            "number_of_finals_matches": self.number_of_finals_matches,
            "max_players": self.max_players,
            "round_duration_minutes": self.round_duration_minutes,
            "pairing_iterations": self.pairing_iterations,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """Deserialize configuration from dictionary."""
        config = cls(
            name=data.get("name", "Untitled Tournament"),
            max_rounds=data.get("max_rounds"),
            starting_point_value=data.get(
                "starting_point_value", DEFAULT_STARTING_POINT_VALUE
            ),
            number_of_finals_matches=data.get(
                "number_of_finals_matches", DEFAULT_NUMBER_OF_FINALS_MATCHES
            ),
            max_players=data.get("max_players"),
            round_duration_minutes=data.get(
                "round_duration_minutes", DEFAULT_ROUND_DURATION_MINUTES
            ),
            pairing_iterations=data.get(
                "pairing_iterations", DEFAULT_PAIRING_ITERATIONS
            ),
        )
        config.validate()
        return config
