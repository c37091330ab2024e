"""Testing module for Riichi Pairing.

This module provides simulation tooling for the pairing engine:
- Random Tournament Generator (RTG)
- Rematch metrics
- Round consistency checks over generated tournaments

Use the CLI: python -m riichipairing.testing
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

from riichipairing.testing.rtg import (
    RandomTournamentGenerator,
    RTGConfig,
    ScorePattern,
    rematch_metrics,
)

__all__ = [
    "RandomTournamentGenerator",
    "RTGConfig",
    "ScorePattern",
    "rematch_metrics",
]
