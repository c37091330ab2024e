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

# --- Constants ---
PLAYERS_PER_TABLE = 4
MIN_PLAYERS_TO_START = 8

# Seats, in table order
SEAT_EAST = "East"
SEAT_SOUTH = "South"
SEAT_WEST = "West"
SEAT_NORTH = "North"
SEATS = (SEAT_EAST, SEAT_SOUTH, SEAT_WEST, SEAT_NORTH)

# Scoring
DEFAULT_STARTING_POINT_VALUE = 30000
UMA_POINT_DIVISOR = 1000
RANK_UMA_BONUS = {
    1: 30,
    2: 10,
    3: -10,
    4: -30,
}
VALID_RANKS = frozenset(RANK_UMA_BONUS)

# Tournament shape
DEFAULT_NUMBER_OF_FINALS_MATCHES = 1
DEFAULT_ROUND_DURATION_MINUTES = 90
FINALISTS_COUNT = 4

# Wheel system is used when active players > WHEEL_PLAYERS_PER_ROUND * (round - 1) + WHEEL_BASE_PLAYERS
WHEEL_PLAYERS_PER_ROUND = 12
WHEEL_BASE_PLAYERS = 4

# Pairing optimizer search bounds
DEFAULT_PAIRING_ITERATIONS = 10000
MIN_PAIRING_ITERATIONS = 200
# Shuffled player slots per generation call; iterations shrink as rosters grow
PAIRING_WORK_BUDGET = 400000

# Synthetic player identities
FILLER_ID_PREFIX = "filler:"
PADDING_FILLER_PREFIX = FILLER_ID_PREFIX + "pad-"
DROP_FILLER_PREFIX = FILLER_ID_PREFIX + "drop-"

# Tournament states
STATE_NOT_STARTED = "NotStarted"
STATE_IN_PROGRESS = "InProgress"
STATE_COMPLETED = "Completed"

# Round stages
STAGE_REGULAR = "regular"
STAGE_FINALS = "finals"

# Logging
LOG_DIR_ENV_VAR = "RIICHIPAIRING_LOG_DIR"
LOG_FILE_NAME = "riichi-pairing.log"
