"""Type hints used in Riichi Pairing."""

from datetime import datetime
from typing import Callable, Dict, FrozenSet, List, Literal, Tuple

# Seat type alias (for type hints)
Seat = Literal["East", "South", "West", "North"]

# Resolved player identifier; populated objects never get past the adapters
PlayerId = str

# Four player IDs in slot order
Table = Tuple[PlayerId, PlayerId, PlayerId, PlayerId]
# All tables for one round, in table-number order
Tables = List[List[PlayerId]]

# Unordered pair of player IDs
PlayerPair = FrozenSet[PlayerId]

# player ID -> UMA delta
UmaDeltas = Dict[PlayerId, float]

# Zero-argument callable returning "now"
Clock = Callable[[], datetime]

#  LocalWords:  UmaDeltas
