from riichipairing.controllers.tournament.roster_manager import RosterManager
from riichipairing.controllers.tournament.round_manager import (
    RoundManager,
    select_finalists,
)
from riichipairing.controllers.tournament.uma_calculator import (
    UmaCalculator,
    calculate_deltas,
)

__all__ = [
    "RosterManager",
    "RoundManager",
    "UmaCalculator",
    "calculate_deltas",
    "select_finalists",
]
