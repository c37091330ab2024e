from riichipairing.pairing.optimizer import (
    OptimizerResult,
    PairingOptimizer,
    score_tables,
    split_into_tables,
)
from riichipairing.pairing.scheduler import (
    RoundScheduler,
    assign_seats,
    pad_player_ids,
    use_wheel,
    wheel_threshold,
)
from riichipairing.pairing.wheel import (
    WheelScheduler,
    reconstruct_wheel_lists,
    rotate_wheel_lists,
)

__all__ = [
    "PairingOptimizer",
    "OptimizerResult",
    "score_tables",
    "split_into_tables",
    "WheelScheduler",
    "reconstruct_wheel_lists",
    "rotate_wheel_lists",
    "RoundScheduler",
    "assign_seats",
    "pad_player_ids",
    "use_wheel",
    "wheel_threshold",
]
