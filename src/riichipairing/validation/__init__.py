from riichipairing.validation.round_checker import (
    CheckResult,
    CheckStatus,
    RoundChecker,
    RoundReport,
    Severity,
    check_round,
    rematches_inevitable,
)

__all__ = [
    "CheckResult",
    "CheckStatus",
    "RoundChecker",
    "RoundReport",
    "Severity",
    "check_round",
    "rematches_inevitable",
]
