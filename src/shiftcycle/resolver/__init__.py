"""Phase and live-status resolvers."""

from .phase import (
    INDUSTRIAL_MICRO_CYCLE,
    DayPhase,
    floor_mod,
    resolve_day,
    resolve_phase,
    resolve_range,
)
from .status import (
    RETURN_TO_WORK_HORIZON_DAYS,
    ReturnToWork,
    StatusSnapshot,
    WindowState,
    find_return_to_work,
    resolve_status,
)

__all__ = [
    "DayPhase",
    "INDUSTRIAL_MICRO_CYCLE",
    "RETURN_TO_WORK_HORIZON_DAYS",
    "ReturnToWork",
    "StatusSnapshot",
    "WindowState",
    "find_return_to_work",
    "floor_mod",
    "resolve_day",
    "resolve_phase",
    "resolve_range",
    "resolve_status",
]
