"""Rotation phase resolution and shift statistics.

The package answers one question for any calendar date: which phase of a repeating
work/rest/leave rotation is a person in? Everything else (live status, monthly and yearly
statistics) is reduced from that answer.
"""

from shiftcycle.core import ShiftCycleValueError
from shiftcycle.evaluation import compute_month_stats, compute_stats, compute_year_stats
from shiftcycle.resolver import resolve_day, resolve_phase, resolve_status
from shiftcycle.rotation import (
    AnchorMode,
    LeaveBlock,
    LeaveOrigin,
    PatternFamily,
    RotationConfig,
    ShiftPhase,
)

__version__ = "0.1.0"

__all__ = [
    "AnchorMode",
    "LeaveBlock",
    "LeaveOrigin",
    "PatternFamily",
    "RotationConfig",
    "ShiftCycleValueError",
    "ShiftPhase",
    "compute_month_stats",
    "compute_stats",
    "compute_year_stats",
    "resolve_day",
    "resolve_phase",
    "resolve_status",
]
