"""Rotation configuration models and loaders."""

from .models import (
    DEFAULT_SHIFT_HOURS,
    MICRO_CYCLE_OFFSETS,
    REST_PHASES,
    ROUTE_DAYS,
    WORK_PHASES,
    AnchorMode,
    LeaveBlock,
    LeaveOrigin,
    PatternFamily,
    RotationConfig,
    ShiftPhase,
    is_rest_phase,
    is_work_phase,
    phases_for,
)

__all__ = [
    "AnchorMode",
    "DEFAULT_SHIFT_HOURS",
    "LeaveBlock",
    "LeaveOrigin",
    "MICRO_CYCLE_OFFSETS",
    "PatternFamily",
    "REST_PHASES",
    "ROUTE_DAYS",
    "RotationConfig",
    "ShiftPhase",
    "WORK_PHASES",
    "is_rest_phase",
    "is_work_phase",
    "phases_for",
]
