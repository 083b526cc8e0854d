"""Pydantic models describing a person's rotation."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
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

ROUTE_DAYS = 2
DEFAULT_SHIFT_HOURS = 8.0
MICRO_CYCLE_OFFSETS = (1, 2, 3)


class PatternFamily(str, Enum):
    INDUSTRIAL_3X8 = "industrial_3x8"
    WEEKLY_ADMIN = "weekly_admin"


class AnchorMode(str, Enum):
    """What the anchor date marks inside the super-cycle.

    With ``start_leave`` the work block that precedes the anchor is treated as the cycle start:
    ``anchor_phase_offset`` names the micro-phase of that block's first day, and both the
    super-cycle and the micro-cycle count from ``anchor_date - effective_work_duration``.
    """

    START_WORK = "start_work"
    START_LEAVE = "start_leave"


class ShiftPhase(str, Enum):
    EVENING = "evening"
    DAY_NIGHT = "day_night"
    ROTATIONAL_REST = "rotational_rest"
    LEAVE = "leave"
    WORKDAY = "workday"
    WEEKEND = "weekend"


class LeaveOrigin(str, Enum):
    """Why a day resolved to :attr:`ShiftPhase.LEAVE`."""

    ROTATION = "rotation"
    OVERRIDE = "override"


WORK_PHASES = frozenset({ShiftPhase.EVENING, ShiftPhase.DAY_NIGHT, ShiftPhase.WORKDAY})
REST_PHASES = frozenset({ShiftPhase.ROTATIONAL_REST, ShiftPhase.WEEKEND})

_FAMILY_PHASES: dict[PatternFamily, tuple[ShiftPhase, ...]] = {
    PatternFamily.INDUSTRIAL_3X8: (
        ShiftPhase.EVENING,
        ShiftPhase.DAY_NIGHT,
        ShiftPhase.ROTATIONAL_REST,
        ShiftPhase.LEAVE,
    ),
    PatternFamily.WEEKLY_ADMIN: (
        ShiftPhase.WORKDAY,
        ShiftPhase.WEEKEND,
        ShiftPhase.LEAVE,
    ),
}


def phases_for(family: PatternFamily) -> tuple[ShiftPhase, ...]:
    """Return the closed set of phases a pattern family can resolve to."""
    return _FAMILY_PHASES[family]


def is_work_phase(phase: ShiftPhase) -> bool:
    return phase in WORK_PHASES


def is_rest_phase(phase: ShiftPhase) -> bool:
    return phase in REST_PHASES


class LeaveBlock(BaseModel):
    """Manually declared annual-leave range that overrides the rotation.

    Attributes
    ----------
    id:
        Identifier assigned by the settings store (unique within a config).
    start_date / end_date:
        Inclusive calendar-day bounds of the leave.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    start_date: date
    end_date: date

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("LeaveBlock.id must not be blank")
        return stripped

    @field_validator("end_date")
    @classmethod
    def _end_not_before_start(cls, value: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and value < start:
            raise ValueError("LeaveBlock.end_date must be >= start_date")
        return value

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def num_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def days_in_year(self, year: int) -> int:
        """Inclusive day count of the block clipped to ``year``."""
        start = max(self.start_date, date(year, 1, 1))
        end = min(self.end_date, date(year, 12, 31))
        if end < start:
            return 0
        return (end - start).days + 1


class RotationConfig(BaseModel):
    """Immutable description of one person's rotation.

    Attributes
    ----------
    anchor_date:
        Reference date whose phase is explicitly known; all cycle arithmetic is relative to it.
    pattern_family:
        ``industrial_3x8`` (evening / day-night / rest micro-cycle) or ``weekly_admin``.
    anchor_phase_offset:
        Which micro-phase (1 evening, 2 day-night, 3 rest) the anchor date represents. Only
        checked for ``industrial_3x8``.
    anchor_mode:
        ``start_work`` when the anchor is the first day of a work block, ``start_leave`` when it
        is the first day of a leave block.
    work_duration / vacation_duration:
        Base lengths (days) of the work and leave blocks of the super-cycle.
    route_days_added:
        Adds :data:`ROUTE_DAYS` travel days to every leave block.
    work_duration_extension:
        Temporary lengthening of the work block. Applied to the whole super-cycle computation,
        never re-anchored.
    annual_leave_blocks:
        Override leave ranges; may overlap.
    annual_leave_total:
        Size of the yearly leave pool. Only used for statistics.
    hours_per_phase:
        Nominal hours credited per work day of each work phase. Missing work phases default to
        :data:`DEFAULT_SHIFT_HOURS`. Given as a mapping, stored as ``(phase, hours)`` pairs.
    """

    model_config = ConfigDict(frozen=True)

    anchor_date: date
    pattern_family: PatternFamily = PatternFamily.INDUSTRIAL_3X8
    anchor_phase_offset: int = 1
    anchor_mode: AnchorMode = AnchorMode.START_WORK
    work_duration: int = 28
    vacation_duration: int = 7
    route_days_added: bool = False
    work_duration_extension: int = 0
    annual_leave_blocks: tuple[LeaveBlock, ...] = ()
    annual_leave_total: int = 30
    hours_per_phase: tuple[tuple[ShiftPhase, float], ...] = Field(
        default=(), validate_default=True
    )

    @field_validator("work_duration", "vacation_duration")
    @classmethod
    def _duration_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("work_duration and vacation_duration must be >= 1")
        return value

    @field_validator("work_duration_extension", "annual_leave_total")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("work_duration_extension and annual_leave_total must be non-negative")
        return value

    @field_validator("annual_leave_blocks")
    @classmethod
    def _unique_leave_ids(cls, value: tuple[LeaveBlock, ...]) -> tuple[LeaveBlock, ...]:
        seen: set[str] = set()
        for block in value:
            if block.id in seen:
                raise ValueError(f"Duplicate annual leave block id '{block.id}'")
            seen.add(block.id)
        return value

    @field_validator("hours_per_phase", mode="before")
    @classmethod
    def _hour_pairs(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    @field_validator("hours_per_phase")
    @classmethod
    def _complete_hour_table(
        cls, value: tuple[tuple[ShiftPhase, float], ...]
    ) -> tuple[tuple[ShiftPhase, float], ...]:
        table = {phase: DEFAULT_SHIFT_HOURS for phase in WORK_PHASES}
        for phase, hours in value:
            if phase not in WORK_PHASES:
                raise ValueError(f"hours_per_phase only accepts work phases (got '{phase.value}')")
            if hours < 0:
                raise ValueError("hours_per_phase values must be non-negative")
            table[phase] = float(hours)
        return tuple((phase, table[phase]) for phase in ShiftPhase if phase in table)

    @model_validator(mode="after")
    def _offset_in_micro_cycle(self) -> RotationConfig:
        if self.is_industrial and self.anchor_phase_offset not in MICRO_CYCLE_OFFSETS:
            raise ValueError("anchor_phase_offset must be 1, 2 or 3 for industrial_3x8")
        return self

    @property
    def is_industrial(self) -> bool:
        return self.pattern_family is PatternFamily.INDUSTRIAL_3X8

    @property
    def effective_work_duration(self) -> int:
        return self.work_duration + self.work_duration_extension

    @property
    def total_vacation(self) -> int:
        return self.vacation_duration + (ROUTE_DAYS if self.route_days_added else 0)

    @property
    def total_cycle(self) -> int:
        return self.effective_work_duration + self.total_vacation

    def phases(self) -> tuple[ShiftPhase, ...]:
        return phases_for(self.pattern_family)

    def hours_for(self, phase: ShiftPhase) -> float:
        """Nominal hours credited for one day of ``phase`` (0 for non-work phases)."""
        return dict(self.hours_per_phase).get(phase, 0.0)

    def leave_block_for(self, day: date) -> LeaveBlock | None:
        """Return the first override block covering ``day``, if any."""
        return next((block for block in self.annual_leave_blocks if block.contains(day)), None)

    def _revalidated(self, **updates: object) -> RotationConfig:
        payload = self.model_dump()
        payload.update(updates)
        return type(self).model_validate(payload)

    def with_extension(self, days: int) -> RotationConfig:
        """Return a copy with ``work_duration_extension`` replaced."""
        return self._revalidated(work_duration_extension=days)

    def recalibrated(
        self, anchor_date: date, anchor_phase_offset: int | None = None
    ) -> RotationConfig:
        """Return a copy anchored on ``anchor_date`` (optionally with a new micro-phase)."""
        updates: dict[str, object] = {"anchor_date": anchor_date}
        if anchor_phase_offset is not None:
            updates["anchor_phase_offset"] = anchor_phase_offset
        return self._revalidated(**updates)

    def with_leave_block(self, block: LeaveBlock) -> RotationConfig:
        """Return a copy with an extra override leave block."""
        blocks = [item.model_dump() for item in self.annual_leave_blocks]
        blocks.append(block.model_dump())
        return self._revalidated(annual_leave_blocks=blocks)
