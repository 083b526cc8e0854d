"""Date to phase resolution.

Every other component builds on :func:`resolve_phase`: it is a pure, total function of the
date and a validated :class:`~shiftcycle.rotation.models.RotationConfig`. Resolution order:

1. annual-leave overrides (inclusive calendar days) win outright,
2. the super-cycle position decides between the work block and the leave block,
3. inside the work block the pattern family picks the phase (weekday for ``weekly_admin``,
   the 3-day micro-cycle for ``industrial_3x8``).

Dates before the anchor produce negative offsets; :func:`floor_mod` keeps every position in
``[0, n)`` so the pattern simply extends backwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from shiftcycle.core import ShiftCycleValueError, iter_days
from shiftcycle.rotation.models import (
    AnchorMode,
    LeaveOrigin,
    RotationConfig,
    ShiftPhase,
    is_work_phase,
)

__all__ = [
    "DayPhase",
    "INDUSTRIAL_MICRO_CYCLE",
    "floor_mod",
    "resolve_day",
    "resolve_phase",
    "resolve_range",
]

INDUSTRIAL_MICRO_CYCLE: tuple[ShiftPhase, ...] = (
    ShiftPhase.EVENING,
    ShiftPhase.DAY_NIGHT,
    ShiftPhase.ROTATIONAL_REST,
)

# date.weekday(): Friday == 4, Saturday == 5
_ADMIN_WEEKEND = frozenset({4, 5})


def floor_mod(value: int, modulus: int) -> int:
    """Modulo normalised into ``[0, modulus)`` for any sign of ``value``."""
    if modulus <= 0:
        raise ShiftCycleValueError(f"modulus must be positive (got {modulus})")
    return ((value % modulus) + modulus) % modulus


@dataclass(frozen=True, slots=True)
class DayPhase:
    """Resolved phase of one calendar day plus the cycle coordinates behind it.

    Attributes
    ----------
    day:
        The resolved date.
    phase:
        Phase value for the day.
    leave_origin:
        ``rotation`` or ``override`` when ``phase`` is leave, else ``None``.
    days_since_anchor:
        Signed day offset from the anchor date.
    cycle_position:
        Zero-based position inside the super-cycle (computed even for override days).
    leave_day_index:
        Zero-based day index inside a rotational leave block; ``None`` otherwise.
    is_leave_start / is_leave_end:
        First/last day of a rotational leave block (calendar markers).
    micro_position:
        0 evening, 1 day-night, 2 rest; only set for industrial work-block days.
    cycle_day:
        1..3 micro-cycle day for industrial rotations, 1 (Sunday) .. 7 (Saturday) for admin.
    is_extension_day:
        Work-block day that only exists because of ``work_duration_extension``.
    """

    day: date
    phase: ShiftPhase
    leave_origin: LeaveOrigin | None
    days_since_anchor: int
    cycle_position: int
    leave_day_index: int | None = None
    is_leave_start: bool = False
    is_leave_end: bool = False
    micro_position: int | None = None
    cycle_day: int = 1
    is_extension_day: bool = False

    @property
    def is_work(self) -> bool:
        return is_work_phase(self.phase)

    @property
    def is_leave(self) -> bool:
        return self.phase is ShiftPhase.LEAVE

    @property
    def is_override(self) -> bool:
        return self.leave_origin is LeaveOrigin.OVERRIDE


def _cycle_offset(days_since_anchor: int, config: RotationConfig) -> int:
    """Days since the first day of the work block the anchor belongs to or follows."""
    if config.anchor_mode is AnchorMode.START_LEAVE:
        return days_since_anchor + config.effective_work_duration
    return days_since_anchor


def _micro_position(cycle_offset: int, config: RotationConfig) -> int:
    return floor_mod(cycle_offset + (config.anchor_phase_offset - 1), 3)


def _cycle_day(day: date, cycle_offset: int, config: RotationConfig) -> int:
    if config.is_industrial:
        return _micro_position(cycle_offset, config) + 1
    return (day.weekday() + 1) % 7 + 1


def resolve_day(day: date, config: RotationConfig) -> DayPhase:
    """Resolve ``day`` to a :class:`DayPhase` with its cycle coordinates."""
    days_since_anchor = (day - config.anchor_date).days
    cycle_offset = _cycle_offset(days_since_anchor, config)
    position = floor_mod(cycle_offset, config.total_cycle)
    cycle_day = _cycle_day(day, cycle_offset, config)

    if config.leave_block_for(day) is not None:
        return DayPhase(
            day=day,
            phase=ShiftPhase.LEAVE,
            leave_origin=LeaveOrigin.OVERRIDE,
            days_since_anchor=days_since_anchor,
            cycle_position=position,
            cycle_day=cycle_day,
        )

    work_days = config.effective_work_duration
    if position >= work_days:
        index = position - work_days
        return DayPhase(
            day=day,
            phase=ShiftPhase.LEAVE,
            leave_origin=LeaveOrigin.ROTATION,
            days_since_anchor=days_since_anchor,
            cycle_position=position,
            leave_day_index=index,
            is_leave_start=index == 0,
            is_leave_end=index == config.total_vacation - 1,
            cycle_day=cycle_day,
        )

    micro: int | None = None
    if config.is_industrial:
        micro = _micro_position(cycle_offset, config)
        phase = INDUSTRIAL_MICRO_CYCLE[micro]
    elif day.weekday() in _ADMIN_WEEKEND:
        phase = ShiftPhase.WEEKEND
    else:
        phase = ShiftPhase.WORKDAY

    return DayPhase(
        day=day,
        phase=phase,
        leave_origin=None,
        days_since_anchor=days_since_anchor,
        cycle_position=position,
        micro_position=micro,
        cycle_day=cycle_day,
        is_extension_day=position >= config.work_duration,
    )


def resolve_phase(day: date, config: RotationConfig) -> ShiftPhase:
    """Return the phase ``day`` falls in under ``config``.

    Never raises for a validated config; any date, however far from the anchor, resolves.
    """
    if config.leave_block_for(day) is not None:
        return ShiftPhase.LEAVE
    return resolve_day(day, config).phase


def resolve_range(start: date, end: date, config: RotationConfig) -> list[DayPhase]:
    """Resolve every day from ``start`` to ``end`` inclusive (empty when ``end < start``)."""
    return [resolve_day(day, config) for day in iter_days(start, end)]
