"""Live shift status for a wall-clock instant."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum

from shiftcycle.resolver.phase import DayPhase, resolve_day, resolve_phase
from shiftcycle.rotation.models import RotationConfig, ShiftPhase
from shiftcycle.scheduling.windows import (
    EVENING_WINDOW,
    FULL_DAY_WINDOW,
    MORNING_WINDOW,
    NIGHT_END,
    NIGHT_WINDOW,
    OFFICE_WINDOW,
    REST_WINDOW,
    ShiftWindowKind,
    first_work_window,
)

__all__ = [
    "RETURN_TO_WORK_HORIZON_DAYS",
    "ReturnToWork",
    "StatusSnapshot",
    "WindowState",
    "find_return_to_work",
    "resolve_status",
]

RETURN_TO_WORK_HORIZON_DAYS = 60


class WindowState(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True, slots=True)
class ReturnToWork:
    """Outcome of the forward scan for the first non-leave day.

    ``resolved`` is ``False`` when the horizon ran out; ``day``/``phase`` are then ``None``.
    """

    resolved: bool
    day: date | None
    phase: ShiftPhase | None
    days_scanned: int


@dataclass(frozen=True, slots=True)
class StatusSnapshot:
    """Immediate-use view of a rotation at one instant (never persisted)."""

    now: datetime
    today: date
    today_phase: ShiftPhase
    active_phase: ShiftPhase
    active_window: ShiftWindowKind
    window_start: datetime
    window_end: datetime
    window_state: WindowState
    percent_complete: float
    hours_remaining: float
    tomorrow_phase: ShiftPhase
    day: DayPhase
    total_vacation_days: int
    super_cycle_progress: float
    return_to_work: ReturnToWork | None = None

    @property
    def on_leave(self) -> bool:
        return self.today_phase is ShiftPhase.LEAVE

    @property
    def night_carry_over(self) -> bool:
        """True when the active window is yesterday's night shift."""
        return self.window_start.date() < self.today


def find_return_to_work(
    today: date,
    config: RotationConfig,
    horizon_days: int = RETURN_TO_WORK_HORIZON_DAYS,
) -> ReturnToWork:
    """Scan forward from the day after ``today`` for the first non-leave day."""
    for offset in range(1, horizon_days + 1):
        candidate = today + timedelta(days=offset)
        phase = resolve_phase(candidate, config)
        if phase is not ShiftPhase.LEAVE:
            return ReturnToWork(resolved=True, day=candidate, phase=phase, days_scanned=offset)
    return ReturnToWork(resolved=False, day=None, phase=None, days_scanned=horizon_days)


def _rotation_boundary(tomorrow: date, tomorrow_phase: ShiftPhase, tz: tzinfo | None) -> datetime:
    window = first_work_window(tomorrow_phase)
    if window is None:
        return datetime.combine(tomorrow, time(0, 0), tzinfo=tz)
    start, _ = window.bounds(tomorrow, tz)
    return start


def _active_window(
    now: datetime,
    day: DayPhase,
    tomorrow_phase: ShiftPhase,
    config: RotationConfig,
) -> tuple[ShiftPhase, ShiftWindowKind, datetime, datetime]:
    today = day.day
    tz = now.tzinfo
    clock = now.time()

    # A day-night phase's night window runs past midnight into the following day.
    if day.phase is not ShiftPhase.LEAVE and clock < NIGHT_END:
        yesterday = today - timedelta(days=1)
        if resolve_phase(yesterday, config) is ShiftPhase.DAY_NIGHT:
            start, end = NIGHT_WINDOW.bounds(yesterday, tz)
            return ShiftPhase.DAY_NIGHT, NIGHT_WINDOW.kind, start, end

    phase = day.phase
    if phase in (ShiftPhase.LEAVE, ShiftPhase.WEEKEND):
        window = FULL_DAY_WINDOW
    elif phase is ShiftPhase.EVENING:
        window = EVENING_WINDOW
    elif phase is ShiftPhase.WORKDAY:
        window = OFFICE_WINDOW
    elif phase is ShiftPhase.DAY_NIGHT:
        window = MORNING_WINDOW if clock < MORNING_WINDOW.end else NIGHT_WINDOW
    else:
        start = datetime.combine(today, REST_WINDOW.start, tzinfo=tz)
        end = _rotation_boundary(today + timedelta(days=1), tomorrow_phase, tz)
        return phase, REST_WINDOW.kind, start, end

    start, end = window.bounds(today, tz)
    return phase, window.kind, start, end


def _progress(now: datetime, start: datetime, end: datetime) -> tuple[WindowState, float, float]:
    if now < start:
        return WindowState.UPCOMING, 0.0, (start - now).total_seconds() / 3600.0
    if now >= end:
        return WindowState.ENDED, 100.0, 0.0
    span = (end - start).total_seconds()
    elapsed = (now - start).total_seconds()
    return WindowState.ACTIVE, elapsed / span * 100.0, (end - now).total_seconds() / 3600.0


def resolve_status(now: datetime, config: RotationConfig) -> StatusSnapshot:
    """Combine today's phase with the wall clock.

    Parameters
    ----------
    now:
        Wall-clock instant (naive local time or timezone-aware); windows use its tzinfo.
    config:
        Validated rotation.

    Returns
    -------
    StatusSnapshot
        Active window with progress, tomorrow's phase and, when today is leave, the
        return-to-work lookahead (bounded by :data:`RETURN_TO_WORK_HORIZON_DAYS`).
    """
    today = now.date()
    day = resolve_day(today, config)
    tomorrow_phase = resolve_phase(today + timedelta(days=1), config)
    active_phase, kind, start, end = _active_window(now, day, tomorrow_phase, config)
    state, percent, hours = _progress(now, start, end)

    return_to_work = None
    if day.phase is ShiftPhase.LEAVE:
        return_to_work = find_return_to_work(today, config)

    return StatusSnapshot(
        now=now,
        today=today,
        today_phase=day.phase,
        active_phase=active_phase,
        active_window=kind,
        window_start=start,
        window_end=end,
        window_state=state,
        percent_complete=percent,
        hours_remaining=hours,
        tomorrow_phase=tomorrow_phase,
        day=day,
        total_vacation_days=config.total_vacation,
        super_cycle_progress=day.cycle_position / config.total_cycle,
        return_to_work=return_to_work,
    )
