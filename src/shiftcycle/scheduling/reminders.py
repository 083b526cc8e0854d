"""Reminder instants derived from shift windows.

Only the *when* lives here; scheduling and delivering the reminder belong to the caller.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from shiftcycle.core import ShiftCycleValueError
from shiftcycle.resolver.phase import resolve_phase
from shiftcycle.resolver.status import RETURN_TO_WORK_HORIZON_DAYS, StatusSnapshot
from shiftcycle.rotation.models import RotationConfig, is_work_phase
from shiftcycle.scheduling.windows import windows_for

__all__ = ["next_reminder", "next_window_start", "reminder_for_snapshot"]


def _lead(lead_minutes: int) -> timedelta:
    if lead_minutes < 0:
        raise ShiftCycleValueError(f"lead_minutes must be non-negative (got {lead_minutes})")
    return timedelta(minutes=lead_minutes)


def reminder_for_snapshot(snapshot: StatusSnapshot, lead_minutes: int) -> datetime | None:
    """Return when to remind about the snapshot's active window.

    ``None`` when the active phase is off duty or the reminder instant is already past.
    """
    lead = _lead(lead_minutes)
    if not is_work_phase(snapshot.active_phase):
        return None
    fire_at = snapshot.window_start - lead
    if fire_at <= snapshot.now:
        return None
    return fire_at


def next_window_start(
    now: datetime,
    config: RotationConfig,
    horizon_days: int = RETURN_TO_WORK_HORIZON_DAYS,
) -> datetime | None:
    """First on-duty window start strictly after ``now`` within ``horizon_days``."""
    for offset in range(horizon_days + 1):
        day = now.date() + timedelta(days=offset)
        phase = resolve_phase(day, config)
        if not is_work_phase(phase):
            continue
        for window in windows_for(phase):
            start, _ = window.bounds(day, now.tzinfo)
            if start > now:
                return start
    return None


def next_reminder(now: datetime, config: RotationConfig, lead_minutes: int) -> datetime | None:
    """Reminder instant for the next shift that still leaves room for the lead time."""
    lead = _lead(lead_minutes)
    probe = now + lead
    start = next_window_start(probe, config)
    if start is None:
        return None
    return start - lead
