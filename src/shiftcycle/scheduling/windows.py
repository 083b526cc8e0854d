"""Wall-clock windows attached to each shift phase."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum

from shiftcycle.rotation.models import ShiftPhase

__all__ = [
    "EVENING_WINDOW",
    "FULL_DAY_WINDOW",
    "MORNING_WINDOW",
    "NIGHT_WINDOW",
    "NIGHT_END",
    "OFFICE_WINDOW",
    "REST_WINDOW",
    "ShiftWindow",
    "ShiftWindowKind",
    "first_work_window",
    "windows_for",
]


class ShiftWindowKind(str, Enum):
    EVENING = "evening"
    MORNING = "morning"
    NIGHT = "night"
    REST = "rest"
    OFFICE = "office"
    FULL_DAY = "full_day"


@dataclass(frozen=True, slots=True)
class ShiftWindow:
    """A daily time window; ``end <= start`` means the window closes on the next day."""

    kind: ShiftWindowKind
    start: time
    end: time

    @property
    def crosses_midnight(self) -> bool:
        return self.end <= self.start

    def bounds(self, day: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
        """Return the concrete start/end instants of the window opened on ``day``."""
        start = datetime.combine(day, self.start, tzinfo=tz)
        end = datetime.combine(day, self.end, tzinfo=tz)
        if self.crosses_midnight:
            end += timedelta(days=1)
        return start, end

    def hours(self) -> float:
        start, end = self.bounds(date(2000, 1, 1))
        return (end - start).total_seconds() / 3600.0


EVENING_WINDOW = ShiftWindow(ShiftWindowKind.EVENING, time(13, 0), time(20, 0))
MORNING_WINDOW = ShiftWindow(ShiftWindowKind.MORNING, time(7, 0), time(13, 0))
NIGHT_WINDOW = ShiftWindow(ShiftWindowKind.NIGHT, time(20, 0), time(7, 0))
# Rest opens when the night shift hands over; its end depends on the next rotation boundary.
REST_WINDOW = ShiftWindow(ShiftWindowKind.REST, time(7, 0), time(7, 0))
OFFICE_WINDOW = ShiftWindow(ShiftWindowKind.OFFICE, time(8, 0), time(16, 30))
FULL_DAY_WINDOW = ShiftWindow(ShiftWindowKind.FULL_DAY, time(0, 0), time(0, 0))

NIGHT_END = NIGHT_WINDOW.end

_PHASE_WINDOWS: dict[ShiftPhase, tuple[ShiftWindow, ...]] = {
    ShiftPhase.EVENING: (EVENING_WINDOW,),
    ShiftPhase.DAY_NIGHT: (MORNING_WINDOW, NIGHT_WINDOW),
    ShiftPhase.ROTATIONAL_REST: (REST_WINDOW,),
    ShiftPhase.WORKDAY: (OFFICE_WINDOW,),
    ShiftPhase.WEEKEND: (FULL_DAY_WINDOW,),
    ShiftPhase.LEAVE: (FULL_DAY_WINDOW,),
}


def windows_for(phase: ShiftPhase) -> tuple[ShiftWindow, ...]:
    """Return the windows of a phase in chronological order."""
    return _PHASE_WINDOWS[phase]


def first_work_window(phase: ShiftPhase) -> ShiftWindow | None:
    """Return the first on-duty window of ``phase`` or ``None`` for rest/leave phases."""
    if phase in (ShiftPhase.ROTATIONAL_REST, ShiftPhase.WEEKEND, ShiftPhase.LEAVE):
        return None
    return _PHASE_WINDOWS[phase][0]
