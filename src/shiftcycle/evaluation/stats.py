"""Monthly and yearly rotation statistics.

Every figure is reduced from :func:`~shiftcycle.resolver.phase.resolve_day` over a date range:
the reference month (distribution, hours, progress), a rolling 30-day history, bounded backward
walks (work streak, current work block) and the reference calendar year (vacation indexing and
leave-pool consumption).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from shiftcycle.core import iter_days, month_bounds, year_bounds
from shiftcycle.resolver.phase import DayPhase, resolve_phase, resolve_range
from shiftcycle.rotation.models import (
    LeaveOrigin,
    RotationConfig,
    ShiftPhase,
    is_rest_phase,
    is_work_phase,
)

__all__ = [
    "HISTORY_WINDOW_DAYS",
    "STREAK_HORIZON_DAYS",
    "DayRecord",
    "LeavePool",
    "MonthStats",
    "ScanResult",
    "StatsSnapshot",
    "VacationStats",
    "WorkBlockProgress",
    "compute_month_stats",
    "compute_stats",
    "compute_year_stats",
    "consecutive_work_days",
    "history_window",
    "leave_pool",
    "summarize_stats",
    "work_block_progress",
]

STREAK_HORIZON_DAYS = 365
HISTORY_WINDOW_DAYS = 30


@dataclass(frozen=True, slots=True)
class DayRecord:
    """Single (date, phase) pair for history lists."""

    day: date
    phase: ShiftPhase
    leave_origin: LeaveOrigin | None = None

    @classmethod
    def from_day_phase(cls, resolved: DayPhase) -> DayRecord:
        return cls(day=resolved.day, phase=resolved.phase, leave_origin=resolved.leave_origin)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Count produced by a bounded backward walk.

    ``exhausted`` is ``True`` when the walk stopped because it hit its horizon rather than a
    terminating day.
    """

    count: int
    exhausted: bool = False


@dataclass(frozen=True, slots=True)
class WorkBlockProgress:
    """Position inside the current contiguous (non-leave) work block."""

    days_worked_in_cycle: int
    total_work_block_days: int
    block_start: date | None
    exhausted: bool = False

    @property
    def percent(self) -> float:
        if self.total_work_block_days <= 0:
            return 0.0
        return min(100.0, self.days_worked_in_cycle / self.total_work_block_days * 100.0)


@dataclass(frozen=True, slots=True)
class LeavePool:
    total: int
    consumed: int

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.consumed)

    @property
    def percent_consumed(self) -> float:
        if self.total <= 0:
            return 0.0
        return min(100.0, self.consumed / self.total * 100.0)


@dataclass(frozen=True, slots=True)
class MonthStats:
    """Statistics for the calendar month containing ``reference_date``."""

    reference_date: date
    month_start: date
    month_end: date
    distribution: dict[ShiftPhase, int]
    work_days: int
    hours_worked: float
    completed_work_days: int
    remaining_work_days: int
    rest_days_remaining: int
    completion_percent: int
    rotational_leave_days: int
    override_leave_days: int
    streak: ScanResult
    work_block: WorkBlockProgress
    history: tuple[DayRecord, ...] = field(default_factory=tuple)

    @property
    def days_in_month(self) -> int:
        return (self.month_end - self.month_start).days + 1


@dataclass(frozen=True, slots=True)
class VacationStats:
    """Leave-block indexing for the calendar year containing the reference date."""

    year: int
    reference_date: date
    vacations_in_year: int
    current_vacation_index: int
    days_until_next_vacation: int | None
    in_vacation: bool
    block_starts: tuple[date, ...]
    leave_pool: LeavePool

    @property
    def vacations_remaining(self) -> int:
        return max(0, self.vacations_in_year - self.current_vacation_index)


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    month: MonthStats
    year: VacationStats


def consecutive_work_days(
    reference_date: date,
    config: RotationConfig,
    horizon_days: int = STREAK_HORIZON_DAYS,
) -> ScanResult:
    """Count work days walking back from ``reference_date`` (inclusive)."""
    count = 0
    day = reference_date
    while count < horizon_days:
        if not is_work_phase(resolve_phase(day, config)):
            return ScanResult(count=count)
        count += 1
        day -= timedelta(days=1)
    return ScanResult(count=count, exhausted=True)


def work_block_progress(
    reference_date: date,
    config: RotationConfig,
    horizon_days: int = STREAK_HORIZON_DAYS,
) -> WorkBlockProgress:
    """Locate the start of the contiguous non-leave block that contains ``reference_date``.

    A leave reference date has no partial block to measure and reports the full effective work
    duration instead.
    """
    total = config.effective_work_duration
    if resolve_phase(reference_date, config) is ShiftPhase.LEAVE:
        return WorkBlockProgress(
            days_worked_in_cycle=total, total_work_block_days=total, block_start=None
        )
    block_start = reference_date
    exhausted = True
    for _ in range(horizon_days):
        previous = block_start - timedelta(days=1)
        if resolve_phase(previous, config) is ShiftPhase.LEAVE:
            exhausted = False
            break
        block_start = previous
    return WorkBlockProgress(
        days_worked_in_cycle=(reference_date - block_start).days + 1,
        total_work_block_days=total,
        block_start=block_start,
        exhausted=exhausted,
    )


def history_window(
    reference_date: date,
    config: RotationConfig,
    days: int = HISTORY_WINDOW_DAYS,
) -> tuple[DayRecord, ...]:
    """Resolve the ``days``-long rolling window ending at ``reference_date`` (oldest first)."""
    if days <= 0:
        return ()
    start = reference_date - timedelta(days=days - 1)
    resolved = resolve_range(start, reference_date, config)
    return tuple(DayRecord.from_day_phase(item) for item in resolved)


def leave_pool(year: int, config: RotationConfig) -> LeavePool:
    """Sum the override leave days falling inside ``year`` (blocks are clipped to the year)."""
    consumed = sum(block.days_in_year(year) for block in config.annual_leave_blocks)
    return LeavePool(total=config.annual_leave_total, consumed=consumed)


def compute_month_stats(reference_date: date, config: RotationConfig) -> MonthStats:
    """Aggregate the calendar month containing ``reference_date``.

    Parameters
    ----------
    reference_date:
        "Today" for the purpose of completed/remaining splits, streaks and history.
    config:
        Validated rotation.

    Notes
    -----
    Worked hours come from ``config.hours_per_phase`` (a flat 8h per work day unless
    overridden) rather than the sub-window durations.
    """
    month_start, month_end = month_bounds(reference_date)
    distribution = {phase: 0 for phase in config.phases()}
    work_days = 0
    completed = 0
    rest_remaining = 0
    hours = 0.0
    rotational_leave = 0
    override_leave = 0

    for resolved in resolve_range(month_start, month_end, config):
        phase = resolved.phase
        distribution[phase] += 1
        if is_work_phase(phase):
            work_days += 1
            hours += config.hours_for(phase)
            if resolved.day < reference_date:
                completed += 1
        elif is_rest_phase(phase):
            if resolved.day >= reference_date:
                rest_remaining += 1
        elif resolved.is_override:
            override_leave += 1
        else:
            rotational_leave += 1

    completion = round(completed / work_days * 100) if work_days else 0
    return MonthStats(
        reference_date=reference_date,
        month_start=month_start,
        month_end=month_end,
        distribution=distribution,
        work_days=work_days,
        hours_worked=hours,
        completed_work_days=completed,
        remaining_work_days=work_days - completed,
        rest_days_remaining=rest_remaining,
        completion_percent=completion,
        rotational_leave_days=rotational_leave,
        override_leave_days=override_leave,
        streak=consecutive_work_days(reference_date, config),
        work_block=work_block_progress(reference_date, config),
        history=history_window(reference_date, config),
    )


def compute_year_stats(reference_date: date, config: RotationConfig) -> VacationStats:
    """Index the leave blocks of the calendar year containing ``reference_date``.

    One block is counted per contiguous run of leave days (rotational or override alike); a
    run already in progress on 1 January counts as the year's first block.
    """
    year = reference_date.year
    year_start, year_end = year_bounds(year)
    block_starts: list[date] = []
    current_index = 0
    in_block = False

    for day in iter_days(year_start, year_end):
        if resolve_phase(day, config) is ShiftPhase.LEAVE:
            if not in_block:
                block_starts.append(day)
                in_block = True
                if day <= reference_date:
                    current_index = len(block_starts)
        else:
            in_block = False

    in_vacation = resolve_phase(reference_date, config) is ShiftPhase.LEAVE
    if in_vacation:
        days_until_next: int | None = 0
    else:
        upcoming = next((start for start in block_starts if start > reference_date), None)
        days_until_next = (upcoming - reference_date).days if upcoming is not None else None

    return VacationStats(
        year=year,
        reference_date=reference_date,
        vacations_in_year=len(block_starts),
        current_vacation_index=current_index,
        days_until_next_vacation=days_until_next,
        in_vacation=in_vacation,
        block_starts=tuple(block_starts),
        leave_pool=leave_pool(year, config),
    )


def compute_stats(reference_date: date, config: RotationConfig) -> StatsSnapshot:
    """Month and year statistics for ``reference_date`` in one value."""
    return StatsSnapshot(
        month=compute_month_stats(reference_date, config),
        year=compute_year_stats(reference_date, config),
    )


def summarize_stats(snapshot: StatsSnapshot) -> dict[str, object]:
    """Return a JSON-friendly summary of a :class:`StatsSnapshot`."""
    month = snapshot.month
    year = snapshot.year
    return {
        "reference_date": month.reference_date.isoformat(),
        "month": {
            "start": month.month_start.isoformat(),
            "end": month.month_end.isoformat(),
            "days": month.days_in_month,
            "distribution": {phase.value: count for phase, count in month.distribution.items()},
            "work_days": month.work_days,
            "hours_worked": month.hours_worked,
            "completed_work_days": month.completed_work_days,
            "remaining_work_days": month.remaining_work_days,
            "rest_days_remaining": month.rest_days_remaining,
            "completion_percent": month.completion_percent,
            "rotational_leave_days": month.rotational_leave_days,
            "override_leave_days": month.override_leave_days,
            "streak": month.streak.count,
            "streak_exhausted": month.streak.exhausted,
            "days_worked_in_cycle": month.work_block.days_worked_in_cycle,
            "total_work_block_days": month.work_block.total_work_block_days,
        },
        "year": {
            "year": year.year,
            "vacations_in_year": year.vacations_in_year,
            "current_vacation_index": year.current_vacation_index,
            "vacations_remaining": year.vacations_remaining,
            "days_until_next_vacation": year.days_until_next_vacation,
            "in_vacation": year.in_vacation,
            "block_starts": [start.isoformat() for start in year.block_starts],
            "annual_leave_total": year.leave_pool.total,
            "annual_leave_consumed": year.leave_pool.consumed,
            "annual_leave_remaining": year.leave_pool.remaining,
        },
    }
