"""DataFrame views over resolved days."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from shiftcycle.core import year_bounds
from shiftcycle.evaluation.stats import DayRecord, MonthStats
from shiftcycle.resolver.phase import DayPhase, resolve_range
from shiftcycle.rotation.models import RotationConfig, is_work_phase

__all__ = [
    "DAY_COLUMNS",
    "HISTORY_COLUMNS",
    "distribution_frame",
    "history_frame",
    "monthly_distribution",
    "year_frame",
]

HISTORY_COLUMNS = ["date", "phase", "leave_origin", "is_work"]

DAY_COLUMNS = [
    "date",
    "month",
    "phase",
    "leave_origin",
    "is_work",
    "cycle_position",
    "cycle_day",
    "leave_day_index",
    "is_leave_start",
    "is_leave_end",
    "is_extension_day",
    "hours",
]


def history_frame(records: Sequence[DayRecord]) -> pd.DataFrame:
    """Convert history records (e.g. ``MonthStats.history``) into a DataFrame."""
    if not records:
        return pd.DataFrame(columns=HISTORY_COLUMNS)
    rows = [
        {
            "date": record.day,
            "phase": record.phase.value,
            "leave_origin": record.leave_origin.value if record.leave_origin else None,
            "is_work": is_work_phase(record.phase),
        }
        for record in records
    ]
    return pd.DataFrame(rows).reindex(columns=HISTORY_COLUMNS)


def _day_row(resolved: DayPhase, config: RotationConfig) -> dict[str, object]:
    return {
        "date": resolved.day,
        "month": resolved.day.month,
        "phase": resolved.phase.value,
        "leave_origin": resolved.leave_origin.value if resolved.leave_origin else None,
        "is_work": resolved.is_work,
        "cycle_position": resolved.cycle_position,
        "cycle_day": resolved.cycle_day,
        "leave_day_index": resolved.leave_day_index,
        "is_leave_start": resolved.is_leave_start,
        "is_leave_end": resolved.is_leave_end,
        "is_extension_day": resolved.is_extension_day,
        "hours": config.hours_for(resolved.phase),
    }


def year_frame(year: int, config: RotationConfig) -> pd.DataFrame:
    """Return one row per day of ``year`` with the resolved phase and cycle coordinates.

    Parameters
    ----------
    year:
        Calendar year to resolve.
    config:
        Validated rotation.

    Returns
    -------
    pandas.DataFrame
        Columns follow :data:`DAY_COLUMNS`; ``hours`` is the nominal credit from
        ``config.hours_per_phase`` (0 for rest and leave days).
    """
    start, end = year_bounds(year)
    rows = [_day_row(resolved, config) for resolved in resolve_range(start, end, config)]
    return pd.DataFrame(rows).reindex(columns=DAY_COLUMNS)


def monthly_distribution(frame: pd.DataFrame, config: RotationConfig) -> pd.DataFrame:
    """Pivot a :func:`year_frame` into month x phase day counts (zero-filled)."""
    phases = [phase.value for phase in config.phases()]
    if frame.empty:
        return pd.DataFrame(columns=["month", *phases])
    counts = frame.groupby(["month", "phase"]).size().unstack(fill_value=0)
    counts = counts.reindex(columns=phases, fill_value=0)
    counts = counts.reset_index()
    counts.columns.name = None
    return counts


def distribution_frame(stats: MonthStats) -> pd.DataFrame:
    """Two-column (phase, days) view of a month's distribution."""
    rows = [{"phase": phase.value, "days": count} for phase, count in stats.distribution.items()]
    return pd.DataFrame(rows, columns=["phase", "days"])
