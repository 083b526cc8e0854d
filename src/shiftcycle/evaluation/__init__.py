"""Statistics and tabular views reduced from resolved days."""

from .frames import (
    DAY_COLUMNS,
    HISTORY_COLUMNS,
    distribution_frame,
    history_frame,
    monthly_distribution,
    year_frame,
)
from .stats import (
    HISTORY_WINDOW_DAYS,
    STREAK_HORIZON_DAYS,
    DayRecord,
    LeavePool,
    MonthStats,
    ScanResult,
    StatsSnapshot,
    VacationStats,
    WorkBlockProgress,
    compute_month_stats,
    compute_stats,
    compute_year_stats,
    consecutive_work_days,
    history_window,
    leave_pool,
    summarize_stats,
    work_block_progress,
)

__all__ = [
    "DAY_COLUMNS",
    "DayRecord",
    "HISTORY_COLUMNS",
    "HISTORY_WINDOW_DAYS",
    "LeavePool",
    "MonthStats",
    "STREAK_HORIZON_DAYS",
    "ScanResult",
    "StatsSnapshot",
    "VacationStats",
    "WorkBlockProgress",
    "compute_month_stats",
    "compute_stats",
    "compute_year_stats",
    "consecutive_work_days",
    "distribution_frame",
    "history_frame",
    "history_window",
    "leave_pool",
    "monthly_distribution",
    "summarize_stats",
    "work_block_progress",
    "year_frame",
]
