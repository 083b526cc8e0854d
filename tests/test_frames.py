from __future__ import annotations

from datetime import date

from shiftcycle.evaluation import (
    DAY_COLUMNS,
    HISTORY_COLUMNS,
    compute_month_stats,
    distribution_frame,
    history_frame,
    monthly_distribution,
    year_frame,
)


def test_year_frame_rows_and_columns(industrial_config):
    frame = year_frame(2024, industrial_config)
    assert list(frame.columns) == DAY_COLUMNS
    assert len(frame) == 366
    assert frame["date"].iloc[0] == date(2024, 1, 1)
    assert frame["hours"].sum() == frame["is_work"].sum() * 8.0
    anchor_row = frame[frame["date"] == date(2024, 1, 10)].iloc[0]
    assert anchor_row["phase"] == "evening"
    assert anchor_row["cycle_position"] == 0


def test_monthly_distribution_matches_month_stats(industrial_config):
    counts = monthly_distribution(year_frame(2024, industrial_config), industrial_config)
    assert list(counts.columns) == ["month", "evening", "day_night", "rotational_rest", "leave"]
    assert len(counts) == 12
    january = counts[counts["month"] == 1].iloc[0]
    stats = compute_month_stats(date(2024, 1, 20), industrial_config)
    for phase, days in stats.distribution.items():
        assert january[phase.value] == days
    assert counts.drop(columns="month").to_numpy().sum() == 366


def test_monthly_distribution_zero_fills_admin(admin_config):
    counts = monthly_distribution(year_frame(2024, admin_config), admin_config)
    assert list(counts.columns) == ["month", "workday", "weekend", "leave"]


def test_history_frame(industrial_config):
    stats = compute_month_stats(date(2024, 1, 20), industrial_config)
    frame = history_frame(stats.history)
    assert list(frame.columns) == HISTORY_COLUMNS
    assert len(frame) == 30
    leave_rows = frame[frame["phase"] == "leave"]
    assert set(leave_rows["leave_origin"]) == {"rotation"}
    assert not leave_rows["is_work"].any()
    assert history_frame([]).empty


def test_distribution_frame(industrial_config):
    stats = compute_month_stats(date(2024, 1, 20), industrial_config)
    frame = distribution_frame(stats)
    assert list(frame["phase"]) == ["evening", "day_night", "rotational_rest", "leave"]
    assert frame["days"].sum() == 31
