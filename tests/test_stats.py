from __future__ import annotations

import json
from datetime import date, timedelta

import pytest

from shiftcycle.evaluation import (
    HISTORY_WINDOW_DAYS,
    STREAK_HORIZON_DAYS,
    compute_month_stats,
    compute_stats,
    compute_year_stats,
    consecutive_work_days,
    leave_pool,
    summarize_stats,
    work_block_progress,
)
from shiftcycle.rotation.models import LeaveBlock, LeaveOrigin, ShiftPhase
from tests.builders import ANCHOR, build_config

# lcm(35, 3) is also a whole number of weeks, so weekdays line up too.
FULL_PERIOD_DAYS = 105


def build_two_block_year():
    """One override block in March plus one rotational leave block in July 2024."""
    return build_config(
        anchor_date=date(2024, 1, 1),
        work_duration=200,
        vacation_duration=10,
        annual_leave_blocks=[
            {"id": "spring", "start_date": date(2024, 3, 1), "end_date": date(2024, 3, 5)}
        ],
    )


def test_month_distribution_and_progress(industrial_config):
    stats = compute_month_stats(date(2024, 1, 20), industrial_config)
    assert stats.month_start == date(2024, 1, 1)
    assert stats.month_end == date(2024, 1, 31)
    assert stats.distribution == {
        ShiftPhase.EVENING: 9,
        ShiftPhase.DAY_NIGHT: 8,
        ShiftPhase.ROTATIONAL_REST: 7,
        ShiftPhase.LEAVE: 7,
    }
    assert sum(stats.distribution.values()) == stats.days_in_month
    assert stats.work_days == 17
    assert stats.hours_worked == pytest.approx(136.0)
    assert stats.completed_work_days == 9
    assert stats.remaining_work_days == 8
    assert stats.completion_percent == 53
    assert stats.rest_days_remaining == 4
    assert stats.rotational_leave_days == 7
    assert stats.override_leave_days == 0


def test_month_hours_follow_hour_table():
    config = build_config(hours_per_phase={"evening": 7, "day_night": 12})
    stats = compute_month_stats(date(2024, 1, 20), config)
    assert stats.hours_worked == pytest.approx(9 * 7 + 8 * 12)


def test_admin_month_distribution(admin_config):
    stats = compute_month_stats(date(2024, 1, 15), admin_config)
    assert set(stats.distribution) == set(admin_config.phases())
    assert ShiftPhase.EVENING not in stats.distribution
    assert sum(stats.distribution.values()) == 31


def test_override_leave_counted_separately():
    config = build_config(
        annual_leave_blocks=[
            {"id": "trip", "start_date": date(2024, 1, 15), "end_date": date(2024, 1, 17)}
        ]
    )
    stats = compute_month_stats(date(2024, 1, 20), config)
    assert stats.override_leave_days == 3
    assert stats.rotational_leave_days == 7
    assert stats.distribution[ShiftPhase.LEAVE] == 10


def test_streak_boundaries(industrial_config):
    assert consecutive_work_days(date(2024, 2, 8), industrial_config).count == 0
    # The anchor evening follows the previous leave block directly.
    assert consecutive_work_days(date(2024, 1, 10), industrial_config).count == 1
    assert consecutive_work_days(date(2024, 1, 11), industrial_config).count == 2
    assert consecutive_work_days(date(2024, 1, 12), industrial_config).count == 0
    assert consecutive_work_days(date(2024, 1, 13), industrial_config).count == 1


def test_streak_after_override_leave():
    config = build_config(
        anchor_date=date(2024, 1, 1),
        annual_leave_blocks=[
            {"id": "x", "start_date": date(2024, 1, 8), "end_date": date(2024, 1, 9)}
        ],
    )
    # 2024-01-10 is day 9 after the anchor, an evening shift.
    assert consecutive_work_days(date(2024, 1, 10), config).count == 1


def test_streak_horizon_reported():
    config = build_config(work_duration=1000)
    result = consecutive_work_days(date(2024, 1, 11), config, horizon_days=2)
    assert result.count == 2 and result.exhausted
    assert not consecutive_work_days(date(2024, 1, 11), config).exhausted


def test_work_block_progress(industrial_config):
    progress = work_block_progress(date(2024, 1, 20), industrial_config)
    assert progress.block_start == date(2024, 1, 10)
    assert progress.days_worked_in_cycle == 11
    assert progress.total_work_block_days == 28
    assert progress.percent == pytest.approx(11 / 28 * 100)
    assert not progress.exhausted


def test_work_block_progress_on_leave(industrial_config):
    progress = work_block_progress(date(2024, 2, 8), industrial_config)
    assert progress.block_start is None
    assert progress.days_worked_in_cycle == progress.total_work_block_days == 28


def test_work_block_horizon_exhausted():
    config = build_config(work_duration=2000)
    progress = work_block_progress(date(2025, 6, 1), config)
    assert progress.exhausted
    assert progress.days_worked_in_cycle == STREAK_HORIZON_DAYS + 1


def test_history_window(industrial_config):
    history = compute_month_stats(date(2024, 1, 20), industrial_config).history
    assert len(history) == HISTORY_WINDOW_DAYS
    assert history[0].day == date(2023, 12, 22)
    assert history[-1].day == date(2024, 1, 20)
    assert history[-1].phase is ShiftPhase.DAY_NIGHT
    assert {record.leave_origin for record in history if record.phase is ShiftPhase.LEAVE} == {
        LeaveOrigin.ROTATION
    }


def test_vacation_indexing_two_blocks():
    config = build_two_block_year()
    inside_second = compute_year_stats(date(2024, 7, 20), config)
    assert inside_second.vacations_in_year == 2
    assert inside_second.block_starts == (date(2024, 3, 1), date(2024, 7, 19))
    assert inside_second.current_vacation_index == 2
    assert inside_second.days_until_next_vacation == 0
    assert inside_second.in_vacation
    assert inside_second.vacations_remaining == 0


@pytest.mark.parametrize(
    "reference, index, days_until",
    [
        (date(2024, 1, 15), 0, 46),
        (date(2024, 5, 1), 1, 79),
        (date(2024, 10, 1), 2, None),
    ],
)
def test_vacation_index_and_countdown(reference, index, days_until):
    stats = compute_year_stats(reference, build_two_block_year())
    assert stats.current_vacation_index == index
    assert stats.days_until_next_vacation == days_until


def test_block_running_on_new_year_counts_first(industrial_config):
    config = industrial_config.with_leave_block(
        LeaveBlock(id="nye", start_date=date(2024, 12, 28), end_date=date(2025, 1, 3))
    )
    stats = compute_year_stats(date(2025, 1, 1), config)
    assert stats.block_starts[0] == date(2025, 1, 1)
    assert stats.current_vacation_index == 1
    assert stats.days_until_next_vacation == 0


def test_leave_pool_clipped_per_year():
    config = build_config(
        annual_leave_total=30,
        annual_leave_blocks=[
            {"id": "nye", "start_date": date(2024, 12, 28), "end_date": date(2025, 1, 3)},
            {"id": "june", "start_date": date(2024, 6, 3), "end_date": date(2024, 6, 7)},
        ],
    )
    pool_2024 = leave_pool(2024, config)
    pool_2025 = leave_pool(2025, config)
    assert pool_2024.consumed == 4 + 5
    assert pool_2025.consumed == 3
    assert pool_2024.remaining == 21
    assert compute_year_stats(date(2025, 2, 1), config).leave_pool == pool_2025


def test_leave_pool_never_negative():
    config = build_config(
        annual_leave_total=2,
        annual_leave_blocks=[
            {"id": "long", "start_date": date(2024, 6, 1), "end_date": date(2024, 6, 10)}
        ],
    )
    pool = leave_pool(2024, config)
    assert pool.remaining == 0
    assert pool.percent_consumed == 100.0


def test_summary_is_json_ready(industrial_config):
    summary = summarize_stats(compute_stats(date(2024, 1, 20), industrial_config))
    encoded = json.loads(json.dumps(summary))
    assert encoded["reference_date"] == "2024-01-20"
    assert encoded["month"]["distribution"]["evening"] == 9
    assert encoded["month"]["work_days"] == 17
    assert encoded["year"]["year"] == 2024


def test_year_long_before_anchor(industrial_config):
    stats = compute_year_stats(date(2010, 5, 17), industrial_config)
    assert stats.vacations_in_year == 11
    assert stats.block_starts[0] == date(2010, 1, 6)
    assert stats.current_vacation_index == 4
    assert stats.days_until_next_vacation == 9
    assert not stats.in_vacation
    assert stats.leave_pool.consumed == 0
    assert stats.leave_pool.remaining == industrial_config.annual_leave_total


@pytest.mark.parametrize(
    "reference, anchor_shift",
    [
        (date(2010, 5, 17), -60 * FULL_PERIOD_DAYS),
        (date(2090, 2, 11), 300 * FULL_PERIOD_DAYS),
    ],
)
def test_stats_independent_of_anchor_side(industrial_config, reference, anchor_shift):
    moved = industrial_config.recalibrated(ANCHOR + timedelta(days=anchor_shift))
    # The reference sits on the other side of the moved anchor.
    assert (reference < ANCHOR) != (reference < moved.anchor_date)
    month = compute_month_stats(reference, industrial_config)
    assert sum(month.distribution.values()) == month.days_in_month
    assert month == compute_month_stats(reference, moved)
    assert compute_year_stats(reference, industrial_config) == compute_year_stats(reference, moved)


def test_leave_pool_empty_without_overrides():
    config = build_config()
    pool = leave_pool(2024, config)
    assert pool.consumed == 0
    assert pool.remaining == config.annual_leave_total
    assert pool.percent_consumed == 0.0
