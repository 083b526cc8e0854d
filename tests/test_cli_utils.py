from __future__ import annotations

from datetime import date, datetime

import pytest

from shiftcycle.cli._utils import (
    PHASE_CODES,
    format_hours,
    parse_date,
    parse_instant,
    parse_leave_blocks,
    parse_month,
)
from shiftcycle.core import ShiftCycleValueError
from shiftcycle.rotation.models import ShiftPhase


def test_parse_leave_blocks_success():
    blocks = parse_leave_blocks(["trip=2024-03-01:2024-03-05", " x =2024-04-01:2024-04-01"])
    assert [block.id for block in blocks] == ["trip", "x"]
    assert blocks[0].num_days == 5


def test_parse_leave_blocks_empty():
    assert parse_leave_blocks(None) == []
    assert parse_leave_blocks([]) == []


@pytest.mark.parametrize(
    "value",
    [
        "trip",
        "=2024-03-01:2024-03-05",
        "trip=2024-03-01",
        "trip=2024-03-01:",
        "trip=2024-03-05:2024-03-01",
        "trip=2024-13-01:2024-13-02",
    ],
)
def test_parse_leave_blocks_invalid(value):
    with pytest.raises(ShiftCycleValueError):
        parse_leave_blocks([value])


def test_parse_date_and_default():
    assert parse_date("2024-01-20") == date(2024, 1, 20)
    assert parse_date("", default=date(2024, 5, 1)) == date(2024, 5, 1)
    with pytest.raises(ShiftCycleValueError):
        parse_date("20/01/2024")


def test_parse_instant():
    assert parse_instant("2024-01-10T15:30") == datetime(2024, 1, 10, 15, 30)
    with pytest.raises(ShiftCycleValueError):
        parse_instant("tomorrow")


def test_parse_month():
    assert parse_month("2024-02") == date(2024, 2, 1)
    for bad in ("2024", "2024-13", "feb"):
        with pytest.raises(ShiftCycleValueError):
            parse_month(bad)


def test_format_hours():
    assert format_hours(27.0) == "27h 00m"
    assert format_hours(2.5) == "2h 30m"
    assert format_hours(0.0) == "0h 00m"


def test_every_phase_has_a_code():
    assert set(PHASE_CODES) == {phase.value for phase in ShiftPhase}
