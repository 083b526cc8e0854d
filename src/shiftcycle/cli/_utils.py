"""CLI helper utilities for shiftcycle."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from pydantic import ValidationError

from shiftcycle.core import ShiftCycleValueError
from shiftcycle.rotation.models import LeaveBlock

PHASE_CODES: dict[str, str] = {
    "evening": "EV",
    "day_night": "DN",
    "rotational_rest": "RR",
    "leave": "LV",
    "workday": "WD",
    "weekend": "WE",
}

PHASE_STYLES: dict[str, str] = {
    "evening": "dark_orange",
    "day_night": "yellow",
    "rotational_rest": "green",
    "leave": "grey62",
    "workday": "cyan",
    "weekend": "green",
}


def parse_date(value: str | None, *, default: date | None = None) -> date:
    """Parse an ISO ``YYYY-MM-DD`` date, falling back to ``default`` (today) when empty."""
    if value is None or not value.strip():
        return default or date.today()
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ShiftCycleValueError(f"Expected a YYYY-MM-DD date (got '{value}')") from exc


def parse_instant(value: str | None) -> datetime:
    """Parse an ISO ``YYYY-MM-DDTHH:MM`` instant; empty means the current local time."""
    if value is None or not value.strip():
        return datetime.now()
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise ShiftCycleValueError(f"Expected an ISO date-time (got '{value}')") from exc


def parse_month(value: str | None) -> date:
    """Parse ``YYYY-MM`` into the first day of that month (current month when empty)."""
    if value is None or not value.strip():
        return date.today().replace(day=1)
    try:
        year_text, month_text = value.strip().split("-", 1)
        return date(int(year_text), int(month_text), 1)
    except ValueError as exc:
        raise ShiftCycleValueError(f"Expected a YYYY-MM month (got '{value}')") from exc


def parse_leave_blocks(leave_args: Sequence[str] | None) -> list[LeaveBlock]:
    """Parse ``id=START:END`` leave overrides into :class:`LeaveBlock` entries."""
    blocks: list[LeaveBlock] = []
    if not leave_args:
        return blocks
    for arg in leave_args:
        if "=" not in arg:
            raise ShiftCycleValueError(f"Leave block must be in id=START:END format (got '{arg}')")
        block_id, span = arg.split("=", 1)
        block_id = block_id.strip()
        if not block_id:
            raise ShiftCycleValueError(f"Leave block missing id in '{arg}'")
        if ":" not in span:
            raise ShiftCycleValueError(f"Leave block '{block_id}' must give START:END (got '{span}')")
        start_text, end_text = span.split(":", 1)
        if not start_text.strip() or not end_text.strip():
            raise ShiftCycleValueError(f"Leave block '{block_id}' needs both START and END dates")
        try:
            blocks.append(
                LeaveBlock(
                    id=block_id,
                    start_date=parse_date(start_text),
                    end_date=parse_date(end_text),
                )
            )
        except ValidationError as exc:
            raise ShiftCycleValueError(f"Invalid leave block '{arg}': {exc.errors()[0]['msg']}") from exc
    return blocks


def format_hours(hours: float) -> str:
    """Render fractional hours as ``Hh MMm``."""
    total_minutes = int(round(hours * 60))
    return f"{total_minutes // 60}h {total_minutes % 60:02d}m"


__all__ = [
    "PHASE_CODES",
    "PHASE_STYLES",
    "format_hours",
    "parse_date",
    "parse_instant",
    "parse_leave_blocks",
    "parse_month",
]
