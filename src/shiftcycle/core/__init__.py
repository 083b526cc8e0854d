"""Core utilities shared across shiftcycle modules."""

from .dates import iter_days, month_bounds, year_bounds
from .errors import ShiftCycleValueError

__all__ = ["ShiftCycleValueError", "iter_days", "month_bounds", "year_bounds"]
