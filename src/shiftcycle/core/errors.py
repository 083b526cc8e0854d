"""Common shiftcycle-specific exceptions."""


class ShiftCycleValueError(ValueError):
    """Raised when shiftcycle detects invalid user-provided data."""


__all__ = ["ShiftCycleValueError"]
