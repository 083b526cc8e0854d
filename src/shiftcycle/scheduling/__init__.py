"""Scheduling utilities (shift windows, reminder lead times)."""

from .windows import ShiftWindow, ShiftWindowKind, first_work_window, windows_for

__all__ = ["ShiftWindow", "ShiftWindowKind", "first_work_window", "windows_for"]
