"""Rotation settings I/O helpers."""

from .loaders import load_rotation, read_csv, rotation_from_mapping

__all__ = ["load_rotation", "read_csv", "rotation_from_mapping"]
