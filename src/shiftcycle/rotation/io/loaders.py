"""Rotation loading utilities (YAML settings + optional CSV leave table)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import pandas as pd
import yaml
from pydantic import TypeAdapter

from shiftcycle.core import ShiftCycleValueError
from shiftcycle.rotation.models import LeaveBlock, RotationConfig

__all__ = ["load_rotation", "read_csv", "rotation_from_mapping"]

_LEAVE_COLUMNS = ("id", "start_date", "end_date")


def read_csv(path: Path) -> pd.DataFrame:
    """Load a CSV file using pandas with UTF-8 defaults."""
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def _leave_rows(frame: pd.DataFrame, source: Path) -> list[dict[str, object]]:
    missing = [column for column in _LEAVE_COLUMNS if column not in frame.columns]
    if missing:
        raise ShiftCycleValueError(f"Leave table {source} missing columns: {missing}")
    rows = cast(list[dict[str, object]], frame[list(_LEAVE_COLUMNS)].to_dict("records"))
    return [row for row in rows if any(str(value).strip() for value in row.values())]


def rotation_from_mapping(
    meta: dict[str, Any], *, root: Path | None = None
) -> RotationConfig:
    """Build a :class:`RotationConfig` from an already-parsed settings document.

    Parameters
    ----------
    meta:
        Mapping with a ``rotation`` section and an optional ``data`` section.
    root:
        Directory that relative ``data`` paths resolve against (defaults to the CWD).
    """
    if not isinstance(meta, dict):
        raise ShiftCycleValueError("Rotation settings must be a mapping")
    section = meta.get("rotation")
    if not isinstance(section, dict):
        raise ShiftCycleValueError("Rotation settings require a 'rotation' mapping")
    payload = dict(section)
    data_section = meta.get("data") or {}
    if not isinstance(data_section, dict):
        raise ShiftCycleValueError("'data' section must be a mapping of table paths")

    if "annual_leave_blocks" in data_section:
        if "annual_leave_blocks" in payload:
            raise ShiftCycleValueError(
                "annual_leave_blocks given both inline and as a data table; pick one"
            )
        base = root or Path.cwd()
        candidate = base / str(data_section["annual_leave_blocks"])
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        payload["annual_leave_blocks"] = _leave_rows(read_csv(candidate), candidate)

    if payload.get("annual_leave_blocks") is not None:
        blocks = TypeAdapter(list[LeaveBlock]).validate_python(payload["annual_leave_blocks"])
        payload["annual_leave_blocks"] = tuple(blocks)
    else:
        payload.pop("annual_leave_blocks", None)

    return RotationConfig.model_validate(payload)


def load_rotation(yaml_path: str | Path) -> RotationConfig:
    """Load a RotationConfig from a YAML settings file.

    Parameters
    ----------
    yaml_path:
        Path to the settings YAML (``rotation:`` mapping, optional ``data:`` table paths).

    Returns
    -------
    RotationConfig
        Fully validated, immutable config ready for the resolvers.

    Notes
    -----
    ``data.annual_leave_blocks`` may point at a CSV (``id,start_date,end_date``) relative to the
    YAML file; blank rows are skipped. Inline ``rotation.annual_leave_blocks`` works too, but
    not both at once.
    """
    base_path = Path(yaml_path).resolve()
    if not base_path.exists():
        raise FileNotFoundError(base_path)
    with base_path.open("r", encoding="utf-8") as handle:
        meta = yaml.safe_load(handle)
    if meta is None:
        raise ShiftCycleValueError(f"Rotation settings file {base_path} is empty")
    return rotation_from_mapping(meta, root=base_path.parent)
