from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pytest
import yaml

from shiftcycle.rotation.models import PatternFamily, RotationConfig
from tests.builders import build_config


@pytest.fixture
def industrial_config() -> RotationConfig:
    return build_config()


@pytest.fixture
def admin_config() -> RotationConfig:
    # 2024-01-07 is a Sunday.
    return build_config(
        anchor_date=date(2024, 1, 7),
        pattern_family=PatternFamily.WEEKLY_ADMIN,
        work_duration=21,
        vacation_duration=7,
    )


@pytest.fixture
def write_rotation(tmp_path: Path):
    """Write a settings YAML (and optional leave CSV) and return the YAML path."""

    def _write(
        rotation: dict[str, Any],
        *,
        data: dict[str, Any] | None = None,
        leave_csv: str | None = None,
        name: str = "rotation.yaml",
    ) -> Path:
        document: dict[str, Any] = {"rotation": rotation}
        if leave_csv is not None:
            (tmp_path / "leave.csv").write_text(leave_csv, encoding="utf-8")
            data = {**(data or {}), "annual_leave_blocks": "leave.csv"}
        if data is not None:
            document["data"] = data
        path = tmp_path / name
        path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
        return path

    return _write
