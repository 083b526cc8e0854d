"""Context manager for capturing query telemetry."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from .jsonl import append_jsonl


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(slots=True)
class QueryTelemetryLogger(AbstractContextManager["QueryTelemetryLogger"]):
    """Record one resolver/aggregator query as a JSONL line.

    Parameters
    ----------
    log_path:
        JSONL path where query records are appended.
    command:
        Query identifier (e.g., ``"status"``, ``"month"``).
    config_path:
        Optional filesystem path to the rotation settings YAML.
    reference:
        Date or instant the query was evaluated for (ISO string).
    context:
        Additional metadata (CLI overrides such as ``extension`` or extra leave blocks).
    """

    log_path: Path
    command: str
    config_path: str | None = None
    reference: str | None = None
    context: Mapping[str, Any] | None = None
    schema_version: str = "1.0"
    query_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    _start_time: float = field(default=0.0, init=False)
    _start_timestamp: str | None = field(default=None, init=False)
    _closed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    def __enter__(self) -> "QueryTelemetryLogger":
        self._start_time = time.perf_counter()
        self._start_timestamp = _iso_now()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type:
            self._close(status="error", metrics=None, error=repr(exc))
            return False
        self._close(status="ok", metrics=None, error=None)
        return False

    def elapsed(self) -> float:
        """Return the elapsed wall-clock seconds since the query started."""
        return time.perf_counter() - self._start_time

    @property
    def closed(self) -> bool:
        return self._closed

    def finalize(
        self,
        *,
        status: str = "ok",
        metrics: Mapping[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Write the terminal query record."""
        self._close(status=status, metrics=metrics, error=error)

    def _close(
        self,
        *,
        status: str,
        metrics: Mapping[str, Any] | None,
        error: str | None,
    ) -> None:
        if self._closed:
            return
        duration = self.elapsed() if self._start_time else 0.0
        record = {
            "record_type": "query",
            "schema_version": self.schema_version,
            "query_id": self.query_id,
            "command": self.command,
            "config_path": self.config_path,
            "reference": self.reference,
            "status": status,
            "metrics": dict(metrics or {}),
            "context": dict(self.context or {}),
            "error": error,
            "started_at": self._start_timestamp,
            "finished_at": _iso_now(),
            "duration_seconds": round(duration, 3),
        }
        append_jsonl(self.log_path, record)
        self._closed = True


__all__ = ["QueryTelemetryLogger"]
