"""Structured JSONL telemetry for shiftcycle queries."""

from .jsonl import append_jsonl, read_jsonl
from .run_logger import QueryTelemetryLogger

__all__ = ["QueryTelemetryLogger", "append_jsonl", "read_jsonl"]
