"""Shared CLI testing utilities."""

from __future__ import annotations

import re
from typing import Any

_ANSI_RE = re.compile(r"\x1B\[[0-9;?]*[ -/]*[@-~]")


def _decode(chunk: bytes | str | None) -> str:
    if not chunk:
        return ""
    if isinstance(chunk, bytes):
        return chunk.decode("utf-8", errors="replace")
    return chunk


def cli_text(result: Any) -> str:
    """Return combined CLI output (stdout + stderr) with ANSI codes stripped."""
    text = _decode(getattr(result, "stdout_bytes", b"")) or _decode(result.output)
    stderr_text = _decode(getattr(result, "stderr_bytes", b""))
    if stderr_text and stderr_text not in text:
        text += stderr_text
    return _ANSI_RE.sub("", text)


__all__ = ["cli_text"]
