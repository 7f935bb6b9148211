"""CLI input loading — parse trace files and turn library errors into click errors."""

from __future__ import annotations

import json
import logging
from typing import Any

import click

from tiertrace.api import validate_trace
from tiertrace.core.result import ExecutionResult

logger = logging.getLogger("tiertrace.cli")


def load_trace_file(filepath: str, core_name: str | None = None) -> ExecutionResult:
    """Load a JSON trace file and rebuild its execution result.

    Raises:
        click.ClickException: On parse errors or documents that are not span trees.
    """
    try:
        with open(filepath, encoding="utf-8") as f:
            data: Any = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"Invalid JSON in {filepath}: {exc}") from exc

    try:
        return validate_trace(data, core_name=core_name)
    except ValueError as exc:
        msgs = str(exc).splitlines()
        summary = "\n".join(f"  {m}" for m in msgs[1:6])
        more = f"\n  ... +{len(msgs) - 6} more" if len(msgs) > 6 else ""
        raise click.ClickException(f"{msgs[0]} ({filepath})\n{summary}{more}".rstrip()) from exc
