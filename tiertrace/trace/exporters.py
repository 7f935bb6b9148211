"""Trace exporters — write span trees, graphs and results as JSON.

Supports:
  - JSON documents (a span tree, an execution graph or an execution result)
  - JSON Lines (one flat span per line, parent pointers preserved)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tiertrace.trace.span import Span


def spans_to_dicts(spans: list[Span]) -> list[dict[str, Any]]:
    """Convert spans to a list of flat dicts (children omitted)."""
    return [s.to_dict(include_children=False) for s in spans]


def export_json(obj: Any, path: str | Path) -> Path:
    """Write any object exposing ``to_dict()`` (or a plain dict) as indented JSON."""
    data = obj.to_dict() if hasattr(obj, "to_dict") else obj
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, indent=2, default=str) + "\n", encoding="utf-8")
    return p


def export_jsonl(spans: list[Span], path: str | Path) -> Path:
    """Write spans as JSON Lines."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        for rec in spans_to_dicts(spans):
            f.write(json.dumps(rec, default=str) + "\n")
    return p


def load_json(path: str | Path) -> Any:
    """Read a JSON document written by :func:`export_json`."""
    return json.loads(Path(path).read_text(encoding="utf-8"))
