"""Graph assembly — flatten a finalised span tree into an ordered index."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from tiertrace import SCHEMA_VERSION
from tiertrace.core.validator import validate
from tiertrace.trace.lifecycle import new_execution_id
from tiertrace.trace.span import Span


def collect_all(root_span: Span) -> list[Span]:
    """Return every span reachable from *root_span*, in pre-order.

    The root comes first, followed by each child's subtree in child order.
    A span object reachable twice (a mis-wired tree) is listed once.
    The tree is not modified.
    """
    spans: list[Span] = []
    seen: set[int] = set()
    stack: list[Span] = [root_span]
    while stack:
        span = stack.pop()
        if id(span) in seen:
            continue
        seen.add(id(span))
        spans.append(span)
        stack.extend(reversed(list(span.children)))
    return spans


@dataclass(frozen=True)
class ExecutionGraph:
    """The full span tree of one execution plus its flat index and validation outcome."""

    execution_id: str
    root_span: Span
    all_spans: tuple[Span, ...]
    valid: bool
    failure_reasons: tuple[str, ...] = ()
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "execution_id": self.execution_id,
            "root_span": self.root_span.to_dict(),
            # Flat entries omit children; the tree lives under root_span.
            "all_spans": [s.to_dict(include_children=False) for s in self.all_spans],
            "created_at": self.created_at,
            "valid": self.valid,
            "failure_reasons": list(self.failure_reasons),
        }


def build_graph(core_span: Span, execution_id: str | None = None) -> ExecutionGraph:
    """Assemble and validate the graph rooted at *core_span*."""
    report = validate(core_span)
    return ExecutionGraph(
        execution_id=execution_id or new_execution_id(),
        root_span=core_span,
        all_spans=tuple(collect_all(core_span)),
        valid=report.valid,
        failure_reasons=tuple(report.failures),
    )
