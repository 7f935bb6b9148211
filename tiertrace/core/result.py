"""Result builder — the caller-facing outcome of one traced execution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from tiertrace import SCHEMA_VERSION
from tiertrace.core.graph import ExecutionGraph, build_graph
from tiertrace.trace.lifecycle import new_execution_id
from tiertrace.trace.span import STATUS_FAILED, Span

logger = logging.getLogger("tiertrace.core")


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome returned on success, partial failure and total failure alike."""

    core_name: str
    execution_id: str
    status: str
    execution_graph: ExecutionGraph
    failure_reasons: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return self.execution_graph.valid

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "core_name": self.core_name,
            "execution_id": self.execution_id,
            "status": self.status,
            "execution_graph": self.execution_graph.to_dict(),
            "failure_reasons": list(self.failure_reasons),
        }


def build_result(
    core_span: Span,
    core_name: str,
    execution_id: str | None = None,
) -> ExecutionResult:
    """Assemble, validate and summarise the tree rooted at *core_span*.

    The status is the core span's own status, forced to ``"failed"`` when
    the tree is structurally invalid.  Structural problems are reported in
    ``failure_reasons``; they are never raised.
    """
    exec_id = execution_id or new_execution_id()
    graph = build_graph(core_span, exec_id)

    status = core_span.status
    if not graph.valid:
        status = STATUS_FAILED
        logger.warning(
            "Execution %s of %s is structurally invalid (%d failure(s))",
            exec_id[:8], core_name, len(graph.failure_reasons),
        )

    return ExecutionResult(
        core_name=core_name,
        execution_id=exec_id,
        status=status,
        execution_graph=graph,
        failure_reasons=graph.failure_reasons,
    )
