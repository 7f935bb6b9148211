"""tiertrace public Python API.

Provides the high-level entrypoints:
  - ``validate_trace(...)`` → ExecutionResult for a serialised trace
  - ``load_trace(...)`` → ExecutionResult for a trace file
  - ``run_demo(...)`` → ExecutionResult for a one-repo, one-agent execution
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from tiertrace import DEFAULT_CORE_NAME
from tiertrace.core.result import ExecutionResult, build_result
from tiertrace.core.schemas import validate_document
from tiertrace.trace.exporters import load_json
from tiertrace.trace.recorder import ExecutionRecorder
from tiertrace.trace.span import Span

logger = logging.getLogger("tiertrace")


def _locate_root(document: dict[str, Any]) -> tuple[dict[str, Any], str | None, str | None]:
    """Return ``(root_span, core_name, execution_id)`` for any supported document shape."""
    if "execution_graph" in document:
        graph = document["execution_graph"]
        if not isinstance(graph, dict) or not isinstance(graph.get("root_span"), dict):
            raise ValueError("execution_graph.root_span is missing or not an object")
        return graph["root_span"], document.get("core_name"), document.get("execution_id")
    if "root_span" in document:
        if not isinstance(document["root_span"], dict):
            raise ValueError("root_span is not an object")
        return document["root_span"], None, document.get("execution_id")
    return document, None, None


def validate_trace(
    document: dict[str, Any],
    core_name: str | None = None,
    execution_id: str | None = None,
) -> ExecutionResult:
    """Re-validate a serialised trace.

    Parameters:
        document: A span tree, an execution graph (``root_span``) or an
            execution result (``execution_graph.root_span``).
        core_name: Overrides the document's core name.
        execution_id: Overrides the document's execution id.

    Returns:
        A freshly built :class:`ExecutionResult`.  Hierarchy problems are
        reported in ``failure_reasons``.

    Raises:
        ValueError: If the document is not a well-formed span tree at all.
    """
    if not isinstance(document, dict):
        raise ValueError(f"Trace document must be a JSON object, got {type(document).__name__}")
    root, doc_core_name, doc_execution_id = _locate_root(document)

    errors = validate_document("span", root)
    if errors:
        raise ValueError("Trace document does not match the span schema:\n" + "\n".join(errors))

    span = Span.from_dict(root)
    return build_result(
        span,
        core_name or doc_core_name or span.name,
        execution_id or doc_execution_id,
    )


def load_trace(path: str | Path, core_name: str | None = None) -> ExecutionResult:
    """Load a JSON trace file and re-validate it."""
    logger.debug("Loading trace from %s", path)
    return validate_trace(load_json(path), core_name=core_name)


def run_demo(
    core_name: str = DEFAULT_CORE_NAME,
    repo_name: str = "LLM-Inference-Gateway",
    agent_name: str = "inference-gateway:infer",
    include_agent: bool = True,
) -> ExecutionResult:
    """Record a core span with one repo span and (optionally) one agent span.

    With ``include_agent=False`` the repo span has no agent child, so the
    result comes back ``failed``.
    """
    recorder = ExecutionRecorder(core_name)
    with recorder.repo(repo_name) as scope:
        if include_agent:
            with scope.agent(agent_name):
                pass
    return recorder.finish()
