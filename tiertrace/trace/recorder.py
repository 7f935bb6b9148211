"""Execution recorder — per-operation bookkeeping for one core → repo → agent tree.

A recorder owns exactly one tree; nothing is registered globally, so
concurrent operations each build their own recorder.  Spans are attached
to their parent as soon as they are opened (with a locked append, so
sibling spans may be opened from several threads) and finalised when
their ``with`` block exits.

Usage::

    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Inference-Gateway") as scope:
        with scope.agent("inference-gateway:infer") as span:
            ...
    result = recorder.finish()
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from tiertrace.core.result import ExecutionResult, build_result
from tiertrace.trace.context import ExecutionContext, build_context
from tiertrace.trace.lifecycle import (
    SpanLifecycleError,
    create_agent,
    create_core,
    create_repo,
    finalize,
    new_execution_id,
)
from tiertrace.trace.span import (
    STATUS_FAILED,
    STATUS_SUCCESS,
    TIER_AGENT,
    Artifact,
    Evidence,
    Span,
)

logger = logging.getLogger("tiertrace.trace")


def _record_exception(span: Span, exc: BaseException) -> None:
    span.metadata["error"] = {"type": type(exc).__name__, "message": str(exc)}


@contextmanager
def _closing(
    span: Span,
    artifacts: list[Artifact | dict[str, Any]],
    evidence: list[Evidence | dict[str, Any]],
) -> Iterator[Span]:
    """Finalise *span* on exit unless the block already did."""
    try:
        yield span
    except BaseException as exc:
        if not span.is_finalized:
            _record_exception(span, exc)
            finalize(span, STATUS_FAILED, artifacts, evidence)
        raise
    else:
        if not span.is_finalized:
            finalize(span, STATUS_SUCCESS, artifacts, evidence)


class RepoScope:
    """The open repo span for one downstream system and the agent spans under it."""

    def __init__(self, span: Span, context: ExecutionContext) -> None:
        self.span = span
        self.context = context
        self._artifacts: list[Artifact | dict[str, Any]] = []
        self._evidence: list[Evidence | dict[str, Any]] = []

    def add_artifact(self, artifact: Artifact | dict[str, Any]) -> None:
        """Stage an artifact for the repo span's finalisation."""
        self._artifacts.append(artifact)

    def add_evidence(self, evidence: Evidence | dict[str, Any]) -> None:
        """Stage evidence for the repo span's finalisation."""
        self._evidence.append(evidence)

    @contextmanager
    def agent(
        self,
        name: str,
        artifacts: Iterable[Artifact | dict[str, Any]] | None = None,
        evidence: Iterable[Evidence | dict[str, Any]] | None = None,
    ) -> Iterator[Span]:
        """Open an agent span under this repo; finalised when the block exits."""
        span = create_agent(name, self.span.span_id)
        self.span.add_child(span)
        with _closing(span, list(artifacts or ()), list(evidence or ())) as s:
            yield s

    def adopt(self, spans: Iterable[Span]) -> None:
        """Attach finalised agent spans produced by a traced downstream operation."""
        incoming = list(spans)
        for s in incoming:
            if s.tier != TIER_AGENT:
                raise ValueError(f"Cannot adopt {s.tier} span {s.name!r} under repo {self.span.name!r}")
            if s.parent_span_id != self.span.span_id:
                raise ValueError(
                    f"Span {s.name!r} names parent {s.parent_span_id!r}, "
                    f"not repo span {self.span.span_id!r}"
                )
            if not s.is_finalized:
                raise SpanLifecycleError(f"Cannot adopt span {s.name!r} while it is still pending")
        self.span.add_children(incoming)
        logger.debug("repo.adopt name=%s count=%d", self.span.name, len(incoming))


class ExecutionRecorder:
    """Builds the span tree for one top-level operation.

    Attributes:
        core_name: Name recorded on the core span and the result.
        execution_id: Execution-wide identifier threaded to nested calls.
        core_span: Root of the tree, opened on construction.
    """

    def __init__(
        self,
        core_name: str,
        parent_span_id: str | None = None,
        execution_id: str | None = None,
    ) -> None:
        self.core_name = core_name
        self.execution_id: str = execution_id or new_execution_id()
        self.core_span = create_core(core_name, parent_span_id)
        self._artifacts: list[Artifact | dict[str, Any]] = []
        self._evidence: list[Evidence | dict[str, Any]] = []

    @property
    def context(self) -> ExecutionContext:
        """Context addressed at the core span."""
        return build_context(self.execution_id, self.core_span.span_id, self.core_span.span_id)

    def add_artifact(self, artifact: Artifact | dict[str, Any]) -> None:
        self._artifacts.append(artifact)

    def add_evidence(self, evidence: Evidence | dict[str, Any]) -> None:
        self._evidence.append(evidence)

    @contextmanager
    def repo(self, name: str) -> Iterator[RepoScope]:
        """Open a repo span for one downstream system; finalised when the block exits."""
        span = create_repo(name, self.core_span.span_id)
        self.core_span.add_child(span)
        scope = RepoScope(span, self.context.for_parent(span.span_id))
        with _closing(span, scope._artifacts, scope._evidence):
            yield scope

    def finish(self, status: str | None = None) -> ExecutionResult:
        """Finalise the core span and build the execution result.

        *status* defaults to ``"failed"`` when any repo span failed,
        ``"success"`` otherwise.
        """
        if self.core_span.is_finalized:
            raise SpanLifecycleError(f"Execution {self.execution_id} has already finished")
        if status is None:
            failed = any(c.status == STATUS_FAILED for c in self.core_span.children)
            status = STATUS_FAILED if failed else STATUS_SUCCESS
        finalize(self.core_span, status, self._artifacts, self._evidence)
        return build_result(self.core_span, self.core_name, self.execution_id)
