"""Base adapter interface for traced downstream operations.

An adapter wraps one downstream system.  The orchestration layer hands it
an :class:`ExecutionContext` addressed at the system's repo span before
each call; every operation the adapter performs is recorded as one agent
span parented to that repo span.  After the call, the orchestration layer
collects the spans with ``last_execution_spans()`` and adopts them into
the repo span (see :meth:`tiertrace.trace.recorder.RepoScope.adopt`).
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from tiertrace.trace.context import ExecutionContext
from tiertrace.trace.lifecycle import SpanLifecycleError, create_agent, finalize
from tiertrace.trace.span import STATUS_FAILED, STATUS_SUCCESS, Span

logger = logging.getLogger("tiertrace.adapters")

T = TypeVar("T")


class ExecutionAwareAdapter(abc.ABC):
    """Abstract base for adapters that emit agent-level spans."""

    def __init__(self) -> None:
        self._context: ExecutionContext | None = None
        self._last_spans: list[Span] = []

    @abc.abstractmethod
    def name(self) -> str:
        """Return the adapter's span-name prefix (e.g. ``'inference-gateway'``)."""

    def set_execution_context(self, context: ExecutionContext) -> None:
        """Address the spans of the next operation at ``context.parent_span_id``."""
        self._context = context

    def last_execution_spans(self) -> list[Span]:
        """Agent spans produced by the last operation."""
        return list(self._last_spans)

    def _traced(self, operation: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run *fn* inside an agent span named ``"<name>:<operation>"``.

        The span is finalised ``success`` or ``failed`` before this returns
        or re-raises.
        """
        if self._context is None:
            raise SpanLifecycleError(
                f"{type(self).__name__}.{operation} called without an execution context"
            )
        span = create_agent(f"{self.name()}:{operation}", self._context.parent_span_id)
        self._last_spans = []
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            span.metadata["error"] = {"type": type(exc).__name__, "message": str(exc)}
            finalize(span, STATUS_FAILED)
            self._last_spans = [span]
            logger.debug("adapter.failed name=%s op=%s err=%s", self.name(), operation, exc)
            raise
        finalize(span, STATUS_SUCCESS)
        self._last_spans = [span]
        return result
