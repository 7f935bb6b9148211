"""Trace subpackage — span model, lifecycle, context and recorder."""

from __future__ import annotations

__all__ = [
    "Artifact",
    "Evidence",
    "ExecutionContext",
    "Span",
    "SpanLifecycleError",
    "build_context",
    "create_agent",
    "create_core",
    "create_repo",
    "finalize",
]

from tiertrace.trace.context import ExecutionContext, build_context
from tiertrace.trace.lifecycle import (
    SpanLifecycleError,
    create_agent,
    create_core,
    create_repo,
    finalize,
)
from tiertrace.trace.span import Artifact, Evidence, Span
