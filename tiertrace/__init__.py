"""tiertrace — hierarchical execution traces for orchestration layers."""

from __future__ import annotations

__version__ = "0.1.0"

#: Core name used when the caller does not supply one.
DEFAULT_CORE_NAME: str = "interface-core"

#: Version stamped on exported documents.
SCHEMA_VERSION: str = "0.1.0"

from tiertrace.api import load_trace, run_demo, validate_trace
from tiertrace.core.result import ExecutionResult, build_result
from tiertrace.trace.context import ExecutionContext, build_context
from tiertrace.trace.lifecycle import (
    SpanLifecycleError,
    create_agent,
    create_core,
    create_repo,
    finalize,
)
from tiertrace.trace.recorder import ExecutionRecorder
from tiertrace.trace.span import Artifact, Evidence, Span

__all__ = [
    "__version__",
    "DEFAULT_CORE_NAME",
    "SCHEMA_VERSION",
    "Artifact",
    "Evidence",
    "ExecutionContext",
    "ExecutionRecorder",
    "ExecutionResult",
    "Span",
    "SpanLifecycleError",
    "build_context",
    "build_result",
    "create_agent",
    "create_core",
    "create_repo",
    "finalize",
    "load_trace",
    "run_demo",
    "validate_trace",
]
