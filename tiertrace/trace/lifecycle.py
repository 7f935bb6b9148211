"""Span lifecycle — factory functions that open spans and the finaliser that closes them.

Usage::

    core = create_core("interface-core")
    repo = create_repo("LLM-Inference-Gateway", core.span_id)
    agent = create_agent("inference-gateway:infer", repo.span_id)
    finalize(agent, "success")
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from tiertrace.trace.span import (
    STATUS_PENDING,
    TERMINAL_STATUSES,
    TIER_AGENT,
    TIER_CORE,
    TIER_REPO,
    Artifact,
    Evidence,
    Span,
    SpanLifecycleError,
)

logger = logging.getLogger("tiertrace.trace")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_span_id() -> str:
    """128-bit random span identifier."""
    return uuid.uuid4().hex


def new_execution_id() -> str:
    """128-bit random execution identifier."""
    return uuid.uuid4().hex


def _open(tier: str, name: str, parent_span_id: str | None) -> Span:
    span = Span(
        span_id=new_span_id(),
        parent_span_id=parent_span_id,
        tier=tier,
        name=name,
        start_time=_now(),
    )
    logger.debug(
        "span.start tier=%s name=%s id=%s parent=%s",
        tier, name, span.span_id[:8], parent_span_id and parent_span_id[:8],
    )
    return span


def _require_parent(tier: str, parent_span_id: str | None) -> str:
    if not parent_span_id:
        raise ValueError(f"A {tier} span requires a non-empty parent_span_id")
    return parent_span_id


def create_core(name: str, parent_span_id: str | None = None) -> Span:
    """Open a core span; *parent_span_id* is omitted only for the outermost operation."""
    return _open(TIER_CORE, name, parent_span_id or None)


def create_repo(name: str, parent_span_id: str) -> Span:
    """Open a repo span for one downstream system, parented to a core span."""
    return _open(TIER_REPO, name, _require_parent(TIER_REPO, parent_span_id))


def create_agent(name: str, parent_span_id: str) -> Span:
    """Open an agent span for one operation, parented to a repo span."""
    return _open(TIER_AGENT, name, _require_parent(TIER_AGENT, parent_span_id))


def _coerce_artifact(item: Artifact | dict[str, Any]) -> Artifact:
    return item if isinstance(item, Artifact) else Artifact.from_dict(item)


def _coerce_evidence(item: Evidence | dict[str, Any]) -> Evidence:
    return item if isinstance(item, Evidence) else Evidence.from_dict(item)


def finalize(
    span: Span,
    status: str,
    artifacts: Iterable[Artifact | dict[str, Any]] | None = None,
    evidence: Iterable[Evidence | dict[str, Any]] | None = None,
) -> Span:
    """Close *span* with a terminal *status* and append artifacts/evidence.

    Returns the same span.

    Raises:
        ValueError: If *status* is not ``"success"`` or ``"failed"``.
        SpanLifecycleError: If the span has already been finalised.
    """
    if status not in TERMINAL_STATUSES:
        raise ValueError(
            f"Cannot finalize span {span.name!r} with status {status!r}; "
            f"expected one of {TERMINAL_STATUSES}"
        )
    if span.is_finalized or span.status != STATUS_PENDING:
        raise SpanLifecycleError(
            f"Span {span.name!r} ({span.span_id}) is already finalized "
            f"with status {span.status!r}"
        )

    # Coerce before mutating so a bad item leaves the span untouched.
    new_artifacts = [_coerce_artifact(a) for a in artifacts or ()]
    new_evidence = [_coerce_evidence(e) for e in evidence or ()]

    end_time = _now()
    if datetime.fromisoformat(end_time) < datetime.fromisoformat(span.start_time):
        end_time = span.start_time

    span.end_time = end_time
    span.status = status
    span.artifacts.extend(new_artifacts)
    span.evidence.extend(new_evidence)
    span.seal()
    logger.debug(
        "span.finish tier=%s name=%s id=%s status=%s",
        span.tier, span.name, span.span_id[:8], status,
    )
    return span
