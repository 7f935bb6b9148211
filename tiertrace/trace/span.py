"""Span data model for tiertrace.

Spans form a fixed three-tier tree: a ``core`` span owns ``repo`` spans,
and each ``repo`` span owns ``agent`` spans.  A span refers to its parent
only through ``parent_span_id`` (a plain identifier), so every tree
serialises to JSON without cycles.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

TIER_CORE = "core"
TIER_REPO = "repo"
TIER_AGENT = "agent"
TIERS: tuple[str, ...] = (TIER_CORE, TIER_REPO, TIER_AGENT)

STATUS_PENDING = "pending"
STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUSES: tuple[str, ...] = (STATUS_PENDING, STATUS_SUCCESS, STATUS_FAILED)
TERMINAL_STATUSES: tuple[str, ...] = (STATUS_SUCCESS, STATUS_FAILED)

EVIDENCE_KINDS: tuple[str, ...] = ("hash", "uri", "id")

# Fields that may not be reassigned once a span is finalised.
_SEALED_FIELDS = frozenset(
    {"span_id", "parent_span_id", "tier", "name", "start_time", "end_time", "status",
     "artifacts", "evidence"}
)


class SpanLifecycleError(RuntimeError):
    """A span was driven through an illegal lifecycle transition."""


@dataclass
class Artifact:
    """A side-product of the work recorded by a span (plan, report, export, ...)."""

    id: str
    type: str
    reference: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "reference": self.reference,
        }
        if self.data is not None:
            d["data"] = self.data
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Artifact:
        return cls(
            id=d["id"],
            type=d["type"],
            reference=d["reference"],
            data=d.get("data"),
        )


@dataclass
class Evidence:
    """Machine-checkable proof (a hash digest, a URI or a stable id)."""

    id: str
    kind: str
    value: str

    def __post_init__(self) -> None:
        if self.kind not in EVIDENCE_KINDS:
            raise ValueError(
                f"Unknown evidence kind {self.kind!r}; expected one of {EVIDENCE_KINDS}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.kind, "value": self.value}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Evidence:
        return cls(id=d["id"], kind=d.get("type", d.get("kind", "")), value=d["value"])


@dataclass
class Span:
    """A single traced unit of work.

    Attributes:
        span_id: Unique identifier for this span.
        parent_span_id: ID of the enclosing span (``None`` only for an
            outermost core span).
        tier: ``"core"``, ``"repo"`` or ``"agent"``; serialised as ``type``.
        name: Human-readable label (core name, downstream system, operation).
        start_time: ISO-8601 start timestamp.
        end_time: ISO-8601 end timestamp, ``None`` while the span is open.
        status: ``"pending"``, ``"success"`` or ``"failed"``.
        artifacts: Side-products attached at finalisation.
        evidence: Proof values attached at finalisation.
        children: Directly nested spans, owned by this span.
        metadata: Free-form JSON-compatible key/values.

    Once finalised (``end_time`` set), the identity fields, ``status``,
    ``end_time`` and the ``artifacts``/``evidence`` attributes cannot be
    reassigned; doing so raises :class:`SpanLifecycleError`.  Artifacts and
    evidence are only added through :func:`tiertrace.trace.lifecycle.finalize`.
    """

    span_id: str
    tier: str
    name: str
    start_time: str
    parent_span_id: str | None = None
    end_time: str | None = None
    status: str = STATUS_PENDING
    artifacts: list[Artifact] = field(default_factory=list)
    evidence: list[Evidence] = field(default_factory=list)
    children: list[Span] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )
    _sealed: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.end_time is not None:
            self.seal()

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _SEALED_FIELDS and getattr(self, "_sealed", False):
            raise SpanLifecycleError(
                f"Cannot set {name!r} on finalized span {self.name!r} ({self.span_id})"
            )
        object.__setattr__(self, name, value)

    def seal(self) -> None:
        """Freeze the lifecycle fields; called by the finaliser."""
        object.__setattr__(self, "_sealed", True)

    @property
    def is_finalized(self) -> bool:
        return self.end_time is not None

    @property
    def duration_ms(self) -> float | None:
        """Elapsed wall time in milliseconds.

        ``None`` while open, or when the timestamps cannot be compared
        (not ISO-8601, or one naive and one timezone-aware).
        """
        if self.end_time is None:
            return None
        try:
            delta = datetime.fromisoformat(self.end_time) - datetime.fromisoformat(self.start_time)
        except (ValueError, TypeError):
            return None
        return delta.total_seconds() * 1000.0

    def add_child(self, child: Span) -> None:
        """Append *child* to this span's children (safe under concurrent writers)."""
        with self._lock:
            self.children.append(child)

    def add_children(self, children: list[Span]) -> None:
        """Append *children* as one step, rejecting any span already attached.

        Raises:
            ValueError: If a span id is already among the children, or repeats
                within *children*.  Nothing is attached in that case.
        """
        with self._lock:
            seen = {c.span_id for c in self.children}
            for child in children:
                if child.span_id in seen:
                    raise ValueError(
                        f"Span {child.name!r} ({child.span_id}) is already a child of {self.name!r}"
                    )
                seen.add(child.span_id)
            self.children.extend(children)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self, *, include_children: bool = True) -> dict[str, Any]:
        with self._lock:
            children = list(self.children)
        d: dict[str, Any] = {
            "span_id": self.span_id,
            "parent_span_id": self.parent_span_id,
            "type": self.tier,
            "name": self.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status,
            "artifacts": [a.to_dict() for a in self.artifacts],
            "evidence": [e.to_dict() for e in self.evidence],
            "children": [c.to_dict() for c in children] if include_children else [],
        }
        if self.metadata:
            d["metadata"] = dict(self.metadata)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Span:
        """Rebuild a span tree from its serialised form."""
        return cls(
            span_id=d["span_id"],
            parent_span_id=d.get("parent_span_id"),
            tier=d.get("type", d.get("tier", "")),
            name=d["name"],
            start_time=d["start_time"],
            end_time=d.get("end_time"),
            status=d.get("status", STATUS_PENDING),
            artifacts=[Artifact.from_dict(a) for a in d.get("artifacts", [])],
            evidence=[Evidence.from_dict(e) for e in d.get("evidence", [])],
            children=[cls.from_dict(c) for c in d.get("children", [])],
            metadata=dict(d.get("metadata") or {}),
        )
