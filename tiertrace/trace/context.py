"""Execution context — the addressing token handed to nested operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ExecutionContext:
    """Where a nested operation should attach the spans it creates.

    Attributes:
        execution_id: Execution-wide unique ID.
        parent_span_id: Span the nested operation's spans must name as parent.
        core_span_id: Root core span of this execution.
    """

    execution_id: str
    parent_span_id: str
    core_span_id: str

    def for_parent(self, parent_span_id: str) -> ExecutionContext:
        """Same execution, addressed at *parent_span_id*."""
        return build_context(self.execution_id, self.core_span_id, parent_span_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "execution_id": self.execution_id,
            "parent_span_id": self.parent_span_id,
            "core_span_id": self.core_span_id,
        }


def build_context(execution_id: str, core_span_id: str, parent_span_id: str) -> ExecutionContext:
    """Build an :class:`ExecutionContext`; every field must be a non-empty string."""
    fields = {
        "execution_id": execution_id,
        "core_span_id": core_span_id,
        "parent_span_id": parent_span_id,
    }
    missing = [k for k, v in fields.items() if not isinstance(v, str) or not v]
    if missing:
        raise ValueError(f"ExecutionContext requires non-empty {', '.join(missing)}")
    return ExecutionContext(
        execution_id=execution_id,
        parent_span_id=parent_span_id,
        core_span_id=core_span_id,
    )
