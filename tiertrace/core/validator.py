"""Structural validation of a core → repo → agent span tree.

Invariants checked:

- the root span is a ``core`` span;
- the core span has at least one ``repo`` child, and only ``repo`` children;
- every repo child names the core span as its parent;
- every repo span has at least one ``agent`` child;
- every agent child names its repo span as its parent.

Every violation is reported; validation never stops at the first one and
never raises for a malformed tree.  Timestamps and statuses are not
inspected, and agent spans are treated as leaves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from tiertrace.trace.span import TIER_AGENT, TIER_CORE, TIER_REPO, Span

logger = logging.getLogger("tiertrace.core")


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of :func:`validate`. ``valid`` is true iff ``failures`` is empty."""

    failures: tuple[str, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "failures": list(self.failures)}


def _check_repo(core_span: Span, repo_span: Span, failures: list[str]) -> None:
    if repo_span.parent_span_id != core_span.span_id:
        failures.append(
            f'Repo span "{repo_span.name}" parent_span_id "{repo_span.parent_span_id}" '
            f'does not match core span_id "{core_span.span_id}"'
        )

    agents = [c for c in repo_span.children if c.tier == TIER_AGENT]
    if not agents:
        failures.append(f'Repo span "{repo_span.name}" has zero agent-level child spans')

    for agent_span in agents:
        if agent_span.parent_span_id != repo_span.span_id:
            failures.append(
                f'Agent span "{agent_span.name}" parent_span_id "{agent_span.parent_span_id}" '
                f'does not match repo span_id "{repo_span.span_id}"'
            )


def validate(core_span: Span) -> ValidationReport:
    """Check the structural integrity of the tree rooted at *core_span*."""
    failures: list[str] = []
    children = list(core_span.children)

    if core_span.tier != TIER_CORE:
        failures.append(f'Root span type is "{core_span.tier}", expected "{TIER_CORE}"')

    repos = [c for c in children if c.tier == TIER_REPO]
    if not repos:
        failures.append("Core span has zero repo-level child spans")

    for repo_span in repos:
        _check_repo(core_span, repo_span, failures)

    # Reported separately from the zero-repo check; the two never overlap.
    for stray in children:
        if stray.tier != TIER_REPO:
            failures.append(
                f'Core span has non-repo child "{stray.name}" of type "{stray.tier}"'
            )

    if failures:
        logger.debug("validate root=%s failures=%d", core_span.span_id[:8], len(failures))
    return ValidationReport(failures=tuple(failures))
