"""Core subpackage — graph assembly, structural validation, results, schemas, hashing."""

from __future__ import annotations

__all__ = [
    "ExecutionGraph",
    "ExecutionResult",
    "ValidationReport",
    "build_graph",
    "build_result",
    "collect_all",
    "hash_evidence",
    "hash_string",
    "validate",
]

from tiertrace.core.graph import ExecutionGraph, build_graph, collect_all
from tiertrace.core.hashing import hash_evidence, hash_string
from tiertrace.core.result import ExecutionResult, build_result
from tiertrace.core.validator import ValidationReport, validate
