"""Adapter subpackage — contract for downstream operations that emit agent spans."""

from __future__ import annotations

__all__ = ["ExecutionAwareAdapter"]

from tiertrace.adapters.base import ExecutionAwareAdapter
