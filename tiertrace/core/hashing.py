"""Deterministic hashing utilities.

All hashes are SHA-256 over a canonical byte representation.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from tiertrace.trace.span import Evidence


def hash_bytes(data: bytes) -> str:
    """SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def hash_string(data: str) -> str:
    """SHA-256 hex digest of a UTF-8 string."""
    return hash_bytes(data.encode("utf-8"))


def hash_evidence(evidence_id: str, payload: Any) -> Evidence:
    """``hash`` evidence for *payload* (bytes, str, or a JSON-serialisable value)."""
    if isinstance(payload, bytes):
        digest = hash_bytes(payload)
    elif isinstance(payload, str):
        digest = hash_string(payload)
    else:
        digest = hash_bytes(json.dumps(payload, sort_keys=True, default=str).encode("utf-8"))
    return Evidence(id=evidence_id, kind="hash", value=f"sha256:{digest}")
