"""JSON Schema definitions for serialised traces.

Each schema is a Python dict following JSON Schema Draft 2020-12.  They
describe the *format* of a document only; the core → repo → agent
hierarchy is checked by :mod:`tiertrace.core.validator`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

# ======================================================================
# Schemas
# ======================================================================

_ARTIFACT: dict[str, Any] = {
    "type": "object",
    "required": ["id", "type", "reference"],
    "properties": {
        "id": {"type": "string"},
        "type": {"type": "string"},
        "reference": {"type": "string"},
        "data": {},
    },
    "additionalProperties": True,
}

_EVIDENCE: dict[str, Any] = {
    "type": "object",
    "required": ["id", "type", "value"],
    "properties": {
        "id": {"type": "string"},
        "type": {"type": "string", "enum": ["hash", "uri", "id"]},
        "value": {"type": "string"},
    },
    "additionalProperties": True,
}

_SPAN_PROPERTIES: dict[str, Any] = {
    "span_id": {"type": "string", "minLength": 1},
    "parent_span_id": {"type": ["string", "null"]},
    "type": {"type": "string", "enum": ["core", "repo", "agent"]},
    "name": {"type": "string"},
    "start_time": {"type": "string"},
    "end_time": {"type": ["string", "null"]},
    "status": {"type": "string", "enum": ["pending", "success", "failed"]},
    "artifacts": {"type": "array", "items": {"$ref": "#/$defs/artifact"}},
    "evidence": {"type": "array", "items": {"$ref": "#/$defs/evidence"}},
    "metadata": {"type": "object"},
}

_DEFS: dict[str, Any] = {
    "artifact": _ARTIFACT,
    "evidence": _EVIDENCE,
    "span": {
        "type": "object",
        "required": ["span_id", "type", "name", "start_time", "status"],
        "properties": {
            **_SPAN_PROPERTIES,
            "children": {"type": "array", "items": {"$ref": "#/$defs/span"}},
        },
        "additionalProperties": True,
    },
    "flat_span": {
        "type": "object",
        "required": ["span_id", "type", "name", "start_time", "status"],
        "properties": dict(_SPAN_PROPERTIES),
        "additionalProperties": True,
    },
}

SPAN_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "tiertrace Span Tree",
    "$defs": _DEFS,
    "$ref": "#/$defs/span",
}

EXECUTION_GRAPH_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "tiertrace Execution Graph",
    "$defs": _DEFS,
    "type": "object",
    "required": ["execution_id", "root_span", "all_spans", "created_at", "valid", "failure_reasons"],
    "properties": {
        "schema_version": {"type": "string"},
        "execution_id": {"type": "string"},
        "root_span": {"$ref": "#/$defs/span"},
        "all_spans": {"type": "array", "items": {"$ref": "#/$defs/flat_span"}},
        "created_at": {"type": "string"},
        "valid": {"type": "boolean"},
        "failure_reasons": {"type": "array", "items": {"type": "string"}},
    },
    "additionalProperties": True,
}

EXECUTION_RESULT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "tiertrace Execution Result",
    "type": "object",
    "required": ["core_name", "execution_id", "status", "execution_graph", "failure_reasons"],
    "properties": {
        "schema_version": {"type": "string"},
        "core_name": {"type": "string"},
        "execution_id": {"type": "string"},
        "status": {"type": "string", "enum": ["pending", "success", "failed"]},
        "execution_graph": {"type": "object"},
        "failure_reasons": {"type": "array", "items": {"type": "string"}},
    },
    "additionalProperties": True,
}

EXECUTION_CONTEXT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "tiertrace Execution Context",
    "type": "object",
    "required": ["execution_id", "parent_span_id", "core_span_id"],
    "properties": {
        "execution_id": {"type": "string", "minLength": 1},
        "parent_span_id": {"type": "string", "minLength": 1},
        "core_span_id": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}

# Registry for programmatic access
SCHEMAS: dict[str, dict[str, Any]] = {
    "span": SPAN_SCHEMA,
    "execution_graph": EXECUTION_GRAPH_SCHEMA,
    "execution_result": EXECUTION_RESULT_SCHEMA,
    "execution_context": EXECUTION_CONTEXT_SCHEMA,
}


# ======================================================================
# Validation
# ======================================================================


def validate_document(schema_name: str, data: Any) -> list[str]:
    """Validate *data* against the named schema. Returns every error message."""
    schema = SCHEMAS.get(schema_name)
    if schema is None:
        return [f"Unknown schema: {schema_name}"]

    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])

    msgs: list[str] = []
    for err in errors:
        path = ".".join(str(p) for p in err.absolute_path) or "(root)"
        msgs.append(f"[{path}] {err.message}")
    return msgs


def export_schemas(out_dir: str | Path) -> list[Path]:
    """Write all JSON schemas as standalone files."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, schema in SCHEMAS.items():
        p = out / f"{name}.schema.json"
        p.write_text(json.dumps(schema, indent=2) + "\n", encoding="utf-8")
        written.append(p)
    return written
