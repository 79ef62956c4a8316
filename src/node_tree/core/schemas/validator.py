"""
Schema Validation Utilities

Validates the flat node array before any tree building starts.

Two layers:
- Basic checks (always): the payload is a list of objects, ``nodeId`` is
  a non-empty string, ``name`` is a string when present, and
  ``parentId`` / ``previousSiblingId`` are strings or null.
- Strict checks (``strict=True``): the whole payload is additionally
  validated against ``node_input.schema.json`` with jsonschema.

Every offending record is reported, not just the first one, so a bad
export can be fixed in one pass.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

import jsonschema


NODE_SCHEMA_NAME = "node_input"

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when input data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_nodes(data: Any, *, strict: bool = False) -> None:
    """
    Validate a flat node array.

    Args:
        data: Parsed JSON payload
        strict: If True, also validate against the JSON schema

    Raises:
        ValidationError: If the payload or any record is invalid. ``errors``
            holds one message per problem, prefixed with the record index.
    """
    if not isinstance(data, list):
        raise ValidationError(
            f"Expected a JSON array of nodes, got {type(data).__name__}",
            path="",
            errors=[f"Top-level value must be an array, got {type(data).__name__}"],
        )

    errors: List[str] = []
    for i, record in enumerate(data):
        errors.extend(_check_record(record, f"[{i}]"))

    if strict:
        errors.extend(_schema_errors(data, errors))

    if errors:
        raise ValidationError(
            f"{len(errors)} schema violation(s) in node list; first: {errors[0]}",
            path=errors[0].split(":", 1)[0],
            errors=errors,
        )


def _check_record(record: Any, path: str) -> List[str]:
    """Return basic-check messages for one record."""
    if not isinstance(record, dict):
        return [f"{path}: node must be an object, got {type(record).__name__}"]

    errors: List[str] = []
    node_id = record.get("nodeId")
    if "nodeId" not in record:
        errors.append(f"{path}.nodeId: missing required field")
    elif not isinstance(node_id, str) or not node_id:
        errors.append(f"{path}.nodeId: must be a non-empty string, got {node_id!r}")

    if "name" in record and not isinstance(record["name"], str):
        errors.append(f"{path}.name: must be a string, got {record['name']!r}")

    for key in ("parentId", "previousSiblingId"):
        value = record.get(key)
        if value is not None and not isinstance(value, str):
            errors.append(f"{path}.{key}: must be a string or null, got {value!r}")

    return errors


def _schema_errors(data: list, basic_errors: List[str]) -> List[str]:
    """Return jsonschema messages not already covered by the basic checks."""
    schema = _load_schema(NODE_SCHEMA_NAME)
    validator = jsonschema.Draft202012Validator(schema)

    reported_records = {_record_prefix(message.split(":", 1)[0]) for message in basic_errors}
    messages = []
    for error in sorted(validator.iter_errors(data), key=_error_sort_key):
        path = _format_path(error.absolute_path)
        if _record_prefix(path) in reported_records:
            continue
        messages.append(f"{path}: {error.message}")
    return messages


def _error_sort_key(error) -> list:
    """Order errors by record index, then field name."""
    return [(0, part) if isinstance(part, int) else (1, str(part)) for part in error.absolute_path]


def _format_path(parts) -> str:
    """Format a jsonschema path deque like ``[3].nodeId``."""
    out = ""
    for part in parts:
        out += f"[{part}]" if isinstance(part, int) else f".{part}"
    return out


def _record_prefix(path: str) -> str:
    """Return the ``[i]`` record prefix of a formatted path."""
    end = path.find("]")
    return path[: end + 1] if end != -1 else path
