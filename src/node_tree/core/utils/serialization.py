"""
Serialization Utilities

Provides JSON read/write helpers for the flat node list and the nested
output tree.

- ``load_nodes_json()`` / ``parse_nodes()`` turn a source file into
  NodeInput records, validating first
- ``serialize_tree()`` turns assembled NodeRecord roots into plain lists
  and dicts
- ``save_tree_json()`` writes the tree atomically, so a reader of the
  destination never sees a half-written file
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from ..models.nodes import NodeInput, NodeRecord
from ..schemas.validator import validate_nodes


DEFAULT_OUTPUT_SUFFIX = ".json"
DEFAULT_INDENT = 2


# ─────────────────────────────────────────────────────────────────────────────
# Input
# ─────────────────────────────────────────────────────────────────────────────

def load_nodes_json(path: Path) -> Any:
    """
    Read and parse a JSON source file.

    Args:
        path: Path to a file holding a JSON array of nodes

    Returns:
        Parsed JSON payload (not yet validated)

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file is not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Node file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def parse_nodes(
    data: Any,
    *,
    validate: bool = True,
    strict: bool = True,
) -> list[NodeInput]:
    """
    Convert a parsed JSON payload into NodeInput records.

    Args:
        data: Parsed JSON payload
        validate: Whether to validate the payload first
        strict: Use the JSON schema in addition to the basic checks

    Returns:
        NodeInput records in input order

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_nodes(data, strict=strict)
    return [NodeInput.from_dict(record) for record in data]


# ─────────────────────────────────────────────────────────────────────────────
# Output
# ─────────────────────────────────────────────────────────────────────────────

def serialize_tree(roots: Iterable[NodeRecord]) -> list[dict[str, Any]]:
    """
    Serialize assembled root nodes to a JSON-ready list.

    Args:
        roots: Root-level records in order

    Returns:
        List of node dicts, each with a nested ``children`` list
    """
    return [root.to_dict() for root in roots]


def output_path_for(destination: Path | str, suffix: str = DEFAULT_OUTPUT_SUFFIX) -> Path:
    """
    Build the output file path by appending ``suffix`` to ``destination``.

    The suffix is always appended, never substituted:
    ``"out/tree"`` becomes ``"out/tree.json"``.
    """
    return Path(f"{destination}{suffix}")


def save_tree_json(
    payload: list[dict[str, Any]],
    path: Path,
    *,
    indent: int = DEFAULT_INDENT,
) -> Path:
    """
    Write the tree payload to ``path`` atomically.

    The JSON is written to a temp file in the same directory, flushed to
    disk, then moved over ``path``. On failure the temp file is removed
    and any existing file at ``path`` is left untouched.

    Args:
        payload: Serialized tree from ``serialize_tree()``
        path: Destination file path
        indent: JSON indentation

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".tmp",
        prefix=f".{path.name}.",
        dir=path.parent,
        delete=False,
        encoding="utf-8",
    ) as f:
        temp_path = Path(f.name)
        try:
            # ASCII escapes keep lone surrogates from the input writable
            json.dump(payload, f, indent=indent, ensure_ascii=True)
            f.flush()
            os.fsync(f.fileno())
        except BaseException:
            f.close()
            temp_path.unlink(missing_ok=True)
            raise

    try:
        # Use replace() instead of rename() for Windows compatibility
        temp_path.replace(path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    return path
