import json
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import node_tree
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from node_tree.core.models import NodeInput


def node(node_id, parent_id=None, previous_sibling_id=None, name=None, **extra):
    """Shorthand for building a NodeInput in tests."""
    return NodeInput(
        node_id=node_id,
        name=name if name is not None else f"Node {node_id}",
        parent_id=parent_id,
        previous_sibling_id=previous_sibling_id,
        extra=extra,
    )


# Common test fixtures
@pytest.fixture
def make_node():
    """Return the NodeInput shorthand factory."""
    return node


@pytest.fixture
def sample_records() -> list:
    """Flat wire records for a small two-level tree, deliberately shuffled.

    Expected tree:
        A
        ├── A1
        ├── A2
        └── A3
        B
        └── B1
    """
    return [
        {"nodeId": "A3", "name": "A3", "parentId": "A", "previousSiblingId": "A2"},
        {"nodeId": "B", "name": "B", "parentId": None, "previousSiblingId": "A"},
        {"nodeId": "A1", "name": "A1", "parentId": "A", "previousSiblingId": None},
        {"nodeId": "B1", "name": "B1", "parentId": "B", "previousSiblingId": None},
        {"nodeId": "A", "name": "A", "parentId": None, "previousSiblingId": None},
        {"nodeId": "A2", "name": "A2", "parentId": "A", "previousSiblingId": "A1"},
    ]


@pytest.fixture
def write_nodes(tmp_path: Path):
    """Write a payload to a JSON file in tmp_path and return its path."""
    def _write(payload, name: str = "nodes.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
