"""
Tests for builder.index

Test Coverage:
- build_index(): record and metadata tables
- Duplicate nodeId handling under both policies
"""
import pytest

from node_tree.builder.config import DuplicatePolicy, TreeBuildConfig
from node_tree.builder.diagnostics import IssueKind
from node_tree.builder.errors import DuplicateNodeError
from node_tree.builder.index import TreeIndex, build_index


def test_build_index_creates_record_and_meta_per_node(make_node):
    """Each node gets a record with empty children and default meta."""
    # Arrange
    nodes = [make_node("1"), make_node("2", previous_sibling_id="1")]

    # Act
    index = build_index(nodes)

    # Assert
    assert len(index) == 2
    assert "1" in index and "2" in index
    assert index.records["2"].previous_sibling_id == "1"
    assert all(record.children == [] for record in index.records.values())
    assert all(meta.is_last_node and not meta.children_are_sorted for meta in index.meta.values())
    assert index.root_tree_is_sorted is False
    assert index.roots == []


def test_build_index_when_empty_then_empty_index():
    index = build_index([])

    assert len(index) == 0
    assert isinstance(index, TreeIndex)


def test_build_index_preserves_input_order(make_node):
    nodes = [make_node(node_id) for node_id in ("c", "a", "b")]

    index = build_index(nodes)

    assert list(index.records) == ["c", "a", "b"]


def test_get_when_none_or_unknown_then_none(make_node):
    index = build_index([make_node("1")])

    assert index.get(None) is None
    assert index.get("missing") is None
    assert index.get("1").node_id == "1"


def test_build_index_when_duplicate_and_reject_then_raises(make_node):
    """Duplicates are rejected by default."""
    nodes = [make_node("1"), make_node("2"), make_node("1", name="again")]

    with pytest.raises(DuplicateNodeError) as exc_info:
        build_index(nodes)

    assert exc_info.value.node_id == "1"
    assert exc_info.value.first_index == 0
    assert exc_info.value.duplicate_index == 2


def test_build_index_when_duplicate_and_last_wins_then_replaces(make_node):
    """Under LAST_WINS the later record replaces the earlier one."""
    config = TreeBuildConfig(duplicate_policy=DuplicatePolicy.LAST_WINS)
    nodes = [make_node("1", name="first"), make_node("2"), make_node("1", name="second")]

    index = build_index(nodes, config)

    assert len(index) == 2
    assert index.records["1"].name == "second"
    # Position of the first occurrence is kept
    assert list(index.records) == ["1", "2"]
    issues = index.diagnostics.by_kind(IssueKind.DUPLICATE_NODE)
    assert [issue.node_id for issue in issues] == ["1"]
