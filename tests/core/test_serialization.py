"""
Unit Tests for Serialization Utilities

Tests for loading node files and writing tree files.
"""

import json
from pathlib import Path

import pytest

from node_tree.core.models.nodes import NodeInput, NodeRecord
from node_tree.core.utils.serialization import (
    load_nodes_json,
    parse_nodes,
    serialize_tree,
    output_path_for,
    save_tree_json,
)
from node_tree.core.schemas.validator import ValidationError


class TestLoadAndParse:
    """Tests for reading the flat node list."""

    def test_load_when_file_missing_then_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_nodes_json(tmp_path / "missing.json")

    def test_load_when_malformed_then_raises_decode_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{\"nodeId\": ", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            load_nodes_json(path)

    def test_load_then_parse_returns_nodes_in_order(self, write_nodes, sample_records):
        path = write_nodes(sample_records)

        nodes = parse_nodes(load_nodes_json(path))

        assert [n.node_id for n in nodes] == ["A3", "B", "A1", "B1", "A", "A2"]
        assert all(isinstance(n, NodeInput) for n in nodes)

    def test_parse_when_invalid_then_raises(self):
        with pytest.raises(ValidationError):
            parse_nodes([{"name": "no id"}])

    def test_parse_when_validation_disabled_then_skips_checks(self):
        """With validate=False only the nodeId key is needed."""
        nodes = parse_nodes([{"nodeId": 5, "parentId": 1}], validate=False)

        assert nodes[0].node_id == 5


class TestOutput:
    """Tests for writing the nested tree."""

    def test_output_path_for_appends_suffix(self):
        assert output_path_for("out/tree") == Path("out/tree.json")
        assert output_path_for("tree.json") == Path("tree.json.json")
        assert output_path_for(Path("a/b"), ".tree") == Path("a/b.tree")

    def test_serialize_tree_when_empty_then_empty_list(self):
        assert serialize_tree([]) == []

    def test_save_then_pretty_printed_two_space(self, tmp_path):
        root = NodeRecord("1", name="One", children=[NodeRecord("2", parent_id="1")])
        path = tmp_path / "tree.json"

        written = save_tree_json(serialize_tree([root]), path)

        text = written.read_text(encoding="utf-8")
        assert text.startswith("[\n  {\n    \"nodeId\": \"1\"")
        assert json.loads(text)[0]["children"][0]["nodeId"] == "2"

    def test_save_then_no_temp_files_left(self, tmp_path):
        save_tree_json([], tmp_path / "tree.json")

        assert [p.name for p in tmp_path.iterdir()] == ["tree.json"]

    def test_save_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "tree.json"

        save_tree_json([], path)

        assert json.loads(path.read_text(encoding="utf-8")) == []

    def test_save_when_payload_not_serializable_then_existing_file_untouched(self, tmp_path):
        """A failed write leaves the previous file and no temp file."""
        path = tmp_path / "tree.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(TypeError):
            save_tree_json([{"nodeId": object()}], path)

        assert path.read_text(encoding="utf-8") == "[]"
        assert [p.name for p in tmp_path.iterdir()] == ["tree.json"]

    def test_save_when_lone_surrogate_then_written_as_escape(self, tmp_path):
        """Strings json.loads accepts can always be written back."""
        path = tmp_path / "tree.json"

        save_tree_json([{"nodeId": "1", "name": "\ud800", "children": []}], path)

        text = path.read_text(encoding="utf-8")
        assert "\\ud800" in text
        assert json.loads(text)[0]["name"] == "\ud800"

    def test_save_when_replace_fails_then_temp_file_removed(self, tmp_path):
        # A non-empty directory at the target cannot be replaced by a file
        path = tmp_path / "tree.json"
        path.mkdir()
        (path / "keep").write_text("x", encoding="utf-8")

        with pytest.raises(OSError):
            save_tree_json([], path)

        assert [p.name for p in tmp_path.iterdir()] == ["tree.json"]
        assert (path / "keep").read_text(encoding="utf-8") == "x"
