"""
Tests for the node_tree command-line wrapper.
"""
import json

from node_tree.__main__ import main


def test_main_when_valid_then_writes_and_returns_zero(write_nodes, tmp_path, capsys):
    source = write_nodes([
        {"nodeId": "2", "parentId": None, "previousSiblingId": "1"},
        {"nodeId": "1", "parentId": None, "previousSiblingId": None},
    ])

    code = main([str(source), str(tmp_path / "tree")])

    assert code == 0
    written = json.loads((tmp_path / "tree.json").read_text(encoding="utf-8"))
    assert [n["nodeId"] for n in written] == ["1", "2"]
    assert str(tmp_path / "tree.json") in capsys.readouterr().out


def test_main_when_invalid_then_lists_errors(write_nodes, tmp_path, capsys):
    source = write_nodes([{"name": "no id"}, {"nodeId": 3}])

    code = main([str(source), str(tmp_path / "tree")])

    assert code == 1
    err = capsys.readouterr().err
    assert "[0].nodeId: missing required field" in err
    assert "[1].nodeId" in err
    assert not (tmp_path / "tree.json").exists()


def test_main_when_duplicates_then_fails_unless_allowed(write_nodes, tmp_path):
    source = write_nodes([{"nodeId": "1"}, {"nodeId": "1"}])

    assert main([str(source), str(tmp_path / "tree")]) == 1
    assert main([str(source), str(tmp_path / "tree"), "--allow-duplicates"]) == 0


def test_main_when_strict_references_then_fails(write_nodes, tmp_path, capsys):
    source = write_nodes([{"nodeId": "1", "parentId": "ghost"}])

    code = main([str(source), str(tmp_path / "tree"), "--references", "strict"])

    assert code == 1
    assert "ghost" in capsys.readouterr().err


def test_main_when_source_missing_then_fails(tmp_path, capsys):
    code = main([str(tmp_path / "missing.json"), str(tmp_path / "tree")])

    assert code == 1
    assert "Build failed" in capsys.readouterr().err
