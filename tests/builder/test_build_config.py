"""
Tests for builder.config

Test Coverage:
- TreeBuildConfig defaults and validation
- Policy coercion from plain strings
"""
import pytest

from node_tree.builder.config import DuplicatePolicy, ReferencePolicy, TreeBuildConfig


def test_defaults():
    config = TreeBuildConfig()

    assert config.duplicate_policy == DuplicatePolicy.REJECT
    assert config.reference_policy == ReferencePolicy.WARN
    assert config.validate_schema is True
    assert config.strict_schema is True
    assert config.output_suffix == ".json"
    assert config.indent == 2


def test_policies_accept_strings():
    config = TreeBuildConfig(duplicate_policy="last_wins", reference_policy="ignore")

    assert config.duplicate_policy is DuplicatePolicy.LAST_WINS
    assert config.reference_policy is ReferencePolicy.IGNORE
    assert str(config.reference_policy) == "ignore"


def test_unknown_policy_raises():
    with pytest.raises(ValueError):
        TreeBuildConfig(reference_policy="loud")


def test_suffix_without_dot_raises():
    with pytest.raises(ValueError, match="output_suffix"):
        TreeBuildConfig(output_suffix="json")


def test_negative_indent_raises():
    with pytest.raises(ValueError, match="indent"):
        TreeBuildConfig(indent=-1)


def test_frozen():
    config = TreeBuildConfig()
    with pytest.raises(AttributeError):
        config.indent = 4
