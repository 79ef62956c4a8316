"""
Tree Builder Package

Rebuilds a nested, ordered tree from flat nodes whose sibling order is
encoded by previousSiblingId.

Phases:
1. builder.index: lookup tables (build_index)
2. builder.terminal: last-node detection (mark_terminal_nodes)
3. builder.assembler: backward walk and attachment (assemble_tree)

Main entry points:
    >>> from node_tree.builder import build_tree_file
    >>> result = asyncio.run(build_tree_file("input/nodes.json", "rearranged-tree"))
"""

from .config import DuplicatePolicy, ReferencePolicy, TreeBuildConfig
from .diagnostics import IssueCollector, IssueKind, ReferenceIssue
from .errors import (
    DanglingReferenceError,
    DuplicateNodeError,
    InputParseError,
    SiblingCycleError,
    TreeBuildError,
    TreeIntegrityError,
)
from .index import TreeIndex, build_index
from .terminal import mark_terminal_nodes
from .assembler import assemble_tree, check_all_placed
from .pipeline import BuildResult, build_tree, build_tree_from_data, build_tree_file

__all__ = [
    # Configuration
    "TreeBuildConfig",
    "DuplicatePolicy",
    "ReferencePolicy",
    # Diagnostics
    "IssueCollector",
    "IssueKind",
    "ReferenceIssue",
    # Errors
    "TreeBuildError",
    "InputParseError",
    "DuplicateNodeError",
    "SiblingCycleError",
    "TreeIntegrityError",
    "DanglingReferenceError",
    # Phases
    "TreeIndex",
    "build_index",
    "mark_terminal_nodes",
    "assemble_tree",
    "check_all_placed",
    # Pipeline
    "BuildResult",
    "build_tree",
    "build_tree_from_data",
    "build_tree_file",
]
