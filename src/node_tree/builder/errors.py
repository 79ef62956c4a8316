"""
Module: builder.errors

Purpose:
    Exception types raised while building a tree. Every fault during
    read, parse or transform aborts the build before anything is written.

Key Classes:
    - TreeBuildError: Base class for build faults
    - InputParseError: Source file is not valid JSON
    - DuplicateNodeError: Two input records share a nodeId
    - SiblingCycleError: previousSiblingId references form a cycle
    - TreeIntegrityError: Structural issue raised under ReferencePolicy.STRICT
    - DanglingReferenceError: Reference to a nodeId that doesn't exist

Used By:
    - builder.index, builder.assembler, builder.pipeline
"""

from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import ReferenceIssue


class TreeBuildError(Exception):
    """Error during tree building."""
    pass


class InputParseError(TreeBuildError):
    """Source file could not be parsed as JSON."""
    pass


class DuplicateNodeError(TreeBuildError):
    """Raised when a nodeId appears more than once in the input."""

    def __init__(self, node_id: str, first_index: int, duplicate_index: int):
        super().__init__(
            f"Duplicate nodeId {node_id!r} at input positions {first_index} and {duplicate_index}"
        )
        self.node_id = node_id
        self.first_index = first_index
        self.duplicate_index = duplicate_index


class SiblingCycleError(TreeBuildError):
    """Raised when previousSiblingId references loop back on themselves."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = tuple(cycle)
        chain = " -> ".join(self.cycle + self.cycle[:1])
        super().__init__(f"Cyclic previousSiblingId chain: {chain}")


class TreeIntegrityError(TreeBuildError):
    """Raised for a structural issue when references are checked strictly."""

    def __init__(self, issue: ReferenceIssue):
        super().__init__(issue.message)
        self.issue = issue

    @property
    def node_id(self) -> str:
        return self.issue.node_id

    @property
    def target(self) -> Optional[str]:
        return self.issue.target


class DanglingReferenceError(TreeIntegrityError):
    """Raised when parentId or previousSiblingId names a missing node."""
    pass
