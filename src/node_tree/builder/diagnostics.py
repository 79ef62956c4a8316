"""
Module: builder.diagnostics

Captures structural issues found while building a tree (dangling
references, nodes that could not be placed, and similar) and applies the
configured ReferencePolicy to each one as it is recorded.

Structure:
- Each issue names the node it was found on and, where relevant, the
  referenced node id (``target``)
- ``IssueCollector`` keeps issues in discovery order and logs or raises
  according to the policy
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .config import ReferencePolicy
from .errors import DanglingReferenceError, TreeIntegrityError

logger = logging.getLogger(__name__)


class IssueKind(str, Enum):
    """Type of structural issue."""
    DANGLING_PARENT = "dangling_parent"
    DANGLING_SIBLING = "dangling_sibling"
    DUPLICATE_NODE = "duplicate_node"
    COMPETING_TERMINAL = "competing_terminal"
    SHARED_CHAIN = "shared_chain"
    PARENT_MISMATCH = "parent_mismatch"
    UNPLACED_NODE = "unplaced_node"

    def __str__(self) -> str:
        return self.value


_DANGLING_KINDS = (IssueKind.DANGLING_PARENT, IssueKind.DANGLING_SIBLING)


@dataclass(frozen=True)
class ReferenceIssue:
    """
    A single structural issue.

    Fields:
    - node_id: Node the issue was found on
    - target: Referenced node id, e.g. the missing parent
    """
    kind: IssueKind
    node_id: str
    message: str
    target: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "kind": str(self.kind),
            "node_id": self.node_id,
            "message": self.message,
        }
        if self.target is not None:
            d["target"] = self.target
        return d


class IssueCollector:
    """
    Collector for structural issues.

    Under ReferencePolicy.STRICT the first issue recorded raises; the
    issue is still collected first. Duplicate nodes are only ever
    recorded under DuplicatePolicy.LAST_WINS and never raise here.
    """

    def __init__(self, policy: ReferencePolicy = ReferencePolicy.WARN):
        self.policy = ReferencePolicy(policy)
        self._issues: List[ReferenceIssue] = []

    def add_dangling_parent(self, node_id: str, parent_id: str) -> ReferenceIssue:
        """Record a parentId that names a missing node."""
        return self._record(ReferenceIssue(
            kind=IssueKind.DANGLING_PARENT,
            node_id=node_id,
            message=f"Node {node_id!r} references missing parent {parent_id!r}; placed at the top level after the root nodes",
            target=parent_id,
        ))

    def add_dangling_sibling(self, node_id: str, sibling_id: str) -> ReferenceIssue:
        """Record a previousSiblingId that names a missing node."""
        return self._record(ReferenceIssue(
            kind=IssueKind.DANGLING_SIBLING,
            node_id=node_id,
            message=(
                f"Node {node_id!r} references missing previous sibling {sibling_id!r}; "
                "treated as first child"
            ),
            target=sibling_id,
        ))

    def add_duplicate(self, node_id: str, first_index: int, duplicate_index: int) -> ReferenceIssue:
        """Record a duplicate nodeId that replaced an earlier record."""
        issue = ReferenceIssue(
            kind=IssueKind.DUPLICATE_NODE,
            node_id=node_id,
            message=(
                f"Duplicate nodeId {node_id!r} at input position {duplicate_index} "
                f"replaces the record at position {first_index}"
            ),
        )
        self._issues.append(issue)
        logger.warning(issue.message)
        return issue

    def add_competing_terminal(self, node_id: str, parent_id: Optional[str]) -> ReferenceIssue:
        """Record a second last-node in a sibling group whose run was dropped."""
        group = f"parent {parent_id!r}" if parent_id is not None else "the root list"
        return self._record(ReferenceIssue(
            kind=IssueKind.COMPETING_TERMINAL,
            node_id=node_id,
            message=(
                f"Node {node_id!r} ends a second sibling run under {group}; "
                "the run was not attached"
            ),
            target=parent_id,
        ))

    def add_shared_chain(self, node_id: str, placed_id: str) -> ReferenceIssue:
        """Record a sibling chain that runs into a node placed by another run."""
        return self._record(ReferenceIssue(
            kind=IssueKind.SHARED_CHAIN,
            node_id=node_id,
            message=(
                f"Node {node_id!r} points to previous sibling {placed_id!r}, "
                "which was already placed by another run"
            ),
            target=placed_id,
        ))

    def add_parent_mismatch(self, node_id: str, parent_id: Optional[str], run_parent_id: Optional[str]) -> ReferenceIssue:
        """Record a chain member whose parentId differs from the run's parent."""
        return self._record(ReferenceIssue(
            kind=IssueKind.PARENT_MISMATCH,
            node_id=node_id,
            message=(
                f"Node {node_id!r} has parent {parent_id!r} but sits in the sibling run "
                f"of parent {run_parent_id!r}; placed with the run"
            ),
            target=run_parent_id,
        ))

    def add_unplaced(self, node_id: str) -> ReferenceIssue:
        """Record a node that is missing from the assembled tree."""
        return self._record(ReferenceIssue(
            kind=IssueKind.UNPLACED_NODE,
            node_id=node_id,
            message=f"Node {node_id!r} could not be placed in the tree",
        ))

    def _record(self, issue: ReferenceIssue) -> ReferenceIssue:
        self._issues.append(issue)
        if self.policy == ReferencePolicy.STRICT:
            if issue.kind in _DANGLING_KINDS:
                raise DanglingReferenceError(issue)
            raise TreeIntegrityError(issue)
        if self.policy == ReferencePolicy.WARN:
            logger.warning(issue.message)
        else:
            logger.debug(issue.message)
        return issue

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def issues(self) -> List[ReferenceIssue]:
        return list(self._issues)

    @property
    def issue_count(self) -> int:
        return len(self._issues)

    def by_kind(self, kind: IssueKind) -> List[ReferenceIssue]:
        """Issues of one kind, in discovery order."""
        return [issue for issue in self._issues if issue.kind == kind]

    def summary_by_kind(self) -> Dict[str, int]:
        summary: Dict[str, int] = {}
        for issue in self._issues:
            key = str(issue.kind)
            summary[key] = summary.get(key, 0) + 1
        return summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_issues": len(self._issues),
            "summary_by_kind": self.summary_by_kind(),
            "issues": [issue.to_dict() for issue in self._issues],
        }
