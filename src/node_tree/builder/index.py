"""
Module: builder.index

Purpose:
    Phase 1 of tree building. Materializes the O(1)-lookup tables that the
    later phases read and write: node id -> NodeRecord and node id ->
    NodeMeta, bundled with the root-list state into one TreeIndex.

Key Classes:
    - TreeIndex: Context object threaded through every phase

Key Functions:
    - build_index(): Build the index from flat input nodes

Dependencies:
    - core.models: NodeInput, NodeRecord, NodeMeta

Used By:
    - builder.terminal, builder.assembler, builder.pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from node_tree.core.models import NodeInput, NodeMeta, NodeRecord

from .config import DuplicatePolicy, TreeBuildConfig
from .diagnostics import IssueCollector
from .errors import DuplicateNodeError

logger = logging.getLogger(__name__)


@dataclass
class TreeIndex:
    """
    Lookup tables and assembly state for one build.

    The index owns every NodeRecord. The assembled tree (``roots`` and
    every ``children`` list) holds references to these same records.

    Attributes:
        records: node id -> NodeRecord, in first-seen input order
        meta: node id -> NodeMeta, same keys as ``records``
        root_tree_is_sorted: True once the parentId-null run has been assembled
        root_run: The assembled run of nodes with a null parentId
        orphan_runs: missing parent id -> assembled run of the nodes that
            name it; one run per missing id, appended after ``root_run``
        roots: Assembled root-level records (``root_run`` then orphan runs)
        config: Build configuration
        diagnostics: Collector for structural issues
    """
    records: Dict[str, NodeRecord] = field(default_factory=dict)
    meta: Dict[str, NodeMeta] = field(default_factory=dict)
    root_tree_is_sorted: bool = False
    root_run: List[NodeRecord] = field(default_factory=list)
    orphan_runs: Dict[str, List[NodeRecord]] = field(default_factory=dict)
    roots: List[NodeRecord] = field(default_factory=list)
    config: TreeBuildConfig = field(default_factory=TreeBuildConfig)
    diagnostics: IssueCollector = field(default_factory=IssueCollector)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.records

    def get(self, node_id: Optional[str]) -> Optional[NodeRecord]:
        """Return the record for ``node_id``, or None if absent or unknown."""
        if node_id is None:
            return None
        return self.records.get(node_id)

    def meta_for(self, record: NodeRecord) -> NodeMeta:
        return self.meta[record.node_id]


def build_index(
    nodes: Iterable[NodeInput],
    config: Optional[TreeBuildConfig] = None,
    diagnostics: Optional[IssueCollector] = None,
) -> TreeIndex:
    """
    Build the record and metadata tables in one pass.

    Every record starts with no children; every NodeMeta starts as
    ``is_last_node=True, children_are_sorted=False``.

    Args:
        nodes: Flat input nodes
        config: Build configuration (defaults to TreeBuildConfig())
        diagnostics: Issue collector (defaults to one using the config's
            reference policy)

    Returns:
        Populated TreeIndex

    Raises:
        DuplicateNodeError: If a nodeId repeats and the duplicate policy
            is REJECT

    Example:
        >>> index = build_index([NodeInput("1"), NodeInput("2", previous_sibling_id="1")])
        >>> len(index)
        2
    """
    config = config or TreeBuildConfig()
    if diagnostics is None:
        diagnostics = IssueCollector(config.reference_policy)
    index = TreeIndex(config=config, diagnostics=diagnostics)

    positions: Dict[str, int] = {}
    for position, node in enumerate(nodes):
        if node.node_id in positions:
            first = positions[node.node_id]
            if config.duplicate_policy == DuplicatePolicy.REJECT:
                raise DuplicateNodeError(node.node_id, first, position)
            diagnostics.add_duplicate(node.node_id, first, position)
        positions[node.node_id] = position

        index.records[node.node_id] = NodeRecord.from_input(node)
        index.meta[node.node_id] = NodeMeta()

    logger.debug(f"Indexed {len(index)} nodes")
    return index
