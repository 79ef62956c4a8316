"""
Module: builder.terminal

Purpose:
    Phase 2 of tree building. Marks which nodes end their sibling run.

    Every node starts out as the last node of its run. Any node named as
    another node's previousSiblingId is not last, so one pass over the
    index eliminates all but the terminal nodes:

        node1 <- node2 <- node3 <- node4

    Only node4 stays terminal, and node4 alone is enough to walk the
    whole run backwards.

Key Functions:
    - mark_terminal_nodes(): Clear is_last_node on every referenced sibling
      and report references to missing nodes

Used By:
    - builder.pipeline
"""

from __future__ import annotations

import logging

from .index import TreeIndex

logger = logging.getLogger(__name__)


def mark_terminal_nodes(index: TreeIndex) -> int:
    """
    Clear ``is_last_node`` on every node referenced as a previous sibling.

    A previousSiblingId naming a missing node leaves all flags alone and
    is reported as a dangling sibling. Every parentId is checked in the
    same pass, so a missing parent is reported for each node that names
    it, terminal or not.

    Args:
        index: Index from ``build_index()``

    Returns:
        Number of terminal nodes remaining
    """
    for record in index.records.values():
        if record.parent_id is not None and record.parent_id not in index:
            index.diagnostics.add_dangling_parent(record.node_id, record.parent_id)

        sibling_id = record.previous_sibling_id
        if sibling_id is None:
            continue
        sibling_meta = index.meta.get(sibling_id)
        if sibling_meta is None:
            index.diagnostics.add_dangling_sibling(record.node_id, sibling_id)
            continue
        sibling_meta.is_last_node = False

    terminal_count = sum(1 for meta in index.meta.values() if meta.is_last_node)
    logger.debug(f"Found {terminal_count} terminal nodes among {len(index)}")
    return terminal_count
