"""
Module: builder.assembler

Purpose:
    Phase 3 of tree building. Walks backwards from every terminal node to
    rebuild its ordered sibling run, then attaches the run to the parent's
    ``children`` (or makes it the root list).

    The walk only follows previousSiblingId links, so each run comes out
    right-to-left and is prepended into place. Every node is walked at most
    once across the whole phase, which keeps assembly linear.

Key Functions:
    - assemble_tree(): Build all sibling runs and return the root list
    - check_all_placed(): Verify every node is reachable from the roots
    - find_sibling_cycle(): Locate a previousSiblingId cycle

Dependencies:
    - collections.deque: O(1) prepend during the backward walk

Used By:
    - builder.pipeline
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, List, Optional, Set

from node_tree.core.models import NodeRecord

from .errors import SiblingCycleError
from .index import TreeIndex

logger = logging.getLogger(__name__)


def assemble_tree(index: TreeIndex) -> List[NodeRecord]:
    """
    Assemble every sibling run and return the ordered root list.

    Only terminal nodes start a walk. A run is attached at most once per
    parent (``children_are_sorted``) and once for the root list
    (``root_tree_is_sorted``), so calling this again on the same index
    changes nothing and returns the same roots.

    Nodes whose parentId names a missing node are grouped by that id. Each
    group is assembled once and appended to the root list after the run of
    nodes with a null parentId, whatever the input order.

    Args:
        index: Index after ``mark_terminal_nodes()``

    Returns:
        Root-level records, each holding its ordered subtree

    Raises:
        SiblingCycleError: If a walk revisits a node

    Example:
        >>> index = build_index(parse_nodes(data))
        >>> mark_terminal_nodes(index)
        >>> [node.node_id for node in assemble_tree(index)]
        ['1', '2']
    """
    runs = 0
    for node_id, record in index.records.items():
        meta = index.meta[node_id]
        # Only last nodes start a walk; placed ones belong to an earlier run
        if not meta.is_last_node or meta.has_been_placed:
            continue

        parent = index.get(record.parent_id)
        if parent is not None:
            parent_meta = index.meta_for(parent)
            if parent_meta.children_are_sorted:
                index.diagnostics.add_competing_terminal(node_id, parent.node_id)
                continue
        elif record.parent_id is not None:
            # Missing parent: the run goes to the top level after the real roots
            if record.parent_id in index.orphan_runs:
                index.diagnostics.add_competing_terminal(node_id, record.parent_id)
                continue
        elif index.root_tree_is_sorted:
            index.diagnostics.add_competing_terminal(node_id, None)
            continue

        run = _walk_sibling_run(index, record)
        runs += 1

        if parent is not None:
            parent.children = run
            parent_meta.children_are_sorted = True
        elif record.parent_id is not None:
            index.orphan_runs[record.parent_id] = run
        else:
            index.root_run = run
            index.root_tree_is_sorted = True

    index.roots = list(index.root_run)
    for orphan_run in index.orphan_runs.values():
        index.roots.extend(orphan_run)

    logger.debug(
        f"Assembled {runs} sibling runs, {len(index.roots)} root nodes "
        f"({len(index.orphan_runs)} orphaned groups)"
    )
    return index.roots


def _walk_sibling_run(index: TreeIndex, terminal: NodeRecord) -> List[NodeRecord]:
    """
    Collect the sibling run ending at ``terminal``, left to right.

    The walk stops at a null or unknown previousSiblingId. Reaching a node
    already placed by another run stops the walk as well.
    """
    run: deque[NodeRecord] = deque()
    walked: List[str] = []
    seen: Set[str] = set()

    current: Optional[NodeRecord] = terminal
    while current is not None:
        if current.node_id in seen:
            raise SiblingCycleError(walked[walked.index(current.node_id):])

        meta = index.meta_for(current)
        if meta.has_been_placed:
            index.diagnostics.add_shared_chain(walked[-1], current.node_id)
            break

        if current.parent_id != terminal.parent_id:
            index.diagnostics.add_parent_mismatch(
                current.node_id, current.parent_id, terminal.parent_id
            )

        run.appendleft(current)
        walked.append(current.node_id)
        seen.add(current.node_id)
        meta.has_been_placed = True

        current = index.get(current.previous_sibling_id)

    return list(run)


def check_all_placed(index: TreeIndex) -> List[str]:
    """
    Verify that every indexed node is reachable from the root list.

    Nodes caught in a previousSiblingId cycle never have a terminal node,
    so no walk reaches them; they are found here instead.

    Args:
        index: Index after ``assemble_tree()``

    Returns:
        Ids of unplaced nodes (each also recorded as an issue)

    Raises:
        SiblingCycleError: If the unplaced nodes contain a sibling cycle
    """
    reachable: Set[str] = {node.node_id for root in index.roots for node in root.iter_all()}

    unplaced = [node_id for node_id in index.records if node_id not in reachable]
    if not unplaced:
        return []

    cycle = find_sibling_cycle(index, unplaced)
    if cycle is not None:
        raise SiblingCycleError(cycle)

    for node_id in unplaced:
        index.diagnostics.add_unplaced(node_id)
    return unplaced


def find_sibling_cycle(index: TreeIndex, start_ids: Iterable[str]) -> Optional[List[str]]:
    """
    Follow previousSiblingId links from each start id and return the first
    cycle found, in walk order, or None.

    Each node is followed at most once over all start ids.
    """
    done: Set[str] = set()
    for start in start_ids:
        path: List[str] = []
        position = {}
        current: Optional[str] = start
        while current is not None and current in index.records and current not in done:
            if current in position:
                return path[position[current]:]
            position[current] = len(path)
            path.append(current)
            current = index.records[current].previous_sibling_id
        done.update(path)
    return None
