"""
Module: nodes

Purpose:
    Provides the node dataclasses shared by every phase of tree building.
    NodeInput is the immutable flat record read from JSON, NodeRecord is
    the working tree node that owns its ordered children, and NodeMeta
    holds the per-node flags used while assembling sibling runs.

Key Classes:
    - NodeInput: Flat input record (nodeId, name, parentId, previousSiblingId)
    - NodeRecord: Input fields plus a mutable ordered ``children`` list
    - NodeMeta: Per-node assembly flags

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - builder.index: Creates NodeRecord/NodeMeta per input node
    - builder.assembler: Fills NodeRecord.children
    - core.utils.serialization: Parses NodeInput, serializes NodeRecord
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


# Wire field names
NODE_ID = "nodeId"
NAME = "name"
PARENT_ID = "parentId"
PREVIOUS_SIBLING_ID = "previousSiblingId"
CHILDREN = "children"

KNOWN_FIELDS = (NODE_ID, NAME, PARENT_ID, PREVIOUS_SIBLING_ID)


@dataclass(frozen=True)
class NodeInput:
    """
    Flat node record as read from the source file (immutable).

    Sibling order is encoded backwards: ``previous_sibling_id`` names the
    node immediately before this one under the same parent, or is None
    for the first child.

    Attributes:
        node_id: Unique identifier of the node
        name: Display name (None when the input omits it)
        parent_id: Identifier of the parent node, None for root-level nodes
        previous_sibling_id: Identifier of the preceding sibling, None for
            the first child
        extra: Any other input fields, carried through to the output

    Example:
        >>> node = NodeInput.from_dict({"nodeId": "2", "parentId": None, "previousSiblingId": "1"})
        >>> node.previous_sibling_id
        '1'
        >>> node.is_root_level
        True
    """

    node_id: str
    name: Optional[str] = None
    parent_id: Optional[str] = None
    previous_sibling_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_root_level(self) -> bool:
        """True when the node has no parent."""
        return self.parent_id is None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire form (without children)."""
        d: Dict[str, Any] = {NODE_ID: self.node_id}
        if self.name is not None:
            d[NAME] = self.name
        d[PARENT_ID] = self.parent_id
        d[PREVIOUS_SIBLING_ID] = self.previous_sibling_id
        d.update(self.extra)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> NodeInput:
        """
        Deserialize from the wire form.

        A missing ``parentId`` or ``previousSiblingId`` is treated as null.
        Unknown keys are kept in ``extra``; an input ``children`` key is
        dropped since children are always rebuilt.

        Args:
            data: Dict with at least a ``nodeId`` key

        Returns:
            NodeInput instance
        """
        extra = {
            key: value
            for key, value in data.items()
            if key not in KNOWN_FIELDS and key != CHILDREN
        }
        return cls(
            node_id=data[NODE_ID],
            name=data.get(NAME),
            parent_id=data.get(PARENT_ID),
            previous_sibling_id=data.get(PREVIOUS_SIBLING_ID),
            extra=extra,
        )


@dataclass(eq=False)
class NodeRecord:
    """
    Working tree node: the input fields plus ordered children.

    Records are owned by the index; the assembled tree holds references
    to the same objects. ``children`` is assigned once by the assembler.
    Equality is identity so that the same record is never confused with
    a duplicate carrying the same fields.

    The tree structure is:
        root "1"
        ├── "1.1"
        │   └── "1.1.1" [leaf]
        └── "1.2" [leaf]
    """

    node_id: str
    name: Optional[str] = None
    parent_id: Optional[str] = None
    previous_sibling_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    children: List[NodeRecord] = field(default_factory=list)

    @classmethod
    def from_input(cls, node: NodeInput) -> NodeRecord:
        """Create a record with empty children from an input node."""
        return cls(
            node_id=node.node_id,
            name=node.name,
            parent_id=node.parent_id,
            previous_sibling_id=node.previous_sibling_id,
            extra=dict(node.extra),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Traversal
    # ─────────────────────────────────────────────────────────────────────────

    def iter_all(self) -> Iterator[NodeRecord]:
        """
        Iterate over this node and all descendants (pre-order).

        Yields:
            This node, then all descendants in tree order
        """
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the wire form, children nested recursively.

        Returns:
            Dict with the input fields, extra fields and a ``children`` list
        """
        d: Dict[str, Any] = {NODE_ID: self.node_id}
        if self.name is not None:
            d[NAME] = self.name
        d[PARENT_ID] = self.parent_id
        d[PREVIOUS_SIBLING_ID] = self.previous_sibling_id
        d.update(self.extra)
        d[CHILDREN] = [child.to_dict() for child in self.children]
        return d


@dataclass
class NodeMeta:
    """
    Assembly flags for one node, keyed by node id in the index.

    Attributes:
        is_last_node: True until some other node names this one as its
            previous sibling
        children_are_sorted: True once this node's children run has been
            assembled
        has_been_placed: True once this node has been put into a run
    """

    is_last_node: bool = True
    children_are_sorted: bool = False
    has_been_placed: bool = False
