"""
Core Models Package

Node dataclasses shared by the index, the terminal-node detector and the
tree assembler.

**DESIGN RATIONALE:**

Input records are frozen; only the working ``NodeRecord`` is mutable, and
only its ``children`` list is ever written (once, by the assembler).
Assembly flags live in ``NodeMeta`` so records serialize without them.
"""

from .nodes import NodeInput, NodeRecord, NodeMeta

__all__ = [
    "NodeInput",
    "NodeRecord",
    "NodeMeta",
]
