"""
node_tree Core Package

Shared data models, input validation and JSON serialization used by the
tree builder.
"""

from .models import NodeInput, NodeRecord, NodeMeta

__all__ = [
    "NodeInput",
    "NodeRecord",
    "NodeMeta",
]
