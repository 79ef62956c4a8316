"""
Utils Package

Serialization and file helpers.
"""

from .serialization import (
    load_nodes_json,
    parse_nodes,
    serialize_tree,
    output_path_for,
    save_tree_json,
)

__all__ = [
    "load_nodes_json",
    "parse_nodes",
    "serialize_tree",
    "output_path_for",
    "save_tree_json",
]
