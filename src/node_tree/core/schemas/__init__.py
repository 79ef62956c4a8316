"""
Schemas Package

JSON schema definition for the flat node array and validation utilities.
"""

from .validator import (
    validate_nodes,
    ValidationError,
    NODE_SCHEMA_NAME,
)

__all__ = [
    "validate_nodes",
    "ValidationError",
    "NODE_SCHEMA_NAME",
]
