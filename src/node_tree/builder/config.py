"""
Module: builder.config

Purpose:
    Configuration for tree building. Immutable configuration with
    validation on construction.

Key Classes:
    - TreeBuildConfig: Policies and output settings for one build
    - DuplicatePolicy: What to do with a repeated nodeId
    - ReferencePolicy: How to treat dangling references and other
      structural issues

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - builder.index: Duplicate and reference policies
    - builder.pipeline: Validation and output settings
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DuplicatePolicy(str, Enum):
    """Handling of a nodeId that appears more than once."""
    REJECT = "reject"        # Raise DuplicateNodeError
    LAST_WINS = "last_wins"  # Later record replaces the earlier one, with a warning

    def __str__(self) -> str:
        return self.value


class ReferencePolicy(str, Enum):
    """Handling of dangling references and other structural issues."""
    IGNORE = "ignore"  # Collect the issue, log at DEBUG
    WARN = "warn"      # Collect the issue, log at WARNING
    STRICT = "strict"  # Raise TreeIntegrityError

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TreeBuildConfig:
    """
    Configuration for building a tree (immutable).

    Sibling cycles are always fatal and are not configurable.

    Attributes:
        duplicate_policy: Handling of repeated nodeIds (default REJECT)
        reference_policy: Handling of dangling references, competing
            terminal nodes and unplaced nodes (default WARN)
        validate_schema: Validate the input payload before parsing
        strict_schema: Also validate against the JSON schema file
        output_suffix: Suffix appended to the destination path
        indent: Indentation of the output JSON

    Example:
        >>> config = TreeBuildConfig(reference_policy=ReferencePolicy.STRICT)
        >>> config.output_suffix
        '.json'
    """

    duplicate_policy: DuplicatePolicy = DuplicatePolicy.REJECT
    reference_policy: ReferencePolicy = ReferencePolicy.WARN
    validate_schema: bool = True
    strict_schema: bool = True
    output_suffix: str = ".json"
    indent: int = 2

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        # Accept plain strings for the policies
        object.__setattr__(self, "duplicate_policy", DuplicatePolicy(self.duplicate_policy))
        object.__setattr__(self, "reference_policy", ReferencePolicy(self.reference_policy))

        if not self.output_suffix.startswith("."):
            raise ValueError(f"output_suffix must start with '.': {self.output_suffix!r}")
        if self.indent < 0:
            raise ValueError(f"indent must be non-negative: {self.indent}")
