"""
Module: builder.pipeline

Purpose:
    Runs a complete build: read the flat node file, rebuild the tree and
    write the nested result.

    Pipeline:
    1. Read and parse the source JSON (off the event loop)
    2. Validate and convert records to NodeInput
    3. Build the index (phase 1)
    4. Mark terminal nodes (phase 2)
    5. Assemble sibling runs (phase 3) and check every node was placed
    6. Write ``<destination><suffix>`` atomically (off the event loop)

    Any fault in steps 1-5 aborts before anything is written.

Key Functions:
    - build_tree(): In-memory transform over NodeInput records
    - build_tree_from_data(): Validate raw JSON data, then build
    - build_tree_file(): Async file-to-file build

Used By:
    - node_tree.__main__: Command-line wrapper
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from node_tree.core.models import NodeInput, NodeRecord
from node_tree.core.utils.serialization import (
    load_nodes_json,
    output_path_for,
    parse_nodes,
    save_tree_json,
    serialize_tree,
)

from .assembler import assemble_tree, check_all_placed
from .config import TreeBuildConfig
from .diagnostics import ReferenceIssue
from .errors import InputParseError
from .index import build_index
from .terminal import mark_terminal_nodes
from .timing import PhaseTimings, timed_phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        roots: Ordered root-level records with nested children
        node_count: Number of distinct nodes indexed
        terminal_count: Number of terminal nodes found in phase 2
        issues: Structural issues recorded during the build
        timings: Phase name -> duration in seconds
        output_path: File written (None for in-memory builds)

    Example:
        >>> result = build_tree(nodes)
        >>> print(f"Built {result.node_count} nodes into {len(result.roots)} roots")
    """
    roots: Tuple[NodeRecord, ...]
    node_count: int
    terminal_count: int
    issues: Tuple[ReferenceIssue, ...]
    timings: Dict[str, float]
    output_path: Optional[Path] = None

    def to_payload(self) -> list:
        """Serialize the roots to the output JSON structure."""
        return serialize_tree(self.roots)


def build_tree(
    nodes: Iterable[NodeInput],
    config: Optional[TreeBuildConfig] = None,
) -> BuildResult:
    """
    Rebuild the nested tree from flat nodes, entirely in memory.

    Args:
        nodes: Flat input nodes
        config: Build configuration (defaults to TreeBuildConfig())

    Returns:
        BuildResult with the ordered roots

    Raises:
        DuplicateNodeError: Repeated nodeId under DuplicatePolicy.REJECT
        SiblingCycleError: Cyclic previousSiblingId chain
        TreeIntegrityError: Structural issue under ReferencePolicy.STRICT
    """
    config = config or TreeBuildConfig()
    timings = PhaseTimings()

    with timed_phase(timings, "index"):
        index = build_index(nodes, config)

    with timed_phase(timings, "terminal_nodes"):
        terminal_count = mark_terminal_nodes(index)

    with timed_phase(timings, "assemble"):
        roots = assemble_tree(index)
        check_all_placed(index)

    logger.debug(timings.summary())

    return BuildResult(
        roots=tuple(roots),
        node_count=len(index),
        terminal_count=terminal_count,
        issues=tuple(index.diagnostics.issues),
        timings=timings.to_dict(),
    )


def build_tree_from_data(
    data: Any,
    config: Optional[TreeBuildConfig] = None,
) -> BuildResult:
    """
    Validate a parsed JSON payload and build the tree from it.

    Raises:
        ValidationError: If the payload fails schema validation
    """
    config = config or TreeBuildConfig()
    nodes = parse_nodes(
        data,
        validate=config.validate_schema,
        strict=config.strict_schema,
    )
    return build_tree(nodes, config)


async def build_tree_file(
    source_path: Path | str,
    destination_path: Path | str,
    config: Optional[TreeBuildConfig] = None,
) -> BuildResult:
    """
    Read a flat node file, rebuild the tree and write it out.

    The output goes to ``destination_path`` with ``config.output_suffix``
    appended (``"out/tree"`` -> ``"out/tree.json"``). The write is awaited
    and atomic: when this returns, the file holds the complete tree.

    Args:
        source_path: JSON file holding the flat node array
        destination_path: Output path without the suffix
        config: Build configuration (defaults to TreeBuildConfig())

    Returns:
        BuildResult with ``output_path`` set

    Raises:
        FileNotFoundError / OSError: Source unreadable or output unwritable
        InputParseError: Source is not valid JSON
        ValidationError: Source fails schema validation
        TreeBuildError: Any tree building fault

    Example:
        >>> result = asyncio.run(build_tree_file("input/nodes.json", "rearranged-tree"))
        >>> result.output_path
        PosixPath('rearranged-tree.json')
    """
    config = config or TreeBuildConfig()
    source = Path(source_path)
    output_path = output_path_for(destination_path, config.output_suffix)

    logger.info(f"Building tree from {source}")

    try:
        data = await asyncio.to_thread(load_nodes_json, source)
    except json.JSONDecodeError as e:
        raise InputParseError(f"Malformed JSON in {source}: {e}") from e

    result = build_tree_from_data(data, config)
    payload = result.to_payload()

    await asyncio.to_thread(save_tree_json, payload, output_path, indent=config.indent)

    if result.issues:
        logger.info(f"Build finished with {len(result.issues)} issue(s)")
    logger.info(f"Wrote {result.node_count} nodes ({len(result.roots)} roots) to {output_path}")

    return replace(result, output_path=output_path)
