"""
Command-line wrapper for the tree builder.

Usage:
    python -m node_tree input/nodes.json rearranged-tree
    python -m node_tree input/nodes.json out/tree --references strict -v

The destination is given without extension; ``.json`` is appended.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from node_tree import __version__
from node_tree.builder import (
    DuplicatePolicy,
    ReferencePolicy,
    TreeBuildConfig,
    TreeBuildError,
    build_tree_file,
)
from node_tree.core.schemas import ValidationError

logger = logging.getLogger("node_tree")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="node_tree",
        description="Rebuild a nested JSON tree from a flat node list.",
    )
    parser.add_argument("source", type=Path, help="JSON file holding the flat node array")
    parser.add_argument(
        "destination",
        type=str,
        help="Output path without extension (.json is appended)",
    )
    parser.add_argument(
        "--allow-duplicates",
        action="store_true",
        help="Let a repeated nodeId replace the earlier record instead of failing",
    )
    parser.add_argument(
        "--references",
        choices=[policy.value for policy in ReferencePolicy],
        default=ReferencePolicy.WARN.value,
        help="Handling of dangling references and unplaced nodes (default: warn)",
    )
    parser.add_argument(
        "--no-schema",
        action="store_true",
        help="Skip JSON schema validation (basic checks still run)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log phase timings")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = TreeBuildConfig(
        duplicate_policy=DuplicatePolicy.LAST_WINS if args.allow_duplicates else DuplicatePolicy.REJECT,
        reference_policy=ReferencePolicy(args.references),
        strict_schema=not args.no_schema,
    )

    try:
        result = asyncio.run(build_tree_file(args.source, args.destination, config))
    except ValidationError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        for message in e.errors:
            print(f"  {message}", file=sys.stderr)
        return 1
    except (TreeBuildError, OSError) as e:
        print(f"Build failed: {e}", file=sys.stderr)
        return 1

    print(result.output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
