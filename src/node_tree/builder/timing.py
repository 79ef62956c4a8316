"""
Module: builder.timing

Purpose:
    Timing instrumentation for the build phases, used to spot which pass
    dominates on large inputs.

Key Classes:
    - PhaseTimings: Collects per-phase durations for one build

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - builder.pipeline: Times index, terminal and assembly phases
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator

logger = logging.getLogger(__name__)


@dataclass
class PhaseTimings:
    """
    Timing metrics for one build.

    Attributes:
        phases: Dict of phase_name -> duration_seconds, in run order

    Example:
        >>> timings = PhaseTimings()
        >>> timings.log("index", 0.004)
        >>> timings.total
        0.004
    """
    phases: Dict[str, float] = field(default_factory=dict)

    def log(self, phase: str, duration: float) -> None:
        """Record a phase duration, accumulating repeated phases."""
        self.phases[phase] = self.phases.get(phase, 0.0) + duration

    @property
    def total(self) -> float:
        return sum(self.phases.values())

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["=== Tree Build Timing ==="]
        for phase, duration in self.phases.items():
            lines.append(f"  {phase:20s} {duration:.4f}s")
        lines.append(f"  {'total':20s} {self.total:.4f}s")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, float]:
        return dict(self.phases)


@contextmanager
def timed_phase(timings: PhaseTimings, phase: str) -> Generator[None, None, None]:
    """
    Context manager for timing a build phase.

    Args:
        timings: PhaseTimings instance to record metrics
        phase: Name of the phase being timed

    Example:
        >>> timings = PhaseTimings()
        >>> with timed_phase(timings, "assemble"):
        ...     roots = assemble_tree(index)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        timings.log(phase, elapsed)
        logger.debug(f"Phase {phase} took {elapsed:.4f}s")
