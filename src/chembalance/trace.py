"""Append-only record of balancing steps.

A ``Trace`` is created by the caller and passed explicitly to the solver and
the orchestrator, so independent balancing calls never share one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

import numpy as np


@dataclass(frozen=True)
class TraceStep:
    description: str
    operation: str
    matrix: np.ndarray | None = None


class Trace:
    """Ordered solver steps (with matrix snapshots) and narrative notes."""

    def __init__(self, snapshots: bool = True):
        self.snapshots = snapshots
        self.steps: List[TraceStep] = []
        self.notes: List[str] = []

    def add_step(self, description: str, matrix: np.ndarray | None, operation: str) -> None:
        snapshot = None
        if self.snapshots and matrix is not None:
            snapshot = np.array(matrix, dtype=float, copy=True)
            snapshot.setflags(write=False)
        self.steps.append(TraceStep(description=description, operation=operation, matrix=snapshot))

    def note(self, text: str) -> None:
        self.notes.append(text)

    def operations(self) -> List[str]:
        return [step.operation for step in self.steps]

    def __iter__(self) -> Iterator[TraceStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)
