"""Homogeneous linear solver for stoichiometric matrices.

The balancing problem is the homogeneous system ``M @ x = 0``. This module
reduces ``M`` with Gaussian elimination and partial pivoting, then
back-substitutes a single null-space vector with the last unknown fixed to 1.

The back substitution assumes exactly one degree of freedom
(``rank == columns - 1``). ``degrees_of_freedom`` measures the null-space
dimension independently so callers can reject other systems up front.

Every row operation can be recorded in a ``Trace`` passed by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from scipy.linalg import null_space

from chembalance.config import BalancerConfig
from chembalance.trace import Trace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NullSpaceSolution:
    success: bool
    message: str
    x: np.ndarray | None
    echelon: np.ndarray | None = None


def _record(
    trace: Trace | None,
    config: BalancerConfig,
    description: str,
    matrix: np.ndarray,
    operation: str,
) -> None:
    if trace is not None:
        trace.add_step(description, matrix if config.record_trace else None, operation)


def forward_eliminate(
    matrix: np.ndarray,
    trace: Trace | None = None,
    config: BalancerConfig | None = None,
) -> np.ndarray:
    """Reduce a copy of ``matrix`` to upper-triangular form.

    For each pivot index up to ``min(rows, cols)`` the row with the largest
    absolute entry in that column (from the pivot row down) is swapped into
    place and the column is eliminated from the rows below it. A pivot whose
    magnitude is below ``config.epsilon`` marks a rank-deficient column and
    is skipped.

    Args:
        matrix: Stoichiometric matrix (elements x compounds).
        trace: Optional accumulator for the row operations.
        config: Tolerances; defaults to ``BalancerConfig()``.

    Returns:
        The reduced matrix. The input is not modified.
    """
    config = config or BalancerConfig()
    eps = config.epsilon
    reduced = np.array(matrix, dtype=float, copy=True)
    rows, cols = reduced.shape

    _record(trace, config, "Initial matrix", reduced, "initial")

    for pivot in range(min(rows, cols)):
        pivot_row = pivot + int(np.argmax(np.abs(reduced[pivot:, pivot])))
        if pivot_row != pivot:
            reduced[[pivot, pivot_row]] = reduced[[pivot_row, pivot]]
            _record(
                trace, config, f"Swap rows {pivot + 1} and {pivot_row + 1}", reduced, "row_swap"
            )

        if abs(reduced[pivot, pivot]) < eps:
            logger.debug("Column %d has no usable pivot; skipping", pivot)
            continue

        for row in range(pivot + 1, rows):
            if abs(reduced[row, pivot]) < eps:
                continue
            factor = -reduced[row, pivot] / reduced[pivot, pivot]
            reduced[row] += factor * reduced[pivot]
            # exact zero below the pivot
            reduced[row, pivot] = 0.0
            _record(
                trace,
                config,
                f"Add {factor:.3f} times row {pivot + 1} to row {row + 1}",
                reduced,
                "row_add",
            )

    _record(trace, config, "After forward elimination", reduced, "forward_done")
    return reduced


def solve_homogeneous(
    reduced: np.ndarray,
    trace: Trace | None = None,
    config: BalancerConfig | None = None,
) -> np.ndarray:
    """Back-substitute one null-space vector of an eliminated matrix.

    The last unknown is fixed to 1. Rows are visited bottom to top; each
    non-zero row solves for its leading unknown from the unknowns to its
    right. All-zero rows add no constraint and are skipped.
    """
    config = config or BalancerConfig()
    eps = config.epsilon
    rows, cols = reduced.shape

    solution = np.zeros(cols, dtype=float)
    solution[cols - 1] = 1.0

    for row in range(rows - 1, -1, -1):
        nonzero = np.flatnonzero(np.abs(reduced[row]) >= eps)
        if nonzero.size == 0:
            continue
        lead = int(nonzero[0])
        total = float(reduced[row, lead + 1 :] @ solution[lead + 1 :])
        solution[lead] = -total / reduced[row, lead]

    _record(trace, config, "Back substitution complete", reduced, "back_substitution")
    logger.debug("Back substitution produced %s", solution)
    return solution


def solve(
    matrix: np.ndarray,
    trace: Trace | None = None,
    config: BalancerConfig | None = None,
) -> NullSpaceSolution:
    """Run forward elimination and back substitution on ``matrix``."""
    values = np.asarray(matrix, dtype=float)
    if values.ndim != 2 or values.shape[0] == 0 or values.shape[1] == 0:
        return NullSpaceSolution(success=False, message="empty matrix", x=None)

    reduced = forward_eliminate(values, trace=trace, config=config)
    x = solve_homogeneous(reduced, trace=trace, config=config)

    if not np.all(np.isfinite(x)):
        return NullSpaceSolution(
            success=False, message="back substitution diverged", x=None, echelon=reduced
        )
    return NullSpaceSolution(success=True, message="solution found", x=x, echelon=reduced)


def degrees_of_freedom(matrix: np.ndarray) -> int:
    """Dimension of the null space of ``matrix`` (SVD based)."""
    values = np.asarray(matrix, dtype=float)
    if values.size == 0:
        return values.shape[1] if values.ndim == 2 else 0
    return int(null_space(values).shape[1])


def rank(matrix: np.ndarray) -> int:
    values = np.asarray(matrix, dtype=float)
    if values.size == 0:
        return 0
    return values.shape[1] - degrees_of_freedom(values)


def has_unique_solution(matrix: np.ndarray) -> bool:
    """True when the balancing ratios are unique up to scale."""
    values = np.asarray(matrix, dtype=float)
    return values.size > 0 and degrees_of_freedom(values) == 1


def matrix_to_string(matrix: np.ndarray) -> str:
    return "\n".join(
        "  ".join(f"{value + 0.0:8.3f}" for value in row) for row in np.asarray(matrix)
    )
