"""Equation balancing orchestrator.

``balance`` moves an ``Equation`` through these stages:

    START -> ALREADY_BALANCED
          -> BUILDING -> SOLVED -> VALIDATED -> SUCCESS | INVALID_EQUATION

with ``PARSING_ERROR``, ``NO_SOLUTION`` and ``INFINITE_SOLUTIONS`` as early
exits. Failures are reported through ``BalanceResult.status``; nothing in
this module raises across ``balance``.

The final audit recomputes atom totals from the integer coefficients with
exact integer arithmetic, so a floating-point solution that does not
survive rounding is reported as ``INVALID_EQUATION`` rather than success.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from chembalance.config import BalancerConfig
from chembalance.elements import ElementTable
from chembalance.errors import EquationFormatError
from chembalance.matrix import build_matrix, format_matrix
from chembalance.models import Equation, parse_equation
from chembalance.reducer import reduce_to_integers
from chembalance.solver import degrees_of_freedom, solve
from chembalance.trace import Trace

logger = logging.getLogger(__name__)


class BalanceStatus(str, enum.Enum):
    SUCCESS = "success"
    ALREADY_BALANCED = "already_balanced"
    NO_SOLUTION = "no_solution"
    INFINITE_SOLUTIONS = "infinite_solutions"
    INVALID_EQUATION = "invalid_equation"
    PARSING_ERROR = "parsing_error"


@dataclass(frozen=True)
class BalanceResult:
    """Outcome of one balancing run.

    Attributes:
        status: Result tag.
        coefficients: One integer per compound, reactants then products.
        message: Human-readable summary.
        atom_balance: Reactant minus product atoms per element.
        conservation_verified: Result of the independent integer audit.
        imprecise: The reducer fell back to the lossy fixed denominator.
        balanced_equation: Equation text after coefficients were applied.
    """

    status: BalanceStatus
    coefficients: Tuple[int, ...] = ()
    message: str = ""
    atom_balance: Mapping[str, int] = field(default_factory=dict)
    conservation_verified: bool = False
    imprecise: bool = False
    balanced_equation: str = ""

    @property
    def success(self) -> bool:
        return self.status in (BalanceStatus.SUCCESS, BalanceStatus.ALREADY_BALANCED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "coefficients": list(self.coefficients),
            "message": self.message,
            "atom_balance": dict(self.atom_balance),
            "conservation_verified": self.conservation_verified,
            "imprecise": self.imprecise,
            "balanced_equation": self.balanced_equation,
        }


def _note(trace: Trace | None, text: str) -> None:
    if trace is not None:
        trace.note(text)


def validate_atom_conservation(equation: Equation) -> Tuple[Dict[str, int], bool]:
    """Recompute the per-element imbalance from the current coefficients."""
    imbalance = equation.atom_balance()
    return imbalance, all(value == 0 for value in imbalance.values())


def _failure(
    status: BalanceStatus,
    message: str,
    trace: Trace | None,
    equation: Equation | None = None,
) -> BalanceResult:
    _note(trace, f"ERROR: {message}")
    logger.info("Balancing finished with %s: %s", status.name, message)
    imbalance = equation.atom_balance() if equation is not None else {}
    return BalanceResult(status=status, message=message, atom_balance=imbalance)


def balance(
    equation: Equation,
    *,
    config: BalancerConfig | None = None,
    trace: Trace | None = None,
) -> BalanceResult:
    """Find the smallest positive integer coefficients for ``equation``.

    On success the coefficients are written back into ``equation``.

    Args:
        equation: Equation to balance; mutated on success.
        config: Solver and reducer tolerances.
        trace: Optional accumulator for solver steps and narrative notes.

    Returns:
        A ``BalanceResult``; never raises for bad input.
    """
    config = config or BalancerConfig()
    logger.info("Balancing %s", equation.to_string())
    _note(trace, "Starting equation balancing process")
    _note(trace, f"Original equation: {equation.to_string()}")

    invalid = equation.invalid_compounds()
    if invalid:
        details = "; ".join(f"{c.formula}: {c.error}" for c in invalid)
        return _failure(BalanceStatus.PARSING_ERROR, f"Invalid compound(s) - {details}", trace)

    if not equation.reactants or not equation.products:
        return _failure(
            BalanceStatus.PARSING_ERROR,
            "Equation needs at least one reactant and one product",
            trace,
        )

    # START
    if equation.check_balance():
        _note(trace, "Equation is already balanced")
        logger.info("Equation already balanced")
        return BalanceResult(
            status=BalanceStatus.ALREADY_BALANCED,
            coefficients=tuple(equation.coefficients),
            message="Equation is already balanced",
            atom_balance=equation.atom_balance(),
            conservation_verified=True,
            balanced_equation=equation.to_string(),
        )

    # BUILDING
    stoich = build_matrix(equation)
    if not stoich.elements or not stoich.compounds:
        return _failure(BalanceStatus.PARSING_ERROR, "Equation has no elements", trace, equation)

    _note(trace, f"Building stoichiometric matrix for elements: {', '.join(stoich.elements)}")
    _note(
        trace,
        f"Matrix constructed with {len(stoich.elements)} equations "
        f"and {len(stoich.compounds)} unknowns",
    )
    _note(trace, "Stoichiometric matrix:")
    _note(trace, format_matrix(stoich.values, stoich.elements, stoich.compounds))

    free = degrees_of_freedom(stoich.values)
    if free == 0:
        return _failure(
            BalanceStatus.NO_SOLUTION,
            "No solution exists for this equation (only the trivial solution)",
            trace,
            equation,
        )
    if free > 1:
        return _failure(
            BalanceStatus.INFINITE_SOLUTIONS,
            f"Equation has {free} independent balancing ratios; "
            "only single-parameter equations are supported",
            trace,
            equation,
        )

    # SOLVED
    _note(trace, "Solving system of linear equations using Gaussian elimination")
    solution = solve(stoich.values, trace=trace, config=config)
    if not solution.success or solution.x is None:
        return _failure(
            BalanceStatus.NO_SOLUTION,
            f"No solution exists for this equation ({solution.message})",
            trace,
            equation,
        )
    _note(trace, "Raw solution found: " + ", ".join(f"{v:.3f}" for v in solution.x))

    reduction = reduce_to_integers(solution.x, config=config)
    _note(
        trace,
        "Converting to smallest integer coefficients: "
        + ", ".join(str(c) for c in reduction.coefficients),
    )
    if not reduction.success:
        return _failure(BalanceStatus.NO_SOLUTION, reduction.message, trace, equation)

    # VALIDATED
    equation.set_coefficients(reduction.coefficients)
    imbalance, verified = validate_atom_conservation(equation)

    if not verified:
        message = "Balancing failed - atom conservation violated"
        if not reduction.exact:
            message += " (coefficients needed a denominator above the search bound)"
        logger.warning("%s: %s", message, imbalance)
        _note(trace, "ERROR: Atom conservation failed")
        return BalanceResult(
            status=BalanceStatus.INVALID_EQUATION,
            coefficients=reduction.coefficients,
            message=message,
            atom_balance=imbalance,
            conservation_verified=False,
            imprecise=not reduction.exact,
        )

    _note(trace, f"Final balanced equation: {equation.to_string()}")
    _note(trace, "Atom conservation verified")
    logger.info("Balanced: %s", equation.to_string())
    return BalanceResult(
        status=BalanceStatus.SUCCESS,
        coefficients=reduction.coefficients,
        message="Equation balanced successfully",
        atom_balance=imbalance,
        conservation_verified=True,
        imprecise=not reduction.exact,
        balanced_equation=equation.to_string(),
    )


def balance_string(
    text: str,
    *,
    table: ElementTable | None = None,
    config: BalancerConfig | None = None,
    trace: Trace | None = None,
) -> Tuple[Equation | None, BalanceResult]:
    """Parse ``"reactants -> products"`` and balance it.

    Returns the parsed equation (``None`` if the string could not be split
    into two sides) together with the result.
    """
    try:
        equation = parse_equation(text, table)
    except EquationFormatError as e:
        return None, _failure(BalanceStatus.PARSING_ERROR, str(e), trace)
    return equation, balance(equation, config=config, trace=trace)
