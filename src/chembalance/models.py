"""Data structures for compounds and chemical equations."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple

from chembalance.elements import ElementTable, PeriodicTable
from chembalance.errors import EquationFormatError, StructuralError
from chembalance.formula import format_subscripts, parse

logger = logging.getLogger(__name__)

_ARROW = re.compile(r"\s*(?:->|→)\s*")
_PLUS = re.compile(r"\s*\+\s*")
_TERM = re.compile(r"^\s*(\d+)?\s*(\S.*?)\s*$")


@dataclass(frozen=True, order=True)
class Compound:
    """Immutable parsed compound.

    Equality, hashing and ordering use ``formula`` only. An invalid compound
    carries no element counts, a molar mass of 0 and the reason in ``error``.
    """

    formula: str
    element_counts: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )
    molar_mass: float = field(default=0.0, compare=False)  # g/mol
    valid: bool = field(default=False, compare=False)
    error: str | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_formula(cls, formula: str, table: ElementTable | None = None) -> "Compound":
        if table is None:
            table = PeriodicTable.standard()
        formula = str(formula).strip()

        result = parse(formula)
        if not result.ok:
            return cls(formula=formula, error=str(result.error))

        masses = {symbol: table.atomic_mass(symbol) for symbol in result.counts}
        unknown = sorted(symbol for symbol, mass in masses.items() if mass is None)
        if unknown:
            logger.warning("Unknown element(s) %s in formula %r", ", ".join(unknown), formula)
            return cls(formula=formula, error=f"Unknown element(s): {', '.join(unknown)}")

        molar_mass = sum(count * masses[symbol] for symbol, count in result.counts.items())
        return cls(
            formula=formula,
            element_counts=MappingProxyType(dict(result.counts)),
            molar_mass=float(molar_mass),
            valid=True,
        )

    @property
    def display_formula(self) -> str:
        return format_subscripts(self.formula)

    def __str__(self) -> str:
        return self.formula


Term = Tuple[Compound, int]


def _check_coefficient(coefficient: int) -> int:
    if isinstance(coefficient, bool) or not isinstance(coefficient, int) or coefficient < 1:
        raise StructuralError(f"Coefficients must be positive integers, got {coefficient!r}")
    return coefficient


class Equation:
    """Reactant and product terms with a cached ``balanced`` flag.

    The flag reflects the last call to ``check_balance``; every mutation
    resets it to ``False``.
    """

    def __init__(
        self,
        reactants: Sequence[Term] = (),
        products: Sequence[Term] = (),
    ):
        self._reactants: List[Term] = []
        self._products: List[Term] = []
        self._balanced = False
        for compound, coefficient in reactants:
            self.add_reactant(compound, coefficient)
        for compound, coefficient in products:
            self.add_product(compound, coefficient)

    @property
    def reactants(self) -> Tuple[Term, ...]:
        return tuple(self._reactants)

    @property
    def products(self) -> Tuple[Term, ...]:
        return tuple(self._products)

    @property
    def balanced(self) -> bool:
        return self._balanced

    @property
    def total_compounds(self) -> int:
        return len(self._reactants) + len(self._products)

    @property
    def coefficients(self) -> List[int]:
        return [c for _, c in self._reactants] + [c for _, c in self._products]

    def compounds(self) -> List[Compound]:
        return [compound for compound, _ in self._reactants + self._products]

    def invalid_compounds(self) -> List[Compound]:
        return [compound for compound in self.compounds() if not compound.valid]

    def add_reactant(self, compound: Compound, coefficient: int = 1) -> None:
        self._reactants.append((compound, _check_coefficient(coefficient)))
        self._balanced = False

    def add_product(self, compound: Compound, coefficient: int = 1) -> None:
        self._products.append((compound, _check_coefficient(coefficient)))
        self._balanced = False

    def remove_reactant(self, index: int) -> Compound:
        compound, _ = self._reactants.pop(index)
        self._balanced = False
        return compound

    def remove_product(self, index: int) -> Compound:
        compound, _ = self._products.pop(index)
        self._balanced = False
        return compound

    def set_coefficients(self, coefficients: Sequence[int]) -> None:
        """Overwrite all coefficients, reactants first, then re-check balance."""
        coefficients = list(coefficients)
        if len(coefficients) != self.total_compounds:
            raise StructuralError(
                f"Expected {self.total_compounds} coefficients, got {len(coefficients)}"
            )
        for value in coefficients:
            _check_coefficient(value)

        self._balanced = False
        n = len(self._reactants)
        self._reactants = [(c, k) for (c, _), k in zip(self._reactants, coefficients[:n])]
        self._products = [(c, k) for (c, _), k in zip(self._products, coefficients[n:])]
        self.check_balance()

    def elements(self) -> List[str]:
        """Sorted distinct element symbols across both sides."""
        symbols = set()
        for compound in self.compounds():
            symbols.update(compound.element_counts)
        return sorted(symbols)

    def atom_balance(self) -> Dict[str, int]:
        """Reactant minus product atoms per element, scaled by coefficients."""
        balance: Dict[str, int] = {symbol: 0 for symbol in self.elements()}
        for compound, coefficient in self._reactants:
            for symbol, count in compound.element_counts.items():
                balance[symbol] += count * coefficient
        for compound, coefficient in self._products:
            for symbol, count in compound.element_counts.items():
                balance[symbol] -= count * coefficient
        return balance

    def check_balance(self) -> bool:
        self._balanced = all(value == 0 for value in self.atom_balance().values())
        return self._balanced

    def clear(self) -> None:
        self._reactants.clear()
        self._products.clear()
        self._balanced = False

    def to_string(self) -> str:
        return self._render(lambda compound: compound.formula)

    def to_display_string(self) -> str:
        return self._render(lambda compound: compound.display_formula)

    def _render(self, name) -> str:
        def side(terms: Sequence[Term]) -> str:
            return " + ".join(
                f"{coefficient if coefficient > 1 else ''}{name(compound)}"
                for compound, coefficient in terms
            )

        return f"{side(self._reactants)} → {side(self._products)}"

    def __iter__(self) -> Iterator[Term]:
        return iter(self._reactants + self._products)

    def __len__(self) -> int:
        return self.total_compounds

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Equation({self.to_string()!r})"


def split_compounds(side: str) -> List[str]:
    return [part for part in _PLUS.split(side.strip()) if part]


def parse_term(term: str) -> Tuple[str, int]:
    """Split ``"2H2O"`` into ``("H2O", 2)``; the coefficient defaults to 1."""
    match = _TERM.match(term)
    if not match:
        raise EquationFormatError(f"Invalid compound format: {term!r}", term)
    coefficient = int(match.group(1)) if match.group(1) else 1
    if coefficient < 1:
        raise EquationFormatError(f"Coefficient must be positive in {term!r}", term)
    return match.group(2), coefficient


def parse_equation(text: str, table: ElementTable | None = None) -> Equation:
    """Build an ``Equation`` from ``"reactants -> products"``.

    Formula-level problems produce invalid compounds rather than errors;
    only the overall shape of the string raises ``EquationFormatError``.
    """
    if table is None:
        table = PeriodicTable.standard()
    sides = _ARROW.split(str(text).strip())
    if len(sides) != 2:
        raise EquationFormatError(
            "Invalid equation format - must have reactants -> products", str(text)
        )

    equation = Equation()
    for side, add in ((sides[0], equation.add_reactant), (sides[1], equation.add_product)):
        terms = split_compounds(side)
        if not terms:
            raise EquationFormatError("Both sides of the equation need a compound", str(text))
        for term in terms:
            formula, coefficient = parse_term(term)
            add(Compound.from_formula(formula, table), coefficient)
    return equation
