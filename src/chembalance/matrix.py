"""Stoichiometric matrix construction.

Rows follow the equation's sorted distinct elements, columns follow the
compounds (reactants, then products). Reactant entries are positive and
product entries negative, so a balanced coefficient vector ``x`` satisfies
``M @ x == 0``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from chembalance.models import Equation


@dataclass(frozen=True)
class StoichiometricMatrix:
    values: np.ndarray
    elements: Tuple[str, ...]
    compounds: Tuple[str, ...]
    num_reactants: int

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    def row(self, element: str) -> np.ndarray:
        return self.values[self.elements.index(element)]


def build_matrix(equation: Equation) -> StoichiometricMatrix:
    """Project ``equation`` onto its element x compound matrix."""
    elements = equation.elements()
    reactants = equation.reactants
    terms = list(reactants) + list(equation.products)

    values = np.zeros((len(elements), len(terms)), dtype=float)
    row_of = {symbol: i for i, symbol in enumerate(elements)}
    for col, (compound, _) in enumerate(terms):
        sign = 1.0 if col < len(reactants) else -1.0
        for symbol, count in compound.element_counts.items():
            values[row_of[symbol], col] = sign * count

    return StoichiometricMatrix(
        values=values,
        elements=tuple(elements),
        compounds=tuple(compound.formula for compound, _ in terms),
        num_reactants=len(reactants),
    )


def format_matrix(
    values: np.ndarray,
    elements: Sequence[str],
    compounds: Sequence[str],
) -> str:
    """Render the matrix with compound headers and element row labels."""
    width = max([8] + [len(name) + 1 for name in compounds])
    lines = [" " * 6 + "".join(name.rjust(width) for name in compounds)]
    for symbol, row in zip(elements, np.asarray(values)):
        cells = "".join(f"{value + 0.0:{width}.0f}" for value in row)
        lines.append(f"{symbol:>4} │{cells} │ = 0")
    return "\n".join(lines)
