"""Exception types for chembalance."""

from __future__ import annotations


class ChemBalanceError(Exception):
    """Base exception for chembalance."""


class ParseError(ChemBalanceError, ValueError):
    """Raised when a formula violates the formula grammar."""

    def __init__(self, message: str, formula: str = "", position: int | None = None):
        super().__init__(message)
        self.formula = formula
        self.position = position


class EquationFormatError(ParseError):
    """Raised when an equation string is not of the shape ``lhs -> rhs``."""


class UnknownElementError(ChemBalanceError, KeyError):
    """Raised by strict reference-table lookups for an unknown symbol."""

    def __init__(self, symbol: str):
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self) -> str:
        return f"unknown element: {self.symbol!r}"


class StructuralError(ChemBalanceError, ValueError):
    """Raised for empty equations or mismatched coefficient assignments."""


class ConfigError(ChemBalanceError, ValueError):
    """Raised when a configuration file or value is invalid."""
