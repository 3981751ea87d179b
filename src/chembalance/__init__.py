"""chembalance core package."""

from chembalance.balancer import BalanceResult, BalanceStatus, balance, balance_string
from chembalance.config import BalancerConfig
from chembalance.elements import ElementTable, PeriodicTable
from chembalance.formula import ParseResult, parse
from chembalance.models import Compound, Equation, parse_equation
from chembalance.trace import Trace

__all__ = [
    "BalanceResult",
    "BalanceStatus",
    "BalancerConfig",
    "Compound",
    "ElementTable",
    "Equation",
    "ParseResult",
    "PeriodicTable",
    "Trace",
    "balance",
    "balance_string",
    "parse",
    "parse_equation",
]
