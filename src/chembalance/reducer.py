"""Conversion of real null-space vectors into minimal integer coefficients."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from functools import reduce
from typing import Sequence, Tuple

from chembalance.config import BalancerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reduction:
    """Outcome of ``reduce_to_integers``.

    ``exact`` is False when at least one value needed the fallback
    denominator, in which case the integers are a best-effort approximation.
    """

    success: bool
    message: str
    coefficients: Tuple[int, ...] = ()
    denominators: Tuple[int, ...] = field(default=(), repr=False)
    exact: bool = True


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def approximate_fraction(
    value: float,
    config: BalancerConfig | None = None,
) -> Tuple[int, int, bool]:
    """Return ``(numerator, denominator, exact)`` approximating ``value``.

    Denominators ``1..config.max_denominator`` are tried in increasing
    order; the first one bringing ``value * denominator`` within
    ``config.fraction_tolerance`` of an integer wins.
    """
    config = config or BalancerConfig()
    for denominator in range(1, config.max_denominator + 1):
        scaled = value * denominator
        nearest = _round_half_away(scaled)
        if abs(scaled - nearest) < config.fraction_tolerance:
            return nearest, denominator, True

    fallback = config.fallback_denominator
    return _round_half_away(value * fallback), fallback, False


def reduce_to_integers(
    values: Sequence[float],
    config: BalancerConfig | None = None,
) -> Reduction:
    """Scale ``values`` to the smallest positive integer vector.

    Steps: approximate each value by a fraction, bring all fractions to
    their least common denominator, divide out the greatest common divisor
    and flip the sign if every entry is negative. Fails when any resulting
    coefficient is zero or negative.
    """
    config = config or BalancerConfig()
    values = [float(v) for v in values]
    if not values:
        return Reduction(success=False, message="no coefficients to reduce")

    fractions = [approximate_fraction(v, config) for v in values]
    numerators = [n for n, _, _ in fractions]
    denominators = tuple(d for _, d, _ in fractions)
    exact = all(ok for _, _, ok in fractions)
    if not exact:
        logger.warning(
            "No denominator <= %d fits %s; using lossy fallback denominator %d",
            config.max_denominator,
            values,
            config.fallback_denominator,
        )

    common = reduce(math.lcm, denominators)
    integers = [n * (common // d) for n, d in zip(numerators, denominators)]

    divisor = reduce(math.gcd, (abs(i) for i in integers))
    if divisor > 1:
        integers = [i // divisor for i in integers]

    if all(i < 0 for i in integers):
        integers = [-i for i in integers]

    logger.debug("Reduced %s to %s (lcm=%d, gcd=%d)", values, integers, common, divisor)

    if any(i <= 0 for i in integers):
        return Reduction(
            success=False,
            message="Invalid coefficients found (zero or negative)",
            coefficients=tuple(integers),
            denominators=denominators,
            exact=exact,
        )
    return Reduction(
        success=True,
        message="reduced to integers",
        coefficients=tuple(integers),
        denominators=denominators,
        exact=exact,
    )
