"""Balancer configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from chembalance.constants import (
    EPSILON,
    FALLBACK_DENOMINATOR,
    FRACTION_TOLERANCE,
    MAX_DENOMINATOR,
)
from chembalance.errors import ConfigError


@dataclass(frozen=True)
class BalancerConfig:
    """Tolerances used by the elimination and the integer reduction.

    Attributes:
        epsilon: Magnitude below which a pivot or entry counts as zero.
        fraction_tolerance: Accepted distance to an integer when searching
            for a denominator.
        max_denominator: Upper bound of the denominator search.
        fallback_denominator: Denominator applied when the search fails.
        record_trace: Whether solver steps carry matrix snapshots.
    """

    epsilon: float = EPSILON
    fraction_tolerance: float = FRACTION_TOLERANCE
    max_denominator: int = MAX_DENOMINATOR
    fallback_denominator: int = FALLBACK_DENOMINATOR
    record_trace: bool = True

    def __post_init__(self) -> None:
        for name in ("epsilon", "fraction_tolerance"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"{name} must be a positive number, got {value!r}")
        for name in ("max_denominator", "fallback_denominator"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.record_trace, bool):
            raise ConfigError(f"record_trace must be a boolean, got {self.record_trace!r}")


def config_from_mapping(data: Mapping[str, Any]) -> BalancerConfig:
    known = {f.name for f in fields(BalancerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {unknown}")
    return BalancerConfig(**dict(data))


def load_config(config_file: str | Path) -> BalancerConfig:
    """Load a ``BalancerConfig`` from a JSON object on disk."""
    path = Path(config_file)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Configuration file is not valid JSON: {path}") from e

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object.")
    return config_from_mapping(data)
