"""Bounds checks applied to every computed economic quantity.

The checks guard against runaway feedback in the model (exchange-rate or
productivity spirals). A candidate either passes every bound or the round is
rejected; values are never clamped.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from growthsim_backend.shared.errors import EconomicValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

MAX_ECONOMIC_VALUE = 1e15
MAX_LABOR_MILLIONS = 1e5
MAX_PRODUCTIVITY_INDEX = 1e3
MAX_OPENNESS = 10.0
MAX_CURRENCY_RATIO = 1e6
MAX_FDI_RATIO = 10.0
MAX_HUMAN_CAPITAL = 100.0


class ValueBounds(BaseModel):
    """Admissible interval for a single named quantity."""

    model_config = ConfigDict(frozen=True)

    label: str
    lower: float
    upper: float
    strict_lower: bool = False

    def check(self, value: float) -> str | None:
        """Return the reason *value* is rejected, or ``None`` when it is admissible."""
        if not math.isfinite(value):
            return f"{self.label} must be a finite number."
        if self.strict_lower and value <= self.lower:
            if self.lower == 0:
                return f"{self.label} must be a positive number."
            return f"{self.label} must be greater than {self.lower:g}."
        if value < self.lower:
            if self.lower == 0:
                return f"{self.label} cannot be negative."
            return f"{self.label} must be at least {self.lower:g}."
        if value > self.upper:
            return f"{self.label} exceeds maximum allowed value of {self.upper:g}."
        return None


def _positive(label: str, upper: float) -> ValueBounds:
    return ValueBounds(label=label, lower=0.0, upper=upper, strict_lower=True)


def _non_negative(label: str, upper: float) -> ValueBounds:
    return ValueBounds(label=label, lower=0.0, upper=upper)


VALUE_BOUNDS: dict[str, ValueBounds] = {
    "K": _positive("Capital (K)", MAX_ECONOMIC_VALUE),
    "L": _positive("Labor (L)", MAX_LABOR_MILLIONS),
    "A": _positive("Technology (A)", MAX_PRODUCTIVITY_INDEX),
    "Y": _non_negative("Output (Y)", MAX_ECONOMIC_VALUE),
    "X": _non_negative("Exports (X)", MAX_ECONOMIC_VALUE),
    "M": _non_negative("Imports (M)", MAX_ECONOMIC_VALUE),
    "NX": ValueBounds(
        label="Net exports (NX)", lower=-MAX_ECONOMIC_VALUE, upper=MAX_ECONOMIC_VALUE
    ),
    "openness": _non_negative("Openness", MAX_OPENNESS),
    "C": _non_negative("Consumption (C)", MAX_ECONOMIC_VALUE),
    "I": _non_negative("Investment (I)", MAX_ECONOMIC_VALUE),
    "e": _positive("Exchange rate (e)", MAX_CURRENCY_RATIO),
    "tildeE": _positive("Counterfactual exchange rate (tildeE)", MAX_CURRENCY_RATIO),
    "fdiRatio": _non_negative("FDI ratio", MAX_FDI_RATIO),
    "YStar": _positive("Foreign income (YStar)", MAX_ECONOMIC_VALUE),
    "H": _positive("Human capital (H)", MAX_HUMAN_CAPITAL),
}


class Violation(BaseModel):
    """A single field that failed its bounds check."""

    model_config = ConfigDict(frozen=True)

    field: str
    value: float
    reason: str


class ValidationResult(BaseModel):
    """Outcome of validating a candidate set of economic values."""

    model_config = ConfigDict(frozen=True)

    values: dict[str, float] = Field(default_factory=dict)
    violations: tuple[Violation, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True when no field violated its bounds."""
        return not self.violations

    def unwrap(self) -> dict[str, float]:
        """Return the validated values or raise :class:`EconomicValidationError`."""
        if self.violations:
            raise EconomicValidationError(self.violations)
        return dict(self.values)


def validate_values(
    candidate: Mapping[str, float],
    bounds: Mapping[str, ValueBounds] | None = None,
) -> ValidationResult:
    """Check every field of *candidate* that has a bound and collect all failures."""
    bounds = VALUE_BOUNDS if bounds is None else bounds
    violations: list[Violation] = []
    for name, value in candidate.items():
        rule = bounds.get(name)
        if rule is None:
            continue
        reason = rule.check(value)
        if reason is not None:
            violations.append(Violation(field=name, value=value, reason=reason))
    if violations:
        return ValidationResult(violations=tuple(violations))
    return ValidationResult(values=dict(candidate))


__all__ = [
    "MAX_ECONOMIC_VALUE",
    "VALUE_BOUNDS",
    "ValidationResult",
    "ValueBounds",
    "Violation",
    "validate_values",
]
