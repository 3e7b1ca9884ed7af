"""
Weight unit conversion for display.

Stateless: the caller passes the unit explicitly.  Stored values are
always kilograms; conversion happens only when printing or when parsing
user input.
"""

from typing import Literal

WeightUnit = Literal["kg", "lb"]

KG_PER_LB = 0.45359237


def validate_unit(unit: str) -> WeightUnit:
    """Return the unit if it is 'kg' or 'lb' (case-insensitive)."""
    normalized = unit.strip().lower()
    if normalized in ("lbs", "pound", "pounds"):
        normalized = "lb"
    if normalized not in ("kg", "lb"):
        raise ValueError(f"Unknown weight unit: {unit!r}. Use 'kg' or 'lb'.")
    return normalized  # type: ignore


def scale_from_kg(unit: WeightUnit) -> float:
    """Multiplier converting kilograms to ``unit``."""
    return 1.0 if unit == "kg" else 1.0 / KG_PER_LB


def from_kg(kg: float, unit: WeightUnit) -> float:
    """Convert a canonical kilogram value to ``unit``."""
    return kg * scale_from_kg(unit)


def to_kg(value: float, unit: WeightUnit) -> float:
    """Convert a user-entered value in ``unit`` to kilograms."""
    return value if unit == "kg" else value * KG_PER_LB


def format_weight(kg: float, unit: WeightUnit = "kg") -> str:
    """Format a kilogram value in ``unit`` with at most one decimal."""
    value = from_kg(kg, unit)
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{text} {unit}"
