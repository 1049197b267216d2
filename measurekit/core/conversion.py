"""
Conversion engine.

Every conversion is routed through the category base value:

    value --to_base(from.converter)--> base --from_base(to.converter)--> result

The engine never raises. Undefined conversions resolve to NaN (category
mismatch, degenerate unit) or +inf (division by a near-zero value on a
reciprocal scale). Callers treat any non-finite result as "no result".
"""

import numpy as np

from measurekit.core.types import (
    AffineConverter,
    LinearConverter,
    ReciprocalConverter,
    TemperatureConverter,
    TemperatureUnit,
    UnitConverter,
    UnitDefinition,
)


# Machine epsilon for float64 (2.220446049250313e-16)
EPSILON = float(np.finfo(np.float64).eps)

KELVIN_OFFSET = 273.15
FAHRENHEIT_OFFSET = 32.0


def convert(value: float, from_unit: UnitDefinition, to_unit: UnitDefinition) -> float:
    """
    Convert a value between two units of the same category.

    Args:
        value: Numeric value expressed in `from_unit`
        from_unit: Source unit definition
        to_unit: Target unit definition

    Returns:
        Converted value, NaN if the categories differ or the target
        unit is degenerate, +inf for a reciprocal division by ~0.

    Example:
        >>> convert(1000.0, meter, kilometer)
        1.0
    """
    if from_unit.category != to_unit.category:
        return float("nan")
    base = to_base(value, from_unit.converter)
    return from_base(base, to_unit.converter)


def to_base(value: float, converter: UnitConverter) -> float:
    """Map a value expressed in a unit onto the category base value."""
    if isinstance(converter, LinearConverter):
        return value * converter.multiplier
    if isinstance(converter, AffineConverter):
        return value * converter.scale + converter.offset
    if isinstance(converter, ReciprocalConverter):
        if abs(value) <= EPSILON:
            return float("inf")
        return converter.multiplier / value
    if isinstance(converter, TemperatureConverter):
        return temperature_to_kelvin(value, converter.unit)
    raise TypeError(f"Unsupported converter: {converter!r}")


def from_base(base: float, converter: UnitConverter) -> float:
    """Map a category base value onto a unit."""
    if isinstance(converter, LinearConverter):
        if abs(converter.multiplier) <= EPSILON:
            return float("nan")
        return base / converter.multiplier
    if isinstance(converter, AffineConverter):
        if abs(converter.scale) <= EPSILON:
            return float("nan")
        return (base - converter.offset) / converter.scale
    if isinstance(converter, ReciprocalConverter):
        if abs(base) <= EPSILON:
            return float("inf")
        return converter.multiplier / base
    if isinstance(converter, TemperatureConverter):
        return temperature_from_kelvin(base, converter.unit)
    raise TypeError(f"Unsupported converter: {converter!r}")


def temperature_to_kelvin(value: float, unit: TemperatureUnit) -> float:
    if unit == TemperatureUnit.KELVIN:
        return value
    if unit == TemperatureUnit.CELSIUS:
        return value + KELVIN_OFFSET
    if unit == TemperatureUnit.FAHRENHEIT:
        return (value - FAHRENHEIT_OFFSET) * 5.0 / 9.0 + KELVIN_OFFSET
    raise ValueError(f"Unknown temperature unit: {unit}")


def temperature_from_kelvin(kelvin: float, unit: TemperatureUnit) -> float:
    if unit == TemperatureUnit.KELVIN:
        return kelvin
    if unit == TemperatureUnit.CELSIUS:
        return kelvin - KELVIN_OFFSET
    if unit == TemperatureUnit.FAHRENHEIT:
        return (kelvin - KELVIN_OFFSET) * 9.0 / 5.0 + FAHRENHEIT_OFFSET
    raise ValueError(f"Unknown temperature unit: {unit}")


def is_valid_result(value: float) -> bool:
    """True when a conversion produced a usable (finite) number."""
    return bool(np.isfinite(value))
