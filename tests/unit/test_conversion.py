"""
Unit tests for the conversion engine.

Covers linear, affine, reciprocal and temperature strategies, round trips
across every built-in table and the non-finite results for undefined
conversions.
"""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from measurekit.core.conversion import (
    EPSILON,
    convert,
    from_base,
    is_valid_result,
    to_base,
)
from measurekit.core.types import (
    AffineConverter,
    LinearConverter,
    MeasurementCategory,
    ReciprocalConverter,
    UnitDefinition,
)
from measurekit.data.unit_tables import BUILTIN_UNITS, get_all_builtin_units, get_builtin_unit


def unit(unit_id: str) -> UnitDefinition:
    found = get_builtin_unit(unit_id)
    assert found is not None, unit_id
    return found


def is_degenerate(definition: UnitDefinition) -> bool:
    """Linear units whose multiplier is at or below machine epsilon."""
    converter = definition.converter
    return isinstance(converter, LinearConverter) and abs(converter.multiplier) <= EPSILON


class TestKnownValues:
    """Reference conversions."""

    def test_meter_to_kilometer(self):
        """1000 m is exactly 1 km."""
        assert convert(1000.0, unit("length.meter"), unit("length.kilometer")) == 1.0

    def test_mile_to_meter(self):
        """International mile is 1609.344 m."""
        assert convert(1.0, unit("length.mile"), unit("length.meter")) == 1609.344

    def test_celsius_to_fahrenheit_freezing(self):
        """0 °C is 32 °F."""
        result = convert(0.0, unit("temperature.celsius"), unit("temperature.fahrenheit"))
        assert_allclose(result, 32.0)

    def test_celsius_to_kelvin_boiling(self):
        """100 °C is 373.15 K."""
        result = convert(100.0, unit("temperature.celsius"), unit("temperature.kelvin"))
        assert_allclose(result, 373.15)

    def test_fahrenheit_to_celsius_freezing(self):
        """32 °F is 0 °C."""
        result = convert(32.0, unit("temperature.fahrenheit"), unit("temperature.celsius"))
        assert_allclose(result, 0.0, atol=1e-12)

    def test_fahrenheit_minus_forty(self):
        """The scales cross at -40."""
        result = convert(-40.0, unit("temperature.fahrenheit"), unit("temperature.celsius"))
        assert_allclose(result, -40.0)

    def test_fuel_reciprocal_scale(self):
        """100 L/100km is 1 km/L."""
        result = convert(100.0, unit("fuel.literPer100Km"), unit("fuel.kilometerPerLiter"))
        assert result == 1.0

    def test_fuel_reciprocal_to_reciprocal(self):
        """5 L/100km is 0.05 L/km."""
        result = convert(5.0, unit("fuel.literPer100Km"), unit("fuel.literPerKilometer"))
        assert_allclose(result, 0.05)

    def test_degrees_to_radians(self):
        """180° is π rad."""
        result = convert(180.0, unit("angle.degree"), unit("angle.radian"))
        assert_allclose(result, math.pi)

    def test_pound_to_kilogram(self):
        result = convert(1.0, unit("mass.pound"), unit("mass.kilogram"))
        assert_allclose(result, 0.45359237)


class TestRoundTrip:
    """Converting there and back returns the input."""

    @pytest.mark.parametrize("category", list(MeasurementCategory), ids=lambda c: c.name)
    def test_all_pairs_round_trip(self, category):
        """Every ordered pair of non-degenerate built-in units round-trips."""
        units = [u for u in BUILTIN_UNITS[category] if not is_degenerate(u)]
        value = 12.5
        for source in units:
            for target in units:
                there = convert(value, source, target)
                back = convert(there, target, source)
                assert_allclose(back, value, rtol=1e-9,
                                err_msg=f"{source.id} -> {target.id}")


class TestUndefinedConversions:
    """Conversions without a finite result."""

    def test_cross_category_is_nan(self):
        """Length and mass do not convert."""
        result = convert(1.0, unit("length.meter"), unit("mass.kilogram"))
        assert math.isnan(result)

    def test_zero_on_reciprocal_scale_is_infinite(self):
        """0 L/100km has no km/L equivalent."""
        result = convert(0.0, unit("fuel.literPer100Km"), unit("fuel.kilometerPerLiter"))
        assert result == float("inf")

    def test_zero_into_reciprocal_scale_is_infinite(self):
        """0 km/L has no L/100km equivalent."""
        result = convert(0.0, unit("fuel.kilometerPerLiter"), unit("fuel.literPer100Km"))
        assert result == float("inf")

    def test_degenerate_linear_target_is_nan(self):
        """Zero multiplier on the target unit."""
        assert math.isnan(from_base(10.0, LinearConverter(0.0)))

    def test_degenerate_affine_target_is_nan(self):
        """Zero scale on the target unit."""
        assert math.isnan(from_base(10.0, AffineConverter(scale=0.0, offset=1.0)))

    def test_epsilon_is_degenerate(self):
        """A divisor exactly at machine epsilon counts as zero."""
        assert to_base(EPSILON, ReciprocalConverter(1.0)) == float("inf")
        assert math.isnan(from_base(1.0, LinearConverter(EPSILON)))

    def test_electron_volt_is_a_degenerate_target(self):
        """eV sits below machine epsilon: converting into it has no result."""
        assert math.isnan(convert(1.0, unit("energy.joule"), unit("energy.electronVolt")))

    def test_electron_volt_source_stays_finite(self):
        result = convert(1.0, unit("energy.electronVolt"), unit("energy.joule"))
        assert is_valid_result(result)
        assert_allclose(result, 1.602176634e-19)

    def test_electron_volt_is_the_only_degenerate_unit(self):
        degenerate = [u.id for u in get_all_builtin_units() if is_degenerate(u)]
        assert degenerate == ["energy.electronVolt"]

    def test_epsilon_matches_float64(self):
        assert EPSILON == np.finfo(np.float64).eps

    def test_unknown_converter_raises_type_error(self):
        """Only the four strategies are dispatched."""
        with pytest.raises(TypeError):
            to_base(1.0, object())


class TestStrategies:
    """Individual converter strategies."""

    def test_affine_to_base(self):
        """base = value * scale + offset"""
        assert to_base(2.0, AffineConverter(scale=3.0, offset=1.0)) == 7.0

    def test_affine_from_base(self):
        assert from_base(7.0, AffineConverter(scale=3.0, offset=1.0)) == 2.0

    def test_reciprocal_both_ways(self):
        converter = ReciprocalConverter(100.0)
        assert to_base(4.0, converter) == 25.0
        assert from_base(25.0, converter) == 4.0

    def test_negative_reciprocal_value(self):
        """Negative inputs stay finite."""
        assert to_base(-4.0, ReciprocalConverter(100.0)) == -25.0


class TestResultValidity:
    """Finite check used by callers."""

    def test_finite_values_are_valid(self):
        assert is_valid_result(0.0)
        assert is_valid_result(-1.5e300)

    def test_non_finite_values_are_invalid(self):
        assert not is_valid_result(float("nan"))
        assert not is_valid_result(float("inf"))
        assert not is_valid_result(float("-inf"))
