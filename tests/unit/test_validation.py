"""
Unit tests for custom unit validation.

Tests the multiplier rule, symbol uniqueness and category support.
"""

import pytest

from measurekit.core.catalog import UnitCatalog
from measurekit.core.types import CustomUnit, MeasurementCategory
from measurekit.core.validation import (
    ValidationCode,
    ValidationResult,
    validate_custom_unit,
    validate_multiplier,
)


@pytest.fixture
def catalog():
    return UnitCatalog()


def make_unit(symbol="cbt", multiplier=0.4572, category=MeasurementCategory.LENGTH, name="Cubit"):
    return CustomUnit(category=category, name=name, symbol=symbol, multiplier_to_base=multiplier)


class TestMultiplierValidation:
    """Test multiplier validation."""

    def test_zero_multiplier_is_error(self):
        """Zero would make the unit degenerate."""
        result = validate_multiplier(0.0)
        assert not result
        assert result.error == ValidationCode.INVALID_MULTIPLIER

    def test_negative_multiplier_is_error(self):
        result = validate_multiplier(-2.0)
        assert result.error == ValidationCode.INVALID_MULTIPLIER
        assert result.issues[0].message == "Multiplier must be greater than zero."

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_multiplier_is_error(self, value):
        assert validate_multiplier(value).error == ValidationCode.INVALID_MULTIPLIER

    def test_positive_multiplier_no_issues(self):
        result = validate_multiplier(1e-9)
        assert result
        assert result.issues == []
        assert result.error is None


class TestCustomUnitValidation:
    """Test full custom unit validation."""

    def test_valid_unit(self, catalog):
        assert validate_custom_unit(make_unit(), catalog, [])

    def test_builtin_symbol_collision(self, catalog):
        """Symbols compare trimmed and case-insensitively."""
        result = validate_custom_unit(make_unit(symbol=" KM "), catalog, [])
        assert result.error == ValidationCode.DUPLICATE_SYMBOL
        assert result.issues[0].message == "A unit with this symbol already exists."
        assert result.issues[0].field == "symbol"

    def test_custom_symbol_collision(self, catalog):
        existing = make_unit(symbol="cbt")
        result = validate_custom_unit(make_unit(symbol="CBT", name="Royal Cubit"), catalog, [existing])
        assert result.error == ValidationCode.DUPLICATE_SYMBOL

    def test_same_symbol_in_other_category_is_allowed(self, catalog):
        existing = make_unit(symbol="cbt", category=MeasurementCategory.MASS)
        assert validate_custom_unit(make_unit(symbol="cbt"), catalog, [existing])

    def test_update_excludes_own_symbol(self, catalog):
        """Editing a unit without changing its symbol is not a conflict."""
        unit = make_unit()
        assert validate_custom_unit(unit, catalog, [unit], is_update=True)

    def test_add_does_not_exclude_own_symbol(self, catalog):
        unit = make_unit()
        assert not validate_custom_unit(unit, catalog, [unit])

    def test_temperature_is_unsupported(self, catalog):
        result = validate_custom_unit(
            make_unit(symbol="°R", category=MeasurementCategory.TEMPERATURE), catalog, []
        )
        assert result.error == ValidationCode.UNSUPPORTED_CATEGORY

    def test_multiplier_checked_before_symbol(self, catalog):
        """A unit failing both checks reports the multiplier."""
        result = validate_custom_unit(make_unit(symbol="km", multiplier=0.0), catalog, [])
        assert result.error == ValidationCode.INVALID_MULTIPLIER
        assert len(result.issues) == 1


class TestValidationResult:
    """Test ValidationResult behaviour."""

    def test_success_is_truthy(self):
        result = ValidationResult(is_valid=True)
        assert result
        assert "valid" in str(result).lower()

    def test_failure_str_lists_issues(self, catalog):
        result = validate_custom_unit(make_unit(symbol="m"), catalog, [])
        assert "symbol" in str(result)
