"""
Unit tests for the unit catalog and the built-in tables.
"""

import uuid

import pytest

from measurekit.core.catalog import UnitCatalog
from measurekit.core.types import (
    CustomIdentity,
    CustomUnit,
    LinearConverter,
    MeasurementCategory,
    PredefinedIdentity,
    UnitDefinition,
    identity_for,
)
from measurekit.data import BUILTIN_UNITS, get_all_builtin_units


@pytest.fixture
def catalog():
    return UnitCatalog()


@pytest.fixture
def cubit():
    return CustomUnit(
        category=MeasurementCategory.LENGTH,
        name="Cubit",
        symbol="cbt",
        multiplier_to_base=0.4572,
    )


class TestBuiltinTables:
    """Shape of the built-in tables."""

    def test_every_category_has_a_table(self):
        assert set(BUILTIN_UNITS) == set(MeasurementCategory)

    def test_exactly_one_system_unit_per_category(self):
        for category, units in BUILTIN_UNITS.items():
            system_units = [u for u in units if u.is_system_unit]
            assert len(system_units) == 1, category
            assert units[0].is_system_unit, category

    def test_ids_are_unique(self):
        ids = [u.id for u in get_all_builtin_units()]
        assert len(ids) == len(set(ids))

    def test_units_are_in_their_category(self):
        for category, units in BUILTIN_UNITS.items():
            assert all(u.category == category for u in units)


class TestListing:
    """units_for ordering and merging."""

    def test_categories_in_declaration_order(self, catalog):
        categories = catalog.categories()
        assert categories[0] == MeasurementCategory.LENGTH
        assert categories[-1] == MeasurementCategory.FUEL_CONSUMPTION
        assert len(categories) == 12

    def test_system_unit_first_then_by_name(self, catalog):
        """Base unit leads, the rest sort by display name."""
        units = catalog.units_for(MeasurementCategory.LENGTH)
        assert units[0].id == "length.meter"
        names = [u.name for u in units[1:]]
        assert names == sorted(names)

    def test_custom_units_are_merged(self, catalog, cubit):
        units = catalog.units_for(MeasurementCategory.LENGTH, [cubit])
        assert units[0].id == "length.meter"
        assert cubit.definition in units
        names = [u.name for u in units[1:]]
        assert names == sorted(names)

    def test_custom_units_of_other_categories_are_excluded(self, catalog, cubit):
        units = catalog.units_for(MeasurementCategory.MASS, [cubit])
        assert all(not u.is_custom for u in units)

    def test_all_units_flattens_tables(self, catalog):
        assert len(catalog.all_units()) == len(get_all_builtin_units())


class TestResolve:
    """Identity dereferencing."""

    def test_resolve_predefined(self, catalog):
        meter = catalog.resolve(PredefinedIdentity("length.meter"))
        assert meter is not None
        assert meter.symbol == "m"

    def test_resolve_unknown_predefined_is_none(self, catalog):
        assert catalog.resolve(PredefinedIdentity("length.furlong")) is None

    def test_resolve_custom(self, catalog, cubit):
        definition = catalog.resolve(cubit.identity, [cubit])
        assert definition is not None
        assert definition.id == "custom." + str(cubit.id).upper()
        assert definition.converter == LinearConverter(0.4572)
        assert not definition.is_system_unit

    def test_resolve_deleted_custom_is_none(self, catalog, cubit):
        assert catalog.resolve(cubit.identity, []) is None

    def test_base_unit_for_every_category(self, catalog):
        for category in MeasurementCategory:
            base = catalog.base_unit_for(category)
            assert base.is_system_unit
            assert base.category == category

    def test_base_unit_missing_raises_key_error(self):
        empty = UnitCatalog(builtin_units={})
        with pytest.raises(KeyError):
            empty.base_unit_for(MeasurementCategory.LENGTH)


class TestIdentity:
    """Durable identities derived from definitions."""

    def test_predefined_identity(self, catalog):
        meter = catalog.base_unit_for(MeasurementCategory.LENGTH)
        assert catalog.identity_for(meter) == PredefinedIdentity("length.meter")

    def test_custom_identity_round_trip(self, catalog, cubit):
        assert identity_for(cubit.definition) == CustomIdentity(cubit.id)

    def test_custom_prefix_without_uuid_is_predefined(self):
        odd = UnitDefinition(
            id="custom.not-a-uuid",
            category=MeasurementCategory.LENGTH,
            name="Odd",
            symbol="odd",
            converter=LinearConverter(1.0),
        )
        assert identity_for(odd) == PredefinedIdentity("custom.not-a-uuid")

    def test_raw_values(self):
        unit_uuid = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert PredefinedIdentity("length.meter").raw_value == "length.meter"
        assert CustomIdentity(unit_uuid).raw_value == "custom.12345678-1234-5678-1234-567812345678"


class TestSymbolConflicts:
    """Symbol uniqueness checks."""

    def test_builtin_symbol_conflicts_case_insensitively(self, catalog):
        assert catalog.has_symbol_conflict("KM", MeasurementCategory.LENGTH)

    def test_candidate_is_trimmed(self, catalog):
        assert catalog.has_symbol_conflict("  km ", MeasurementCategory.LENGTH)

    def test_symbol_is_free_in_another_category(self, catalog):
        assert not catalog.has_symbol_conflict("km", MeasurementCategory.MASS)

    def test_custom_symbol_conflicts(self, catalog, cubit):
        assert catalog.has_symbol_conflict("CBT", MeasurementCategory.LENGTH, [cubit])

    def test_existing_custom_symbol_is_trimmed(self, catalog, cubit):
        cubit.symbol = " zz "
        assert catalog.has_symbol_conflict("zz", MeasurementCategory.LENGTH, [cubit])

    def test_excluded_custom_unit_is_skipped(self, catalog, cubit):
        assert not catalog.has_symbol_conflict(
            "cbt", MeasurementCategory.LENGTH, [cubit], excluding_id=cubit.id
        )

    def test_no_unicode_normalization(self, catalog):
        """Micro sign and Greek mu are different symbols."""
        assert catalog.has_symbol_conflict("µm", MeasurementCategory.LENGTH)
        assert not catalog.has_symbol_conflict("μm", MeasurementCategory.LENGTH)


class TestCustomUnitSupport:
    """Which categories accept custom units."""

    def test_linear_categories_are_supported(self, catalog):
        assert catalog.supports_custom_units(MeasurementCategory.LENGTH)
        assert catalog.supports_custom_units(MeasurementCategory.FUEL_CONSUMPTION)

    def test_temperature_is_not_supported(self, catalog):
        assert not catalog.supports_custom_units(MeasurementCategory.TEMPERATURE)
