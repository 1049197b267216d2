"""
Unit catalog.

Merges the built-in unit tables with user defined custom units and answers
the lookup questions the converter and the state store ask:
- which units belong to a category (sorted for display)
- which definition an identity refers to
- whether a symbol is already taken in a category
"""

import uuid
from collections.abc import Iterable

from measurekit.core.types import (
    CustomIdentity,
    CustomUnit,
    LinearConverter,
    MeasurementCategory,
    PredefinedIdentity,
    UnitDefinition,
    UnitIdentity,
    identity_for,
)
from measurekit.data.unit_tables import BUILTIN_UNITS


class UnitCatalog:
    """
    Catalog of predefined unit definitions, merged on demand with custom units.

    The catalog holds no mutable state: custom units are always passed in
    by the caller (the state store owns them).

    Usage:
        catalog = UnitCatalog()
        units = catalog.units_for(MeasurementCategory.LENGTH, custom_units)
        meter = catalog.resolve(PredefinedIdentity("length.meter"), custom_units)
    """

    def __init__(self, builtin_units: dict[MeasurementCategory, list[UnitDefinition]] | None = None):
        tables = BUILTIN_UNITS if builtin_units is None else builtin_units
        self._predefined: dict[MeasurementCategory, tuple[UnitDefinition, ...]] = {
            category: tuple(units) for category, units in tables.items()
        }

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def categories(self) -> list[MeasurementCategory]:
        """All categories in declaration order."""
        return list(MeasurementCategory)

    def all_units(self) -> list[UnitDefinition]:
        """Every predefined unit across all categories."""
        return [unit for units in self._predefined.values() for unit in units]

    def units_for(self, category: MeasurementCategory,
                  custom_units: Iterable[CustomUnit] = ()) -> list[UnitDefinition]:
        """
        Units available in a category.

        Args:
            category: Category to list
            custom_units: Custom units (all categories, filtered here)

        Returns:
            Base unit first, remaining units sorted by display name
        """
        predefined = list(self._predefined.get(category, ()))
        custom = [unit.definition for unit in custom_units if unit.category == category]
        return sorted(predefined + custom, key=lambda unit: (not unit.is_system_unit, unit.name))

    def resolve(self, identity: UnitIdentity,
                custom_units: Iterable[CustomUnit] = ()) -> UnitDefinition | None:
        """
        Dereference an identity.

        Returns None when the unit no longer exists (e.g. a deleted custom
        unit still referenced by a preset).
        """
        if isinstance(identity, PredefinedIdentity):
            for unit in self.all_units():
                if unit.id == identity.unit_id:
                    return unit
            return None
        if isinstance(identity, CustomIdentity):
            for unit in custom_units:
                if unit.id == identity.uuid:
                    return unit.definition
            return None
        raise TypeError(f"Unsupported unit identity: {identity!r}")

    def base_unit_for(self, category: MeasurementCategory) -> UnitDefinition:
        """The category base unit (is_system_unit)."""
        for unit in self._predefined.get(category, ()):
            if unit.is_system_unit:
                return unit
        raise KeyError(f"No base unit registered for {category.value}")

    def identity_for(self, definition: UnitDefinition) -> UnitIdentity:
        """Durable identity for a definition returned by this catalog."""
        return identity_for(definition)

    # -------------------------------------------------------------------------
    # Custom Unit Support
    # -------------------------------------------------------------------------

    def supports_custom_units(self, category: MeasurementCategory) -> bool:
        """Custom units need a linear base unit (rules out temperature)."""
        try:
            base = self.base_unit_for(category)
        except KeyError:
            return False
        return isinstance(base.converter, LinearConverter)

    def has_symbol_conflict(self, symbol: str, category: MeasurementCategory,
                            custom_units: Iterable[CustomUnit] = (),
                            excluding_id: uuid.UUID | None = None) -> bool:
        """
        Check whether a symbol is already used in a category.

        Both the candidate and existing symbols are trimmed and lowercased.
        No Unicode normalization is applied ("µ" and "μ" differ).

        Args:
            symbol: Candidate symbol
            category: Category to check
            custom_units: Existing custom units
            excluding_id: Custom unit to skip (the unit being edited)
        """
        normalized = symbol.strip().lower()
        for unit in self._predefined.get(category, ()):
            if unit.symbol.lower() == normalized:
                return True
        for unit in custom_units:
            if unit.category != category or unit.id == excluding_id:
                continue
            if unit.symbol.strip().lower() == normalized:
                return True
        return False


# Shared catalog for callers that do not need a custom table
DEFAULT_CATALOG = UnitCatalog()
