"""
Value types for the unit model.

Designed so that every piece of unit metadata is an immutable value:
- Categories partition units into mutually convertible groups
- Converter strategies describe how a unit maps to its category base value
- Unit definitions bundle identity, display data and converter
- Unit identities are durable references stored in presets and history

Converters and identities are tagged unions expressed as frozen dataclasses.
Consumers dispatch on the concrete class.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


CUSTOM_ID_PREFIX = "custom."


class MeasurementCategory(Enum):
    """Supported conversion categories (values are persisted)."""
    LENGTH = "Length"
    MASS = "Mass"
    VOLUME = "Volume"
    AREA = "Area"
    SPEED = "Speed"
    TEMPERATURE = "Temperature"
    PRESSURE = "Pressure"
    ENERGY = "Energy"
    FORCE = "Force"
    TIME = "Time"
    ANGLE = "Angle"
    FUEL_CONSUMPTION = "Fuel Consumption"

    @property
    def title(self) -> str:
        """Human readable title."""
        return self.value


class TemperatureUnit(Enum):
    """Temperature scales with non-linear (offset) conversion."""
    KELVIN = "kelvin"
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"


# =============================================================================
# Converter Strategies
# =============================================================================

@dataclass(frozen=True)
class LinearConverter:
    """base = value * multiplier"""
    multiplier: float


@dataclass(frozen=True)
class AffineConverter:
    """base = value * scale + offset"""
    scale: float
    offset: float


@dataclass(frozen=True)
class ReciprocalConverter:
    """base = multiplier / value (inverted scales such as L/100km)."""
    multiplier: float


@dataclass(frozen=True)
class TemperatureConverter:
    """Temperature scale conversion, base value is always Kelvin."""
    unit: TemperatureUnit


UnitConverter = Union[LinearConverter, AffineConverter, ReciprocalConverter, TemperatureConverter]


# =============================================================================
# Unit Definitions
# =============================================================================

@dataclass(frozen=True)
class UnitDefinition:
    """
    Descriptor for both predefined and custom units.

    Attributes:
        id: Unique id within the category (e.g. "length.meter")
        category: Category the unit belongs to
        name: Display name, also the sort key in unit lists
        symbol: Display symbol (e.g. "km")
        converter: Strategy mapping values to the category base value
        is_system_unit: True only for the category base unit
    """
    id: str
    category: MeasurementCategory
    name: str
    symbol: str
    converter: UnitConverter
    is_system_unit: bool = False

    @property
    def is_custom(self) -> bool:
        return self.id.startswith(CUSTOM_ID_PREFIX)


@dataclass
class CustomUnit:
    """
    User defined unit.

    Custom units are always linear: `multiplier_to_base` base units make up
    one custom unit.
    """
    category: MeasurementCategory
    name: str
    symbol: str
    multiplier_to_base: float
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def definition(self) -> UnitDefinition:
        """Synthetic definition used by the catalog and the engine."""
        return UnitDefinition(
            id=custom_unit_id(self.id),
            category=self.category,
            name=self.name,
            symbol=self.symbol,
            converter=LinearConverter(self.multiplier_to_base),
        )

    @property
    def identity(self) -> "CustomIdentity":
        return CustomIdentity(self.id)


def custom_unit_id(unit_uuid: uuid.UUID) -> str:
    """Definition id for a custom unit: "custom." + uppercase UUID."""
    return CUSTOM_ID_PREFIX + str(unit_uuid).upper()


# =============================================================================
# Unit Identities
# =============================================================================

@dataclass(frozen=True)
class PredefinedIdentity:
    """Reference to a built-in unit by id."""
    unit_id: str

    @property
    def raw_value(self) -> str:
        return self.unit_id


@dataclass(frozen=True)
class CustomIdentity:
    """Reference to a custom unit by UUID."""
    uuid: uuid.UUID

    @property
    def raw_value(self) -> str:
        return custom_unit_id(self.uuid)


UnitIdentity = Union[PredefinedIdentity, CustomIdentity]


def identity_for(definition: UnitDefinition) -> UnitIdentity:
    """
    Derive the durable identity of a definition.

    Ids carrying the custom prefix followed by a valid UUID map to a
    CustomIdentity; everything else is treated as predefined.
    """
    if definition.id.startswith(CUSTOM_ID_PREFIX):
        try:
            return CustomIdentity(uuid.UUID(definition.id[len(CUSTOM_ID_PREFIX):]))
        except ValueError:
            pass
    return PredefinedIdentity(definition.id)
