"""Data modules - Built-in unit tables."""

from .unit_tables import (
    ANGLE_UNITS,
    AREA_UNITS,
    BUILTIN_UNITS,
    ENERGY_UNITS,
    FORCE_UNITS,
    FUEL_CONSUMPTION_UNITS,
    LENGTH_UNITS,
    MASS_UNITS,
    PRESSURE_UNITS,
    SPEED_UNITS,
    TEMPERATURE_UNITS,
    TIME_UNITS,
    VOLUME_UNITS,
    get_all_builtin_units,
    get_builtin_unit,
    get_builtin_units,
)

__all__ = [
    # Tables
    "BUILTIN_UNITS",
    "LENGTH_UNITS",
    "MASS_UNITS",
    "VOLUME_UNITS",
    "AREA_UNITS",
    "SPEED_UNITS",
    "TEMPERATURE_UNITS",
    "PRESSURE_UNITS",
    "ENERGY_UNITS",
    "FORCE_UNITS",
    "TIME_UNITS",
    "ANGLE_UNITS",
    "FUEL_CONSUMPTION_UNITS",
    # Functions
    "get_builtin_units",
    "get_all_builtin_units",
    "get_builtin_unit",
]
