"""
Built-in unit tables.

Multipliers convert one unit into the category base unit. The literal values
are part of the persisted contract: stored presets and history reference
these ids, and round-trip behaviour depends on the exact doubles.

References:
    - NIST SP 811, "Guide for the Use of the International System of Units"
    - International Yard and Pound Agreement (1959)
    - IAU 2012 light-year definition (Julian year)
"""

import math

from measurekit.core.types import (
    LinearConverter,
    MeasurementCategory,
    ReciprocalConverter,
    TemperatureConverter,
    TemperatureUnit,
    UnitDefinition,
)


def _linear(category: MeasurementCategory, unit_id: str, name: str, symbol: str,
            multiplier: float, is_system_unit: bool = False) -> UnitDefinition:
    return UnitDefinition(
        id=unit_id,
        category=category,
        name=name,
        symbol=symbol,
        converter=LinearConverter(multiplier),
        is_system_unit=is_system_unit,
    )


_L = MeasurementCategory.LENGTH
_M = MeasurementCategory.MASS
_V = MeasurementCategory.VOLUME
_A = MeasurementCategory.AREA
_S = MeasurementCategory.SPEED
_P = MeasurementCategory.PRESSURE
_E = MeasurementCategory.ENERGY
_F = MeasurementCategory.FORCE
_T = MeasurementCategory.TIME
_ANG = MeasurementCategory.ANGLE
_FUEL = MeasurementCategory.FUEL_CONSUMPTION


# =============================================================================
# Unit Tables (first entry of each list is the base unit)
# =============================================================================

LENGTH_UNITS = [
    _linear(_L, "length.meter", "Meter", "m", 1.0, is_system_unit=True),
    _linear(_L, "length.kilometer", "Kilometer", "km", 1_000.0),
    _linear(_L, "length.centimeter", "Centimeter", "cm", 0.01),
    _linear(_L, "length.millimeter", "Millimeter", "mm", 0.001),
    _linear(_L, "length.micrometer", "Micrometer", "µm", 0.000001),
    _linear(_L, "length.nanometer", "Nanometer", "nm", 0.000000001),
    _linear(_L, "length.mile", "Mile", "mi", 1_609.344),
    _linear(_L, "length.yard", "Yard", "yd", 0.9144),
    _linear(_L, "length.foot", "Foot", "ft", 0.3048),
    _linear(_L, "length.inch", "Inch", "in", 0.0254),
    _linear(_L, "length.nauticalMile", "Nautical Mile", "NM", 1_852.0),
    _linear(_L, "length.lightYear", "Light Year", "ly", 9_460_730_472_580_800.0),
]

MASS_UNITS = [
    _linear(_M, "mass.kilogram", "Kilogram", "kg", 1.0, is_system_unit=True),
    _linear(_M, "mass.gram", "Gram", "g", 0.001),
    _linear(_M, "mass.milligram", "Milligram", "mg", 0.000001),
    _linear(_M, "mass.microgram", "Microgram", "µg", 0.000000001),
    _linear(_M, "mass.metricTon", "Metric Ton", "t", 1_000.0),
    _linear(_M, "mass.pound", "Pound", "lb", 0.45359237),
    _linear(_M, "mass.ounce", "Ounce", "oz", 0.028349523125),
    _linear(_M, "mass.stone", "Stone", "st", 6.35029318),
]

VOLUME_UNITS = [
    _linear(_V, "volume.cubicMeter", "Cubic Meter", "m³", 1.0, is_system_unit=True),
    _linear(_V, "volume.liter", "Liter", "L", 0.001),
    _linear(_V, "volume.milliliter", "Milliliter", "mL", 0.000001),
    _linear(_V, "volume.usGallon", "US Gallon", "gal", 0.003785411784),
    _linear(_V, "volume.usQuart", "US Quart", "qt", 0.000946352946),
    _linear(_V, "volume.usPint", "US Pint", "pt", 0.000473176473),
    _linear(_V, "volume.cubicFoot", "Cubic Foot", "ft³", 0.028316846592),
    _linear(_V, "volume.cubicInch", "Cubic Inch", "in³", 0.000016387064),
]

AREA_UNITS = [
    _linear(_A, "area.squareMeter", "Square Meter", "m²", 1.0, is_system_unit=True),
    _linear(_A, "area.squareKilometer", "Square Kilometer", "km²", 1_000_000.0),
    _linear(_A, "area.squareCentimeter", "Square Centimeter", "cm²", 0.0001),
    _linear(_A, "area.squareMillimeter", "Square Millimeter", "mm²", 0.000001),
    _linear(_A, "area.hectare", "Hectare", "ha", 10_000.0),
    _linear(_A, "area.are", "Are", "a", 100.0),
    _linear(_A, "area.squareMile", "Square Mile", "mi²", 2_589_988.110336),
    _linear(_A, "area.squareYard", "Square Yard", "yd²", 0.83612736),
    _linear(_A, "area.squareFoot", "Square Foot", "ft²", 0.09290304),
    _linear(_A, "area.squareInch", "Square Inch", "in²", 0.00064516),
    _linear(_A, "area.acre", "Acre", "ac", 4_046.8564224),
]

SPEED_UNITS = [
    _linear(_S, "speed.meterPerSecond", "Meter per Second", "m/s", 1.0, is_system_unit=True),
    _linear(_S, "speed.kilometerPerHour", "Kilometer per Hour", "km/h", 0.2777777778),
    _linear(_S, "speed.milePerHour", "Mile per Hour", "mph", 0.44704),
    _linear(_S, "speed.knot", "Knot", "kn", 0.5144444444),
    _linear(_S, "speed.footPerSecond", "Foot per Second", "ft/s", 0.3048),
    _linear(_S, "speed.mach", "Mach (sea level)", "Ma", 340.29),
]

TEMPERATURE_UNITS = [
    UnitDefinition("temperature.kelvin", MeasurementCategory.TEMPERATURE, "Kelvin", "K",
                   TemperatureConverter(TemperatureUnit.KELVIN), is_system_unit=True),
    UnitDefinition("temperature.celsius", MeasurementCategory.TEMPERATURE, "Celsius", "°C",
                   TemperatureConverter(TemperatureUnit.CELSIUS)),
    UnitDefinition("temperature.fahrenheit", MeasurementCategory.TEMPERATURE, "Fahrenheit", "°F",
                   TemperatureConverter(TemperatureUnit.FAHRENHEIT)),
]

PRESSURE_UNITS = [
    _linear(_P, "pressure.pascal", "Pascal", "Pa", 1.0, is_system_unit=True),
    _linear(_P, "pressure.kilopascal", "Kilopascal", "kPa", 1_000.0),
    _linear(_P, "pressure.bar", "Bar", "bar", 100_000.0),
    _linear(_P, "pressure.atmosphere", "Standard Atmosphere", "atm", 101_325.0),
    _linear(_P, "pressure.mmHg", "Millimeter of Mercury", "mmHg", 133.322),
    _linear(_P, "pressure.psi", "Pound per Square Inch", "psi", 6_894.757293168),
]

ENERGY_UNITS = [
    _linear(_E, "energy.joule", "Joule", "J", 1.0, is_system_unit=True),
    _linear(_E, "energy.kilojoule", "Kilojoule", "kJ", 1_000.0),
    _linear(_E, "energy.calorie", "Calorie", "cal", 4.184),
    _linear(_E, "energy.kilocalorie", "Kilocalorie", "kcal", 4_184.0),
    _linear(_E, "energy.wattHour", "Watt Hour", "Wh", 3_600.0),
    _linear(_E, "energy.kilowattHour", "Kilowatt Hour", "kWh", 3_600_000.0),
    _linear(_E, "energy.electronVolt", "Electron Volt", "eV", 1.602176634e-19),
]

FORCE_UNITS = [
    _linear(_F, "force.newton", "Newton", "N", 1.0, is_system_unit=True),
    _linear(_F, "force.kilonewton", "Kilonewton", "kN", 1_000.0),
    _linear(_F, "force.poundForce", "Pound-force", "lbf", 4.4482216152605),
    _linear(_F, "force.kilogramForce", "Kilogram-force", "kgf", 9.80665),
    _linear(_F, "force.dyne", "Dyne", "dyn", 0.00001),
]

TIME_UNITS = [
    _linear(_T, "time.second", "Second", "s", 1.0, is_system_unit=True),
    _linear(_T, "time.millisecond", "Millisecond", "ms", 0.001),
    _linear(_T, "time.minute", "Minute", "min", 60.0),
    _linear(_T, "time.hour", "Hour", "h", 3_600.0),
    _linear(_T, "time.day", "Day", "d", 86_400.0),
    _linear(_T, "time.week", "Week", "wk", 604_800.0),
    _linear(_T, "time.month", "Month", "mo", 2_629_746.0),   # mean Gregorian month
    _linear(_T, "time.year", "Year", "yr", 31_556_952.0),    # mean Gregorian year
]

ANGLE_UNITS = [
    _linear(_ANG, "angle.radian", "Radian", "rad", 1.0, is_system_unit=True),
    _linear(_ANG, "angle.degree", "Degree", "°", math.pi / 180),
    _linear(_ANG, "angle.gradian", "Gradian", "grad", math.pi / 200),
    _linear(_ANG, "angle.arcminute", "Arcminute", "′", math.pi / 10_800),
    _linear(_ANG, "angle.arcsecond", "Arcsecond", "″", math.pi / 648_000),
    _linear(_ANG, "angle.turn", "Turn", "turn", 2 * math.pi),
]

FUEL_CONSUMPTION_UNITS = [
    _linear(_FUEL, "fuel.kilometerPerLiter", "Kilometer per Liter", "km/L", 1.0, is_system_unit=True),
    UnitDefinition("fuel.literPer100Km", _FUEL, "Liter per 100 km", "L/100km",
                   ReciprocalConverter(100.0)),
    _linear(_FUEL, "fuel.milePerGallonUS", "Mile per Gallon (US)", "mpg", 1.609344 / 3.785411784),
    _linear(_FUEL, "fuel.milePerGallonUK", "Mile per Gallon (UK)", "mpg(UK)", 1.609344 / 4.54609),
    UnitDefinition("fuel.literPerKilometer", _FUEL, "Liter per Kilometer", "L/km",
                   ReciprocalConverter(1.0)),
]


# All tables keyed by category, in category declaration order
BUILTIN_UNITS: dict[MeasurementCategory, list[UnitDefinition]] = {
    MeasurementCategory.LENGTH: LENGTH_UNITS,
    MeasurementCategory.MASS: MASS_UNITS,
    MeasurementCategory.VOLUME: VOLUME_UNITS,
    MeasurementCategory.AREA: AREA_UNITS,
    MeasurementCategory.SPEED: SPEED_UNITS,
    MeasurementCategory.TEMPERATURE: TEMPERATURE_UNITS,
    MeasurementCategory.PRESSURE: PRESSURE_UNITS,
    MeasurementCategory.ENERGY: ENERGY_UNITS,
    MeasurementCategory.FORCE: FORCE_UNITS,
    MeasurementCategory.TIME: TIME_UNITS,
    MeasurementCategory.ANGLE: ANGLE_UNITS,
    MeasurementCategory.FUEL_CONSUMPTION: FUEL_CONSUMPTION_UNITS,
}


def get_builtin_units(category: MeasurementCategory) -> list[UnitDefinition]:
    """Get the built-in units of a category (table order)."""
    return list(BUILTIN_UNITS.get(category, []))


def get_all_builtin_units() -> list[UnitDefinition]:
    """Get every built-in unit across all categories."""
    return [unit for units in BUILTIN_UNITS.values() for unit in units]


def get_builtin_unit(unit_id: str) -> UnitDefinition | None:
    """Get a built-in unit by id."""
    for unit in get_all_builtin_units():
        if unit.id == unit_id:
            return unit
    return None
