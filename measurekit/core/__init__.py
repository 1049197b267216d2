"""
Core unit model and conversion engine.

Catalog, validation, persistence and the state store import the built-in
unit tables and are imported from their own modules.
"""

from .types import (
    MeasurementCategory,
    TemperatureUnit,
    LinearConverter,
    AffineConverter,
    ReciprocalConverter,
    TemperatureConverter,
    UnitConverter,
    UnitDefinition,
    CustomUnit,
    PredefinedIdentity,
    CustomIdentity,
    UnitIdentity,
    identity_for,
)
from .models import (
    ConversionPreset,
    ConversionHistoryEntry,
    CounterItem,
    StopwatchLog,
    UnitPreference,
    ToolkitSettings,
)
from .conversion import (
    EPSILON,
    convert,
    to_base,
    from_base,
    is_valid_result,
)

__all__ = [
    # Types
    'MeasurementCategory',
    'TemperatureUnit',
    'LinearConverter',
    'AffineConverter',
    'ReciprocalConverter',
    'TemperatureConverter',
    'UnitConverter',
    'UnitDefinition',
    'CustomUnit',
    'PredefinedIdentity',
    'CustomIdentity',
    'UnitIdentity',
    'identity_for',
    # Records
    'ConversionPreset',
    'ConversionHistoryEntry',
    'CounterItem',
    'StopwatchLog',
    'UnitPreference',
    'ToolkitSettings',
    # Conversion
    'EPSILON',
    'convert',
    'to_base',
    'from_base',
    'is_valid_result',
]
