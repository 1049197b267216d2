"""
JSON codec for persisted toolkit data.

This is the wire contract shared by every storage backend:
- Unit identities:  {"type": "pre" | "custom", "value": str}
- Converters:       {"type": "linear" | "affine" | "reciprocal" | "temperature", ...}
- Records use camelCase keys, ISO-8601 UTC timestamps and uppercase UUIDs

Timestamps are written to whole seconds ("2024-03-01T12:30:05Z"), the form
Foundation's ISO-8601 date strategy reads; fractional seconds and other
offsets are accepted on decode. Settings write `defaultUnits` as an object
keyed by category. The flat [key, value, key, value, ...] array Foundation
produces for enum-keyed dictionaries is accepted on decode but never written,
so settings blobs are not byte-compatible with that encoder.

Decoders raise CodecError on malformed input. The persistence gateway turns
that into a typed default.
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from measurekit.core.models import (
    ConversionHistoryEntry,
    ConversionPreset,
    CounterItem,
    StopwatchLog,
    ToolkitSettings,
    UnitPreference,
)
from measurekit.core.types import (
    AffineConverter,
    CustomIdentity,
    CustomUnit,
    LinearConverter,
    MeasurementCategory,
    PredefinedIdentity,
    ReciprocalConverter,
    TemperatureConverter,
    TemperatureUnit,
    UnitConverter,
    UnitDefinition,
    UnitIdentity,
)


T = TypeVar("T")


class CodecError(ValueError):
    """Raised when a payload cannot be decoded."""


# =============================================================================
# Primitive Helpers
# =============================================================================

def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise CodecError(f"Expected an object, got {type(data).__name__}")
    if key not in data:
        raise CodecError(f"Missing field '{key}'")
    return data[key]


def _number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CodecError(f"Field '{key}' must be a number, got {value!r}")
    return float(value)


def _optional_number(data: dict, key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    return _number(value, key)


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise CodecError(f"Field '{key}' must be a string, got {value!r}")
    return value


def _uuid(value: Any, key: str = "id") -> uuid.UUID:
    try:
        return uuid.UUID(_string(value, key))
    except ValueError as e:
        raise CodecError(f"Field '{key}' is not a UUID: {value!r}") from e


def encode_uuid(value: uuid.UUID) -> str:
    return str(value).upper()


def encode_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="seconds")
    return text.replace("+00:00", "Z")


def decode_datetime(value: Any, key: str = "timestamp") -> datetime:
    text = _string(value, key)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise CodecError(f"Field '{key}' is not an ISO-8601 date: {text!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def decode_category(value: Any) -> MeasurementCategory:
    try:
        return MeasurementCategory(value)
    except ValueError as e:
        raise CodecError(f"Unknown category: {value!r}") from e


# =============================================================================
# Tagged Unions
# =============================================================================

def encode_identity(identity: UnitIdentity) -> dict:
    if isinstance(identity, PredefinedIdentity):
        return {"type": "pre", "value": identity.unit_id}
    if isinstance(identity, CustomIdentity):
        return {"type": "custom", "value": encode_uuid(identity.uuid)}
    raise TypeError(f"Unsupported unit identity: {identity!r}")


def decode_identity(data: Any) -> UnitIdentity:
    kind = _require(data, "type")
    value = _require(data, "value")
    if kind == "pre":
        return PredefinedIdentity(_string(value, "value"))
    if kind == "custom":
        return CustomIdentity(_uuid(value, "value"))
    raise CodecError(f"Unexpected unit identity type: {kind!r}")


def encode_converter(converter: UnitConverter) -> dict:
    if isinstance(converter, LinearConverter):
        return {"type": "linear", "multiplier": converter.multiplier}
    if isinstance(converter, AffineConverter):
        return {"type": "affine", "scale": converter.scale, "offset": converter.offset}
    if isinstance(converter, ReciprocalConverter):
        return {"type": "reciprocal", "multiplier": converter.multiplier}
    if isinstance(converter, TemperatureConverter):
        return {"type": "temperature", "unit": converter.unit.value}
    raise TypeError(f"Unsupported converter: {converter!r}")


def decode_converter(data: Any) -> UnitConverter:
    kind = _require(data, "type")
    if kind == "linear":
        return LinearConverter(_number(_require(data, "multiplier"), "multiplier"))
    if kind == "affine":
        return AffineConverter(
            scale=_number(_require(data, "scale"), "scale"),
            offset=_number(_require(data, "offset"), "offset"),
        )
    if kind == "reciprocal":
        return ReciprocalConverter(_number(_require(data, "multiplier"), "multiplier"))
    if kind == "temperature":
        unit = _require(data, "unit")
        try:
            return TemperatureConverter(TemperatureUnit(unit))
        except ValueError as e:
            raise CodecError(f"Unknown temperature unit: {unit!r}") from e
    raise CodecError(f"Unsupported converter type: {kind!r}")


# =============================================================================
# Records
# =============================================================================

def encode_definition(unit: UnitDefinition) -> dict:
    return {
        "id": unit.id,
        "category": unit.category.value,
        "name": unit.name,
        "symbol": unit.symbol,
        "converter": encode_converter(unit.converter),
        "isSystemUnit": unit.is_system_unit,
    }


def decode_definition(data: Any) -> UnitDefinition:
    return UnitDefinition(
        id=_string(_require(data, "id"), "id"),
        category=decode_category(_require(data, "category")),
        name=_string(_require(data, "name"), "name"),
        symbol=_string(_require(data, "symbol"), "symbol"),
        converter=decode_converter(_require(data, "converter")),
        is_system_unit=bool(data.get("isSystemUnit", False)),
    )


def encode_custom_unit(unit: CustomUnit) -> dict:
    return {
        "id": encode_uuid(unit.id),
        "category": unit.category.value,
        "name": unit.name,
        "symbol": unit.symbol,
        "multiplierToBase": unit.multiplier_to_base,
    }


def decode_custom_unit(data: Any) -> CustomUnit:
    return CustomUnit(
        id=_uuid(_require(data, "id")),
        category=decode_category(_require(data, "category")),
        name=_string(_require(data, "name"), "name"),
        symbol=_string(_require(data, "symbol"), "symbol"),
        multiplier_to_base=_number(_require(data, "multiplierToBase"), "multiplierToBase"),
    )


def encode_preset(preset: ConversionPreset) -> dict:
    data = {
        "id": encode_uuid(preset.id),
        "title": preset.title,
        "category": preset.category.value,
        "fromUnit": encode_identity(preset.from_unit),
        "toUnit": encode_identity(preset.to_unit),
    }
    if preset.last_input_value is not None:
        data["lastInputValue"] = preset.last_input_value
    return data


def decode_preset(data: Any) -> ConversionPreset:
    return ConversionPreset(
        id=_uuid(_require(data, "id")),
        title=_string(_require(data, "title"), "title"),
        category=decode_category(_require(data, "category")),
        from_unit=decode_identity(_require(data, "fromUnit")),
        to_unit=decode_identity(_require(data, "toUnit")),
        last_input_value=_optional_number(data, "lastInputValue"),
    )


def encode_history_entry(entry: ConversionHistoryEntry) -> dict:
    return {
        "id": encode_uuid(entry.id),
        "timestamp": encode_datetime(entry.timestamp),
        "category": entry.category.value,
        "fromUnit": encode_identity(entry.from_unit),
        "toUnit": encode_identity(entry.to_unit),
        "inputValue": entry.input_value,
        "outputValue": entry.output_value,
        "precision": entry.precision,
    }


def decode_history_entry(data: Any) -> ConversionHistoryEntry:
    return ConversionHistoryEntry(
        id=_uuid(_require(data, "id")),
        timestamp=decode_datetime(_require(data, "timestamp")),
        category=decode_category(_require(data, "category")),
        from_unit=decode_identity(_require(data, "fromUnit")),
        to_unit=decode_identity(_require(data, "toUnit")),
        input_value=_number(_require(data, "inputValue"), "inputValue"),
        output_value=_number(_require(data, "outputValue"), "outputValue"),
        precision=int(_number(_require(data, "precision"), "precision")),
    )


def encode_counter(counter: CounterItem) -> dict:
    data = {
        "id": encode_uuid(counter.id),
        "name": counter.name,
        "value": counter.value,
        "step": counter.step,
        "hapticsEnabled": counter.haptics_enabled,
    }
    if counter.lower_bound is not None:
        data["lowerBound"] = counter.lower_bound
    if counter.upper_bound is not None:
        data["upperBound"] = counter.upper_bound
    return data


def decode_counter(data: Any) -> CounterItem:
    return CounterItem(
        id=_uuid(_require(data, "id")),
        name=_string(_require(data, "name"), "name"),
        value=_number(_require(data, "value"), "value"),
        step=_number(_require(data, "step"), "step"),
        lower_bound=_optional_number(data, "lowerBound"),
        upper_bound=_optional_number(data, "upperBound"),
        haptics_enabled=bool(_require(data, "hapticsEnabled")),
    )


def encode_stopwatch_log(log: StopwatchLog) -> dict:
    return {
        "id": encode_uuid(log.id),
        "recordedAt": encode_datetime(log.recorded_at),
        "duration": log.duration,
    }


def decode_stopwatch_log(data: Any) -> StopwatchLog:
    return StopwatchLog(
        id=_uuid(_require(data, "id")),
        recorded_at=decode_datetime(_require(data, "recordedAt"), "recordedAt"),
        duration=_number(_require(data, "duration"), "duration"),
    )


def encode_settings(settings: ToolkitSettings) -> dict:
    return {
        "precision": settings.precision,
        "groupingSeparatorEnabled": settings.grouping_separator_enabled,
        "defaultUnits": {
            category.value: {
                "from": encode_identity(pref.from_unit),
                "to": encode_identity(pref.to_unit),
            }
            for category, pref in settings.default_units.items()
        },
    }


def _decode_preference(value: Any) -> UnitPreference:
    return UnitPreference(
        from_unit=decode_identity(_require(value, "from")),
        to_unit=decode_identity(_require(value, "to")),
    )


def _default_unit_pairs(raw: Any) -> list[tuple[Any, Any]]:
    if isinstance(raw, dict):
        return list(raw.items())
    # Foundation writes enum-keyed dictionaries as [key, value, key, value, ...]
    if isinstance(raw, list):
        if len(raw) % 2:
            raise CodecError("Field 'defaultUnits' has an odd number of entries")
        return list(zip(raw[::2], raw[1::2]))
    raise CodecError("Field 'defaultUnits' must be an object or a key/value array")


def decode_settings(data: Any) -> ToolkitSettings:
    default_units = {
        decode_category(key): _decode_preference(value)
        for key, value in _default_unit_pairs(_require(data, "defaultUnits"))
    }
    return ToolkitSettings(
        precision=int(_number(_require(data, "precision"), "precision")),
        grouping_separator_enabled=bool(_require(data, "groupingSeparatorEnabled")),
        default_units=default_units,
    )


# =============================================================================
# Blob Helpers
# =============================================================================

def dumps(payload: Any) -> bytes:
    """Serialize an encoded payload to a UTF-8 JSON blob."""
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def loads(blob: bytes) -> Any:
    """Parse a JSON blob."""
    try:
        return json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CodecError(f"Malformed blob: {e}") from e
    except RecursionError as e:
        raise CodecError("Malformed blob: nested too deeply") from e


def encode_list(items: list[T], encoder: Callable[[T], dict]) -> bytes:
    return dumps([encoder(item) for item in items])


def decode_list(blob: bytes, decoder: Callable[[Any], T]) -> list[T]:
    data = loads(blob)
    if not isinstance(data, list):
        raise CodecError(f"Expected a list, got {type(data).__name__}")
    return [decoder(item) for item in data]
