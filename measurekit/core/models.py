"""Records owned by the toolkit state store."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from measurekit.core.types import MeasurementCategory, UnitIdentity


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConversionPreset:
    """
    Favourite conversion.

    Identity for favourite toggling is (category, from_unit, to_unit);
    the title is display data only.
    """
    title: str
    category: MeasurementCategory
    from_unit: UnitIdentity
    to_unit: UnitIdentity
    last_input_value: float | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def matches(self, category: MeasurementCategory,
                from_unit: UnitIdentity, to_unit: UnitIdentity) -> bool:
        return (self.category == category
                and self.from_unit == from_unit
                and self.to_unit == to_unit)


@dataclass(frozen=True)
class ConversionHistoryEntry:
    """Recorded conversion. `precision` is the display precision at creation."""
    category: MeasurementCategory
    from_unit: UnitIdentity
    to_unit: UnitIdentity
    input_value: float
    output_value: float
    precision: int
    timestamp: datetime = field(default_factory=utc_now)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class CounterItem:
    """
    Tally counter with optional bounds.

    Stepping past a bound snaps the value to the bound instead of
    rejecting the step.
    """
    name: str
    value: float = 0.0
    step: float = 1.0
    lower_bound: float | None = None
    upper_bound: float | None = None
    haptics_enabled: bool = True
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def increment(self) -> None:
        next_value = self.value + self.step
        if self.upper_bound is not None and next_value > self.upper_bound:
            self.value = self.upper_bound
        else:
            self.value = next_value

    def decrement(self) -> None:
        next_value = self.value - self.step
        if self.lower_bound is not None and next_value < self.lower_bound:
            self.value = self.lower_bound
        else:
            self.value = next_value

    def reset(self) -> None:
        self.value = 0.0


@dataclass(frozen=True)
class StopwatchLog:
    """Stopwatch snapshot, duration in seconds."""
    duration: float
    recorded_at: datetime = field(default_factory=utc_now)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class UnitPreference:
    """Default (from, to) unit pair for a category."""
    from_unit: UnitIdentity
    to_unit: UnitIdentity


@dataclass
class ToolkitSettings:
    """Global converter settings."""
    precision: int = 2
    grouping_separator_enabled: bool = True
    default_units: dict[MeasurementCategory, UnitPreference] = field(default_factory=dict)
