"""
Toolkit state store.

Owns the mutable collections behind the converter (favorites, history,
counters, custom units, stopwatch logs and settings). Every public mutation:

1. runs under the store lock against the in-memory collection
2. encodes a snapshot of the changed collection (still under the lock)
3. hands the blob to the save queue and returns without waiting

The save queue has a single worker, so blobs reach storage in the order the
mutations happened and the last write wins. Failed saves are logged and
dropped; the in-memory state stays authoritative until the next hydrate().
"""

import asyncio
import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import replace
from collections.abc import Iterable

from measurekit.config import ToolkitConfig
from measurekit.core.catalog import DEFAULT_CATALOG, UnitCatalog
from measurekit.core.conversion import convert, is_valid_result
from measurekit.core.models import (
    ConversionHistoryEntry,
    ConversionPreset,
    CounterItem,
    StopwatchLog,
    ToolkitSettings,
    UnitPreference,
)
from measurekit.core.persistence import (
    COUNTERS,
    CUSTOM_UNITS,
    FAVORITES,
    HISTORY,
    SETTINGS,
    STOPWATCH,
    DirectoryBlobStore,
    ToolkitStorage,
)
from measurekit.core.types import (
    CustomUnit,
    MeasurementCategory,
    UnitDefinition,
    UnitIdentity,
)
from measurekit.core.validation import ValidationResult, validate_custom_unit


logger = logging.getLogger(__name__)


class SaveQueue:
    """
    One-way outbound queue of storage writes.

    A single worker thread drains the queue in submission order. Each job
    runs the storage coroutine to completion on its own event loop.
    """

    def __init__(self, storage: ToolkitStorage):
        self._storage = storage
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="measurekit-save")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, name: str, blob: bytes) -> None:
        with self._lock:
            if self._closed:
                logger.debug("Save queue closed, dropping %s write", name)
                return
            future = self._executor.submit(self._write, name, blob)
            self._pending.add(future)
        future.add_done_callback(self._discard)

    def _write(self, name: str, blob: bytes) -> None:
        try:
            asyncio.run(self._storage.write(name, blob))
        except Exception as e:
            logger.warning("Dropped %s save: %s", name, e)

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every queued write finished. False on timeout."""
        with self._lock:
            pending = set(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)
        logger.debug("Save queue stopped")


class ToolkitStateStore:
    """
    Single owner of the toolkit collections.

    Construct one store per application (or per test) and pass it to its
    consumers. Reads return snapshots that callers may keep or modify
    freely without affecting the store.

    Usage:
        store = ToolkitStateStore(ToolkitStorage(MemoryBlobStore()))
        asyncio.run(store.hydrate())
        store.add_history_entry(category, from_id, to_id, 1.0, 1609.344)
        store.close()
    """

    def __init__(self, storage: ToolkitStorage | None = None,
                 catalog: UnitCatalog | None = None,
                 config: ToolkitConfig | None = None):
        if config is None:
            config = storage.config if storage is not None else ToolkitConfig()
        self.config = config
        self.storage = storage if storage is not None else ToolkitStorage(config=config)
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG

        self._lock = threading.RLock()
        self._settings = ToolkitSettings(precision=config.default_precision)
        self._favorites: list[ConversionPreset] = []
        self._history: list[ConversionHistoryEntry] = []
        self._counters: list[CounterItem] = []
        self._custom_units: list[CustomUnit] = []
        self._stopwatch_logs: list[StopwatchLog] = []

        self._saves = SaveQueue(self.storage)

    @classmethod
    def from_config(cls, config: ToolkitConfig) -> "ToolkitStateStore":
        """Store backed by files in config.data_dir, or by memory when unset."""
        blob_store = DirectoryBlobStore(config.data_dir) if config.data_dir else None
        return cls(ToolkitStorage(blob_store, config=config), config=config)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def hydrate(self) -> None:
        """Replace in-memory state with what storage holds."""
        snapshot = await self.storage.load_all()
        snapshot.settings.precision = self.config.clamp_precision(snapshot.settings.precision)
        with self._lock:
            self._settings = snapshot.settings
            self._favorites = snapshot.favorites
            self._history = snapshot.history[:self.config.history_limit]
            self._counters = snapshot.counters
            self._custom_units = snapshot.custom_units
            self._stopwatch_logs = snapshot.stopwatch_logs
        logger.debug(
            "Hydrated store: %d favorites, %d history, %d counters, %d custom units, %d logs",
            len(snapshot.favorites), len(snapshot.history), len(snapshot.counters),
            len(snapshot.custom_units), len(snapshot.stopwatch_logs),
        )

    def wait_for_pending_saves(self, timeout: float | None = None) -> bool:
        return self._saves.wait(timeout)

    def close(self) -> None:
        """Flush queued saves and stop the save worker."""
        self._saves.close()

    def __enter__(self) -> "ToolkitStateStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _schedule_save(self, name: str) -> None:
        # Caller holds self._lock
        collections = {
            SETTINGS: self._settings,
            FAVORITES: self._favorites,
            HISTORY: self._history,
            COUNTERS: self._counters,
            CUSTOM_UNITS: self._custom_units,
            STOPWATCH: self._stopwatch_logs,
        }
        self._saves.submit(name, self.storage.encode(name, collections[name]))

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @property
    def settings(self) -> ToolkitSettings:
        with self._lock:
            return replace(self._settings, default_units=dict(self._settings.default_units))

    @property
    def favorites(self) -> list[ConversionPreset]:
        with self._lock:
            return [replace(preset) for preset in self._favorites]

    @property
    def history(self) -> list[ConversionHistoryEntry]:
        with self._lock:
            return list(self._history)

    @property
    def counters(self) -> list[CounterItem]:
        with self._lock:
            return [replace(counter) for counter in self._counters]

    @property
    def custom_units(self) -> list[CustomUnit]:
        with self._lock:
            return [replace(unit) for unit in self._custom_units]

    @property
    def stopwatch_logs(self) -> list[StopwatchLog]:
        with self._lock:
            return list(self._stopwatch_logs)

    # -------------------------------------------------------------------------
    # Units & Conversions
    # -------------------------------------------------------------------------

    def units_for(self, category: MeasurementCategory) -> list[UnitDefinition]:
        return self.catalog.units_for(category, self.custom_units)

    def resolve_unit(self, identity: UnitIdentity) -> UnitDefinition | None:
        """Definition for an identity, None when the unit is unavailable."""
        return self.catalog.resolve(identity, self.custom_units)

    def convert(self, value: float, from_unit: UnitIdentity, to_unit: UnitIdentity) -> float:
        """Convert between two identities; NaN when either cannot be resolved."""
        custom_units = self.custom_units
        source = self.catalog.resolve(from_unit, custom_units)
        target = self.catalog.resolve(to_unit, custom_units)
        if source is None or target is None:
            return float("nan")
        return convert(value, source, target)

    def convert_preset(self, preset: ConversionPreset, value: float | None = None) -> float | None:
        """
        Run a saved conversion.

        Args:
            preset: Favourite to run
            value: Input value, defaults to the preset's last input

        Returns:
            Converted value, or None when there is no input, a unit is
            unavailable or the result is not finite
        """
        if value is None:
            value = preset.last_input_value
        if value is None:
            return None
        result = self.convert(value, preset.from_unit, preset.to_unit)
        if not is_valid_result(result):
            return None
        return result

    def default_units_for(self, category: MeasurementCategory) -> tuple[UnitDefinition, UnitDefinition]:
        """
        Initial (from, to) pair for a category.

        Uses the stored preference when both units still resolve, otherwise
        the first two units of the category listing.
        """
        with self._lock:
            preference = self._settings.default_units.get(category)
            custom_units = list(self._custom_units)
        if preference is not None:
            source = self.catalog.resolve(preference.from_unit, custom_units)
            target = self.catalog.resolve(preference.to_unit, custom_units)
            if source is not None and target is not None:
                return source, target
        units = self.catalog.units_for(category, custom_units)
        return units[0], units[1] if len(units) > 1 else units[0]

    # -------------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------------

    def is_favorite(self, category: MeasurementCategory, from_unit: UnitIdentity,
                    to_unit: UnitIdentity) -> ConversionPreset | None:
        with self._lock:
            for preset in self._favorites:
                if preset.matches(category, from_unit, to_unit):
                    return replace(preset)
        return None

    def toggle_favorite(self, category: MeasurementCategory, from_unit: UnitIdentity,
                        to_unit: UnitIdentity, last_value: float | None = None,
                        title: str = "") -> ConversionPreset | None:
        """
        Add or remove the favourite for (category, from_unit, to_unit).

        Returns:
            The new preset when one was added, None when it was removed
        """
        with self._lock:
            for index, preset in enumerate(self._favorites):
                if preset.matches(category, from_unit, to_unit):
                    del self._favorites[index]
                    self._schedule_save(FAVORITES)
                    return None
            preset = ConversionPreset(
                title=title,
                category=category,
                from_unit=from_unit,
                to_unit=to_unit,
                last_input_value=last_value,
            )
            self._favorites.insert(0, preset)
            self._schedule_save(FAVORITES)
            return replace(preset)

    def update_favorite(self, preset: ConversionPreset) -> None:
        """Replace the favourite with the same id (no-op when absent)."""
        with self._lock:
            for index, existing in enumerate(self._favorites):
                if existing.id == preset.id:
                    self._favorites[index] = replace(preset)
                    self._schedule_save(FAVORITES)
                    return

    def remove_favorite(self, preset: ConversionPreset) -> None:
        with self._lock:
            remaining = [p for p in self._favorites if p.id != preset.id]
            if len(remaining) != len(self._favorites):
                self._favorites = remaining
                self._schedule_save(FAVORITES)

    def reorder_favorites(self, from_indexes: Iterable[int], to_index: int) -> None:
        """
        Move the favourites at `from_indexes` so they land before the item
        currently at `to_index` (`to_index == len` moves them to the end).
        Moved items keep their relative order.
        """
        with self._lock:
            count = len(self._favorites)
            indexes = sorted(set(from_indexes))
            if not indexes:
                return
            if indexes[0] < 0 or indexes[-1] >= count:
                raise IndexError(f"Favourite index out of range: {indexes}")
            if not 0 <= to_index <= count:
                raise IndexError(f"Destination index out of range: {to_index}")

            selected = set(indexes)
            moving = [self._favorites[i] for i in indexes]
            remaining = [p for i, p in enumerate(self._favorites) if i not in selected]
            insert_at = to_index - sum(1 for i in indexes if i < to_index)
            self._favorites = remaining[:insert_at] + moving + remaining[insert_at:]
            self._schedule_save(FAVORITES)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def add_history_entry(self, category: MeasurementCategory, from_unit: UnitIdentity,
                          to_unit: UnitIdentity, input_value: float,
                          output_value: float) -> ConversionHistoryEntry:
        """Record a conversion at the front, keeping the newest `history_limit` entries."""
        with self._lock:
            entry = ConversionHistoryEntry(
                category=category,
                from_unit=from_unit,
                to_unit=to_unit,
                input_value=input_value,
                output_value=output_value,
                precision=self._settings.precision,
            )
            self._history.insert(0, entry)
            del self._history[self.config.history_limit:]
            self._schedule_save(HISTORY)
            return entry

    def remove_history_entry(self, entry: ConversionHistoryEntry) -> None:
        with self._lock:
            remaining = [e for e in self._history if e.id != entry.id]
            if len(remaining) != len(self._history):
                self._history = remaining
                self._schedule_save(HISTORY)

    def clear_history(self) -> None:
        with self._lock:
            self._history = []
            self._schedule_save(HISTORY)

    # -------------------------------------------------------------------------
    # Counters
    # -------------------------------------------------------------------------

    def add_counter(self, counter: CounterItem) -> None:
        with self._lock:
            self._counters.append(replace(counter))
            self._schedule_save(COUNTERS)

    def update_counter(self, counter: CounterItem) -> None:
        with self._lock:
            index = self._counter_index(counter.id)
            if index is None:
                return
            self._counters[index] = replace(counter)
            self._schedule_save(COUNTERS)

    def remove_counter(self, counter: CounterItem) -> None:
        with self._lock:
            self._counters = [c for c in self._counters if c.id != counter.id]
            self._schedule_save(COUNTERS)

    def reset_counter(self, counter: CounterItem) -> None:
        with self._lock:
            index = self._counter_index(counter.id)
            if index is None:
                return
            self._counters[index].reset()
            self._schedule_save(COUNTERS)

    def increment_counter(self, counter_id: uuid.UUID) -> CounterItem | None:
        """Step the stored counter up (clamped). None when the id is unknown."""
        return self._step_counter(counter_id, CounterItem.increment)

    def decrement_counter(self, counter_id: uuid.UUID) -> CounterItem | None:
        """Step the stored counter down (clamped). None when the id is unknown."""
        return self._step_counter(counter_id, CounterItem.decrement)

    def _step_counter(self, counter_id: uuid.UUID, step) -> CounterItem | None:
        with self._lock:
            index = self._counter_index(counter_id)
            if index is None:
                return None
            step(self._counters[index])
            self._schedule_save(COUNTERS)
            return replace(self._counters[index])

    def _counter_index(self, counter_id: uuid.UUID) -> int | None:
        for index, counter in enumerate(self._counters):
            if counter.id == counter_id:
                return index
        return None

    # -------------------------------------------------------------------------
    # Custom Units
    # -------------------------------------------------------------------------

    def add_custom_unit(self, unit: CustomUnit) -> ValidationResult:
        """
        Validate and append a custom unit. Rejections leave the store untouched.

        The symbol is stored trimmed.
        """
        with self._lock:
            result = validate_custom_unit(unit, self.catalog, self._custom_units)
            if not result:
                return result
            self._custom_units.append(replace(unit, symbol=unit.symbol.strip()))
            self._schedule_save(CUSTOM_UNITS)
            return result

    def update_custom_unit(self, unit: CustomUnit) -> ValidationResult:
        """Validate and replace the custom unit with the same id."""
        with self._lock:
            result = validate_custom_unit(unit, self.catalog, self._custom_units, is_update=True)
            if not result:
                return result
            for index, existing in enumerate(self._custom_units):
                if existing.id == unit.id:
                    self._custom_units[index] = replace(unit, symbol=unit.symbol.strip())
                    self._schedule_save(CUSTOM_UNITS)
                    break
            return result

    def delete_custom_unit(self, unit: CustomUnit) -> None:
        """
        Remove a custom unit by id.

        Presets, history and defaults referencing it are kept; they resolve
        to "unavailable" from now on.
        """
        with self._lock:
            self._custom_units = [u for u in self._custom_units if u.id != unit.id]
            self._schedule_save(CUSTOM_UNITS)

    # -------------------------------------------------------------------------
    # Stopwatch
    # -------------------------------------------------------------------------

    def append_stopwatch_log(self, duration: float) -> StopwatchLog:
        with self._lock:
            log = StopwatchLog(duration=duration)
            self._stopwatch_logs.insert(0, log)
            self._schedule_save(STOPWATCH)
            return log

    def clear_stopwatch_logs(self) -> None:
        with self._lock:
            self._stopwatch_logs = []
            self._schedule_save(STOPWATCH)

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def update_precision(self, value: int) -> int:
        """Set the display precision, clamped to the configured range."""
        with self._lock:
            self._settings.precision = self.config.clamp_precision(value)
            self._schedule_save(SETTINGS)
            return self._settings.precision

    def toggle_grouping(self) -> bool:
        with self._lock:
            self._settings.grouping_separator_enabled = not self._settings.grouping_separator_enabled
            self._schedule_save(SETTINGS)
            return self._settings.grouping_separator_enabled

    def set_default_units(self, category: MeasurementCategory, from_unit: UnitIdentity,
                          to_unit: UnitIdentity) -> None:
        with self._lock:
            self._settings.default_units[category] = UnitPreference(from_unit=from_unit, to_unit=to_unit)
            self._schedule_save(SETTINGS)
