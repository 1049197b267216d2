"""
Persistence gateway for the toolkit collections.

Each collection is stored as one opaque JSON blob under its own key in a
BlobStore (an asynchronous get/set-by-key store). Loading never fails:
missing or malformed blobs fall back to a typed default and the problem is
logged.
"""

import asyncio
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol, TypeVar

from measurekit.config import ToolkitConfig
from measurekit.core import codec
from measurekit.core.models import (
    ConversionHistoryEntry,
    ConversionPreset,
    CounterItem,
    StopwatchLog,
    ToolkitSettings,
)
from measurekit.core.types import CustomUnit


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Collection names (storage key suffixes)
SETTINGS = "settings"
FAVORITES = "favorites"
HISTORY = "history"
COUNTERS = "counters"
CUSTOM_UNITS = "customUnits"
STOPWATCH = "stopwatch"

COLLECTIONS = (SETTINGS, FAVORITES, HISTORY, COUNTERS, CUSTOM_UNITS, STOPWATCH)


# =============================================================================
# Blob Stores
# =============================================================================

class BlobStore(Protocol):
    """Asynchronous key/value store holding opaque blobs."""

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, data: bytes) -> None: ...


class MemoryBlobStore:
    """Dict-backed blob store (tests, ephemeral sessions)."""

    def __init__(self, initial: dict[str, bytes] | None = None):
        self._blobs: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    async def set(self, key: str, data: bytes) -> None:
        self._blobs[key] = bytes(data)

    def keys(self) -> list[str]:
        return sorted(self._blobs)


class DirectoryBlobStore:
    """
    File-backed blob store: one `<key>.json` file per key.

    Writes go through a temporary file and an atomic rename so a crash
    never leaves a half written blob behind.
    """

    FILE_EXTENSION = ".json"

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}{self.FILE_EXTENSION}"

    async def get(self, key: str) -> bytes | None:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, key, data)

    def _read(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def _write(self, key: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.path_for(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


# =============================================================================
# Gateway
# =============================================================================

@dataclass
class ToolkitSnapshot:
    """Everything the store hydrates from storage."""
    settings: ToolkitSettings = field(default_factory=ToolkitSettings)
    favorites: list[ConversionPreset] = field(default_factory=list)
    history: list[ConversionHistoryEntry] = field(default_factory=list)
    counters: list[CounterItem] = field(default_factory=list)
    custom_units: list[CustomUnit] = field(default_factory=list)
    stopwatch_logs: list[StopwatchLog] = field(default_factory=list)


class ToolkitStorage:
    """
    Loads and saves the toolkit collections through a BlobStore.

    Usage:
        storage = ToolkitStorage(MemoryBlobStore())
        await storage.save_history(entries)
        entries = await storage.load_history()
    """

    def __init__(self, blob_store: BlobStore | None = None, config: ToolkitConfig | None = None):
        self.config = config or ToolkitConfig()
        self.blob_store = blob_store if blob_store is not None else MemoryBlobStore()

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def encode(self, name: str, value: Any) -> bytes:
        """Serialize a collection for storage under `name`."""
        if name == SETTINGS:
            return codec.dumps(codec.encode_settings(value))
        if name == FAVORITES:
            return codec.encode_list(value, codec.encode_preset)
        if name == HISTORY:
            return codec.encode_list(list(value)[:self.config.history_limit], codec.encode_history_entry)
        if name == COUNTERS:
            return codec.encode_list(value, codec.encode_counter)
        if name == CUSTOM_UNITS:
            return codec.encode_list(value, codec.encode_custom_unit)
        if name == STOPWATCH:
            return codec.encode_list(value, codec.encode_stopwatch_log)
        raise KeyError(f"Unknown collection: {name}")

    async def write(self, name: str, blob: bytes) -> None:
        """Store an already encoded blob."""
        await self.blob_store.set(self.config.key(name), blob)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def _load(self, name: str, decode: Callable[[bytes], T], default: Callable[[], T]) -> T:
        key = self.config.key(name)
        try:
            blob = await self.blob_store.get(key)
        except Exception as e:
            logger.warning("Could not read %s, using defaults: %s", key, e)
            return default()
        if blob is None:
            return default()
        try:
            return decode(blob)
        except (ValueError, OverflowError) as e:
            logger.warning("Discarding malformed %s blob: %s", key, e)
            return default()

    async def load_settings(self) -> ToolkitSettings:
        return await self._load(
            SETTINGS,
            lambda blob: codec.decode_settings(codec.loads(blob)),
            lambda: ToolkitSettings(precision=self.config.default_precision),
        )

    async def load_favorites(self) -> list[ConversionPreset]:
        return await self._load(FAVORITES, lambda blob: codec.decode_list(blob, codec.decode_preset), list)

    async def load_history(self) -> list[ConversionHistoryEntry]:
        history = await self._load(HISTORY, lambda blob: codec.decode_list(blob, codec.decode_history_entry), list)
        return sorted(history, key=lambda entry: entry.timestamp, reverse=True)

    async def load_counters(self) -> list[CounterItem]:
        return await self._load(COUNTERS, lambda blob: codec.decode_list(blob, codec.decode_counter), list)

    async def load_custom_units(self) -> list[CustomUnit]:
        return await self._load(CUSTOM_UNITS, lambda blob: codec.decode_list(blob, codec.decode_custom_unit), list)

    async def load_stopwatch_logs(self) -> list[StopwatchLog]:
        logs = await self._load(STOPWATCH, lambda blob: codec.decode_list(blob, codec.decode_stopwatch_log), list)
        return sorted(logs, key=lambda log: log.recorded_at, reverse=True)

    async def load_all(self) -> ToolkitSnapshot:
        return ToolkitSnapshot(
            settings=await self.load_settings(),
            favorites=await self.load_favorites(),
            history=await self.load_history(),
            counters=await self.load_counters(),
            custom_units=await self.load_custom_units(),
            stopwatch_logs=await self.load_stopwatch_logs(),
        )

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    async def save_settings(self, settings: ToolkitSettings) -> None:
        await self.write(SETTINGS, self.encode(SETTINGS, settings))

    async def save_favorites(self, presets: list[ConversionPreset]) -> None:
        await self.write(FAVORITES, self.encode(FAVORITES, presets))

    async def save_history(self, history: list[ConversionHistoryEntry]) -> None:
        await self.write(HISTORY, self.encode(HISTORY, history))

    async def save_counters(self, counters: list[CounterItem]) -> None:
        await self.write(COUNTERS, self.encode(COUNTERS, counters))

    async def save_custom_units(self, units: list[CustomUnit]) -> None:
        await self.write(CUSTOM_UNITS, self.encode(CUSTOM_UNITS, units))

    async def save_stopwatch_logs(self, logs: list[StopwatchLog]) -> None:
        await self.write(STOPWATCH, self.encode(STOPWATCH, logs))
