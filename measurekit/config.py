"""Runtime configuration for the toolkit store and its persistence."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

ENV_DATA_DIR = "MEASUREKIT_DATA_DIR"
ENV_STORAGE_PREFIX = "MEASUREKIT_STORAGE_PREFIX"
ENV_HISTORY_LIMIT = "MEASUREKIT_HISTORY_LIMIT"


@dataclass(frozen=True)
class ToolkitConfig:
    """
    Store and storage settings.

    Attributes:
        storage_prefix: Prefix of every persisted blob key
        history_limit: Number of history entries kept (newest first)
        precision_min: Lowest display precision accepted by the settings
        precision_max: Highest display precision accepted by the settings
        default_precision: Precision used by fresh settings
        data_dir: Directory for file-backed storage (None = in memory)
    """
    storage_prefix: str = "appmodule.measurement"
    history_limit: int = 20
    precision_min: int = 0
    precision_max: int = 6
    default_precision: int = 2
    data_dir: Path | None = None

    def key(self, name: str) -> str:
        """Full storage key for a collection name."""
        return f"{self.storage_prefix}.{name}"

    def clamp_precision(self, value: int) -> int:
        return max(self.precision_min, min(self.precision_max, int(value)))

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "ToolkitConfig":
        """
        Build a config from environment variables.

        Unset variables keep their defaults; an unparseable history limit
        is logged and ignored.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        data_dir = env.get(ENV_DATA_DIR)
        history_limit = defaults.history_limit
        raw_limit = env.get(ENV_HISTORY_LIMIT)
        if raw_limit:
            try:
                history_limit = int(raw_limit)
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", ENV_HISTORY_LIMIT, raw_limit)
            else:
                if history_limit < 1:
                    logger.warning("Ignoring non-positive %s=%r", ENV_HISTORY_LIMIT, raw_limit)
                    history_limit = defaults.history_limit

        return cls(
            storage_prefix=env.get(ENV_STORAGE_PREFIX) or defaults.storage_prefix,
            history_limit=history_limit,
            data_dir=Path(data_dir) if data_dir else None,
        )
