"""Runtime configuration: data directory and history file location."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR_ENV = "WT_DATA_DIR"
HISTORY_FILE_NAME = "weight_history.csv"
DEFAULT_WINDOW = 7


def default_data_dir() -> Path:
    """Return ``$WT_DATA_DIR`` or ``~/.local/share/wt``."""
    override = os.environ.get(DATA_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".local" / "share" / "wt"


@dataclass(frozen=True)
class WtConfig:
    """Resolved paths for one invocation."""

    data_dir: Path
    history_file: Path

    @classmethod
    def resolve(
        cls,
        *,
        data_dir: str | None = None,
        history_file: str | None = None,
    ) -> WtConfig:
        """Build a config from optional command-line values.

        Args:
            data_dir: Explicit data directory, else the default.
            history_file: Explicit history file, else
                ``<data_dir>/weight_history.csv``.
        """
        base = (
            Path(data_dir).expanduser() if data_dir else default_data_dir()
        ).resolve()
        history = (
            Path(history_file).expanduser().resolve()
            if history_file
            else base / HISTORY_FILE_NAME
        )
        return cls(data_dir=base, history_file=history)
