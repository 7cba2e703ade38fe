"""CSV history file: one dated measurement per line, ``NA`` for unset fields."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from pathlib import Path

from wt_tool.errors import InvalidValueError
from wt_tool.model import TRACKED_FIELDS, Measurement

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"
UNSET_TOKEN = "NA"

# Legacy header without a date column; it has too few fields and is
# skipped on load like any other short line.
HEADER = ",".join(TRACKED_FIELDS)

_FIELD_COUNT = 1 + len(TRACKED_FIELDS)


class HistoryFile:
    """Append-only measurement log stored as text."""

    def __init__(self, path: Path) -> None:
        """Create a handle on the history file (nothing is read yet)."""
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> list[Measurement]:
        """Read every well-formed line in file order.

        Returns:
            Measurements exactly as logged, duplicates included.

        Raises:
            FileNotFoundError: If the history file does not exist.
            OSError: If the file cannot be read.
        """
        out: list[Measurement] = []
        with self._path.open(encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                measurement = _line_to_measurement(line, lineno)
                if measurement is not None:
                    out.append(measurement)
        logger.debug("Loaded %d entries from %s", len(out), self._path)
        return out

    def append(self, measurement: Measurement) -> None:
        """Append one line, writing the header first if the file is new."""
        line = format_line(measurement)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        is_new = not self._path.exists()
        with self._path.open("a", encoding="utf-8") as fh:
            if is_new:
                fh.write(HEADER + "\n")
            fh.write(line + "\n")
        logger.debug("Appended entry for %s to %s", measurement.day, self._path)


def ensure_data_dir(data_dir: Path) -> Path:
    """Create the data directory if missing and return it."""
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def format_line(measurement: Measurement) -> str:
    """Serialize a dated measurement as ``DD/MM/YYYY,v1,...,vN``.

    Raises:
        ValueError: If the measurement has no day.
    """
    if measurement.day is None:
        raise ValueError("cannot log a measurement without a date")
    tokens = [measurement.day.strftime(DATE_FORMAT)]
    tokens.extend(_token_from_value(measurement.value(f)) for f in TRACKED_FIELDS)
    return ",".join(tokens)


def parse_line(line: str) -> Measurement | None:
    """Parse one history line; None if it has too few fields.

    Raises:
        ValueError: If the date or a numeric token is malformed.
    """
    tokens = [token.strip() for token in line.rstrip("\r\n").split(",")]
    if len(tokens) < _FIELD_COUNT:
        return None
    day = _parse_day(tokens[0])
    values = {
        field: _value_from_token(token)
        for field, token in zip(TRACKED_FIELDS, tokens[1:_FIELD_COUNT])
    }
    return Measurement(day=day, **values)


def _line_to_measurement(line: str, lineno: int) -> Measurement | None:
    """Parse a line, logging and dropping it when malformed."""
    try:
        return parse_line(line)
    except ValueError as exc:
        logger.warning("Skipping malformed line %d: %s", lineno, exc)
        return None


def _parse_day(token: str) -> date:
    return datetime.strptime(token, DATE_FORMAT).date()


def parse_value(token: str) -> float:
    """Parse a measurement value.

    Raises:
        InvalidValueError: If the token is not a finite number.
    """
    try:
        value = float(token)
    except ValueError as exc:
        raise InvalidValueError(token) from exc
    if not math.isfinite(value):
        raise InvalidValueError(token)
    return value


def _value_from_token(token: str) -> float | None:
    if token == UNSET_TOKEN:
        return None
    return parse_value(token)


def _token_from_value(value: float | None) -> str:
    if value is None or math.isnan(value):
        return UNSET_TOKEN
    if math.isinf(value):
        raise InvalidValueError(str(value))
    return f"{value:.2f}"
