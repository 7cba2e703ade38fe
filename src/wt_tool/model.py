"""Typed models for body-composition measurements and trend fits."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

# On-disk column order and stats report order.
TRACKED_FIELDS: tuple[str, ...] = (
    "weight_kg",
    "body_fat_percent",
    "muscle_mass_percent",
    "water_mass_percent",
)

FIELD_LABELS: dict[str, str] = {
    "weight_kg": "Weight",
    "body_fat_percent": "BF",
    "muscle_mass_percent": "MM",
    "water_mass_percent": "WM",
}

FIELD_UNITS: dict[str, str] = {
    "weight_kg": "Kg",
    "body_fat_percent": "%",
    "muscle_mass_percent": "%",
    "water_mass_percent": "%",
}


@dataclass(frozen=True)
class Measurement:
    """One log entry. Unset fields are None; averaged rows have no day."""

    day: date | None
    weight_kg: float | None = None
    body_fat_percent: float | None = None
    muscle_mass_percent: float | None = None
    water_mass_percent: float | None = None

    def value(self, field: str) -> float | None:
        """Return the value of a tracked field.

        Raises:
            KeyError: If ``field`` is not a tracked field.
        """
        if field not in TRACKED_FIELDS:
            raise KeyError(field)
        value: float | None = getattr(self, field)
        return value


@dataclass(frozen=True)
class TrendCoefficients:
    """Best-fit line ``y = slope * x + intercept``."""

    slope: float
    intercept: float
