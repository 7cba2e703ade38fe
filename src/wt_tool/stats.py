"""Column extraction, linear trend fits and moving averages over a history."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import cast

import pandas as pd

from wt_tool.errors import EmptyInputError, InsufficientDataError
from wt_tool.model import TRACKED_FIELDS, Measurement, TrendCoefficients


def extract_column(history: Sequence[Measurement], field: str) -> list[float]:
    """Return the set values of ``field`` in history order.

    Unset entries are dropped without leaving a gap, so later samples
    shift down one index per skipped entry.
    """
    out: list[float] = []
    for measurement in history:
        value = measurement.value(field)
        if value is None or math.isnan(value):
            continue
        out.append(float(value))
    return out


def extract_dated_column(
    history: Sequence[Measurement], field: str
) -> list[tuple[float, float]]:
    """Return ``(days since first sample, value)`` pairs for ``field``.

    Entries without a day or without a value are skipped.
    """
    pairs: list[tuple[float, float]] = []
    origin = None
    for measurement in history:
        value = measurement.value(field)
        if measurement.day is None or value is None or math.isnan(value):
            continue
        if origin is None:
            origin = measurement.day
        elapsed = (measurement.day - origin).days
        pairs.append((float(elapsed), float(value)))
    return pairs


def fit_line(column: Sequence[float]) -> TrendCoefficients:
    """Least-squares line through ``(i, column[i])`` for ``i = 0..n-1``.

    Args:
        column: Dense column, equally spaced by sample index.

    Returns:
        Slope per sample step and intercept at index 0.

    Raises:
        EmptyInputError: If the column is empty.
    """
    n = len(column)
    if n == 0:
        raise EmptyInputError()
    if n == 1:
        return TrendCoefficients(slope=0.0, intercept=float(column[0]))

    s0x = float(n)
    s1x = n * (n - 1) / 2.0
    s2x = n * (n - 1) * (2 * n - 1) / 6.0
    s0y = 0.0
    s1y = 0.0
    for i, y in enumerate(column):
        s0y += y
        s1y += i * y

    denominator = s0x * s2x - s1x * s1x
    slope = (s0x * s1y - s1x * s0y) / denominator
    intercept = (s0y * s2x - s1y * s1x) / denominator
    return TrendCoefficients(slope=slope, intercept=intercept)


def fit_points(points: Sequence[tuple[float, float]]) -> TrendCoefficients:
    """Least-squares line through arbitrary ``(x, y)`` points.

    A degenerate abscissa (one point, or every point at the same x) gives
    a flat line through the mean of y.

    Raises:
        EmptyInputError: If there are no points.
    """
    n = len(points)
    if n == 0:
        raise EmptyInputError()

    sx = sum(x for x, _ in points)
    sy = sum(y for _, y in points)
    sxx = sum(x * x for x, _ in points)
    sxy = sum(x * y for x, y in points)

    denominator = n * sxx - sx * sx
    if denominator == 0:
        return TrendCoefficients(slope=0.0, intercept=sy / n)
    slope = (n * sxy - sx * sy) / denominator
    intercept = (sy * sxx - sxy * sx) / denominator
    return TrendCoefficients(slope=slope, intercept=intercept)


def history_to_frame(history: Sequence[Measurement]) -> pd.DataFrame:
    """Convert measurements to a DataFrame with float columns (unset -> NaN)."""
    rows = [
        {"day": m.day, **{field: m.value(field) for field in TRACKED_FIELDS}}
        for m in history
    ]
    df = pd.DataFrame(rows, columns=["day", *TRACKED_FIELDS])
    return df.astype({field: "float64" for field in TRACKED_FIELDS})


def moving_average(history: Sequence[Measurement], window: int) -> list[Measurement]:
    """Sliding-window mean of every tracked field.

    Each field is averaged over its set values only; a window without any
    set value for a field leaves that field unset in the output row.

    Args:
        history: Measurements in log order.
        window: Number of consecutive entries per window.

    Returns:
        ``len(history) - window + 1`` undated measurements.

    Raises:
        ValueError: If ``window`` is smaller than 1.
        InsufficientDataError: If the history is shorter than ``window``.
    """
    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")
    if len(history) < window:
        raise InsufficientDataError(available=len(history), window=window)

    df = history_to_frame(history)
    rolled = (
        df[list(TRACKED_FIELDS)].rolling(window=window, min_periods=1).mean()
    ).iloc[window - 1 :]
    return [_row_to_measurement(row) for row in rolled.to_dict(orient="records")]


def _row_to_measurement(row: dict[str, object]) -> Measurement:
    values = {
        field: None if pd.isna(row[field]) else float(cast(float, row[field]))
        for field in TRACKED_FIELDS
    }
    return Measurement(day=None, **values)
