"""Per-field trend report and text rendering of stats and averages."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from wt_tool.errors import EmptyInputError
from wt_tool.model import (
    FIELD_LABELS,
    FIELD_UNITS,
    TRACKED_FIELDS,
    Measurement,
    TrendCoefficients,
)
from wt_tool.stats import extract_column, extract_dated_column, fit_line, fit_points


class ReportMode(str, Enum):
    """How fields without any data affect the report."""

    STRICT = "strict"
    PARTIAL = "partial"


class TimeAxis(str, Enum):
    """Abscissa used for trend fits."""

    SAMPLE = "sample"
    CALENDAR = "calendar"


_RATE_SUFFIX: dict[TimeAxis, str] = {
    TimeAxis.SAMPLE: "sample",
    TimeAxis.CALENDAR: "day",
}


@dataclass(frozen=True)
class FieldOutcome:
    """Trend fit for one field, or the error that prevented it."""

    field: str
    trend: TrendCoefficients | None = None
    error: EmptyInputError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class StatsSummary:
    """Rate of change per tracked field (None when the field had no data)."""

    rates: dict[str, float | None]
    time_axis: TimeAxis = TimeAxis.SAMPLE


def fit_field(
    history: Sequence[Measurement],
    field: str,
    time_axis: TimeAxis = TimeAxis.SAMPLE,
) -> TrendCoefficients:
    """Extract one field and fit its trend.

    Raises:
        EmptyInputError: If the field is never set in the history.
    """
    try:
        if time_axis is TimeAxis.CALENDAR:
            return fit_points(extract_dated_column(history, field))
        return fit_line(extract_column(history, field))
    except EmptyInputError as exc:
        raise EmptyInputError(field) from exc


def field_outcomes(
    history: Sequence[Measurement],
    *,
    time_axis: TimeAxis = TimeAxis.SAMPLE,
) -> dict[str, FieldOutcome]:
    """Fit every tracked field, keeping failures instead of raising them."""
    out: dict[str, FieldOutcome] = {}
    for field in TRACKED_FIELDS:
        try:
            trend = fit_field(history, field, time_axis)
        except EmptyInputError as exc:
            out[field] = FieldOutcome(field=field, error=exc)
        else:
            out[field] = FieldOutcome(field=field, trend=trend)
    return out


def report(
    history: Sequence[Measurement],
    *,
    mode: ReportMode = ReportMode.STRICT,
    time_axis: TimeAxis = TimeAxis.SAMPLE,
) -> StatsSummary:
    """Compute the rate of change of every tracked field.

    Args:
        history: Measurements in log order.
        mode: STRICT fails on the first field without data, PARTIAL
            reports that field as None.
        time_axis: Fit against sample index or elapsed days.

    Returns:
        Summary with one rate per tracked field, in declared order.

    Raises:
        EmptyInputError: In STRICT mode, if any tracked field has no data.
    """
    outcomes = field_outcomes(history, time_axis=time_axis)
    rates: dict[str, float | None] = {}
    for field, outcome in outcomes.items():
        if outcome.error is not None:
            if mode is ReportMode.STRICT:
                raise outcome.error
            rates[field] = None
            continue
        rates[field] = outcome.trend.slope if outcome.trend is not None else None
    return StatsSummary(rates=rates, time_axis=time_axis)


def format_stats(summary: StatsSummary) -> str:
    """Render the stats block printed by ``wt stats``."""
    suffix = _RATE_SUFFIX[summary.time_axis]
    lines = ["===", "[Stats]"]
    for field in TRACKED_FIELDS:
        label = FIELD_LABELS[field]
        rate = summary.rates.get(field)
        if rate is None:
            lines.append(f"  {label} rate of change: NA")
        else:
            lines.append(
                f"  {label} rate of change: {rate:.2f} {FIELD_UNITS[field]}/{suffix}"
            )
    lines.append("===")
    return "\n".join(lines)


def format_moving_average(averages: Sequence[Measurement]) -> str:
    """Render the moving-average block printed by ``wt avg``."""
    header = ", ".join(FIELD_LABELS[field] for field in TRACKED_FIELDS)
    lines = ["===", "[Moving Average History]", f"  {header}"]
    for row in averages:
        cells = [
            f"{_format_value(row.value(field))} {FIELD_UNITS[field]}"
            for field in TRACKED_FIELDS
        ]
        lines.append("  " + ", ".join(cells))
    lines.append("===")
    return "\n".join(lines)


def _format_value(value: float | None) -> str:
    if value is None:
        return "NA"
    return f"{value:.2f}"
