"""Formatted Excel export of the measurement history and its moving average."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from wt_tool.model import Measurement
from wt_tool.stats import history_to_frame

_HEADER_MAP: dict[str, str] = {
    "weekday": "Day",
    "day": "Date",
    "window": "Window",
    "weight_kg": "Weight (Kg)",
    "body_fat_percent": "Body fat (%)",
    "muscle_mass_percent": "Muscle mass (%)",
    "water_mass_percent": "Water mass (%)",
}

_COLUMN_WIDTHS: dict[str, int] = {
    "Day": 6,
    "Date": 12,
    "Window": 8,
    "Weight (Kg)": 12,
    "Body fat (%)": 12,
    "Muscle mass (%)": 14,
    "Water mass (%)": 14,
}

_NUMBER_FORMATS: dict[str, str] = {
    "Date": "dd/mm/yyyy",
    "Window": "0",
    "Weight (Kg)": "0.00",
    "Body fat (%)": "0.00",
    "Muscle mass (%)": "0.00",
    "Water mass (%)": "0.00",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Sheet names for the export workbook."""

    history_sheet: str = "History"
    average_sheet: str = "Moving average"


def history_export_frame(history: Sequence[Measurement]) -> pd.DataFrame:
    """History as a frame with a weekday column first and renamed headers.

    Entries without a date get an empty weekday.
    """
    df = history_to_frame(history)
    df["day"] = pd.to_datetime(df["day"], errors="coerce")
    df.insert(0, "weekday", df["day"].dt.day_name().str[:3].fillna(""))
    return df.rename(columns=_HEADER_MAP)


def average_export_frame(averages: Sequence[Measurement]) -> pd.DataFrame:
    """Moving average rows numbered by window position (1-based)."""
    df = history_to_frame(averages).drop(columns=["day"])
    df.insert(0, "window", range(1, len(df) + 1))
    return df.rename(columns=_HEADER_MAP)


def write_history_xlsx(
    history: Sequence[Measurement],
    averages: Sequence[Measurement],
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write history and moving average sheets to an XLSX file.

    Args:
        history: Logged measurements, in file order.
        averages: Moving average rows (may be empty).
        out_path: Output path for the XLSX file.
        layout: Workbook layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    sheets = {
        layout.history_sheet: history_export_frame(history),
        layout.average_sheet: average_export_frame(averages),
    }
    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        for name, frame in sheets.items():
            frame.to_excel(writer, index=False, sheet_name=name)
            _format_sheet(writer.book[name])


_THIN = Side(style="thin")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


def _format_sheet(ws: Any) -> None:
    """Style the header row, then size and format each known column.

    Args:
        ws: openpyxl worksheet.
    """
    for column in ws.iter_cols():
        header = column[0]
        header.font = Font(bold=True)
        header.alignment = Alignment(
            horizontal="center", vertical="center", wrap_text=True
        )
        header.border = _BORDER

        name = str(header.value)
        number_format = _NUMBER_FORMATS.get(name)
        for cell in column[1:]:
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = _BORDER
            if number_format is not None:
                cell.number_format = number_format

        width = _COLUMN_WIDTHS.get(name)
        if width is not None:
            ws.column_dimensions[header.column_letter].width = width
