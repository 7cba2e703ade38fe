from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import cast

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from wt_tool.excel_writer import (
    ExcelLayout,
    _format_sheet,
    average_export_frame,
    history_export_frame,
    write_history_xlsx,
)
from wt_tool.model import Measurement
from wt_tool.stats import moving_average


def _history() -> list[Measurement]:
    return [
        Measurement(day=date(2025, 12, 15), weight_kg=80.0, body_fat_percent=21.0),
        Measurement(day=date(2025, 12, 16), weight_kg=79.5),
        Measurement(day=date(2025, 12, 17), weight_kg=None, body_fat_percent=20.5),
    ]


def test_write_history_xlsx_happy_path_and_formatting(tmp_path: Path) -> None:
    history = _history()
    out = tmp_path / "nested" / "out.xlsx"
    write_history_xlsx(history, moving_average(history, 2), out, ExcelLayout())

    wb = load_workbook(out)
    assert wb.sheetnames == ["History", "Moving average"]

    ws = cast(Worksheet, wb["History"])
    headers = [cell.value for cell in ws[1]]
    assert headers == [
        "Day",
        "Date",
        "Weight (Kg)",
        "Body fat (%)",
        "Muscle mass (%)",
        "Water mass (%)",
    ]
    assert ws.cell(row=2, column=1).value == "Mon"
    assert ws.cell(row=2, column=2).value == datetime(2025, 12, 15)
    assert ws.cell(row=2, column=3).value == 80.0
    # Unset values are written as empty cells.
    assert ws.cell(row=4, column=3).value in ("", None)

    assert ws.column_dimensions["A"].width == 6
    weight_letter = get_column_letter(headers.index("Weight (Kg)") + 1)
    assert ws.column_dimensions[weight_letter].width == 12
    assert ws.cell(row=2, column=2).number_format == "dd/mm/yyyy"
    assert ws.cell(row=2, column=3).number_format == "0.00"

    avg_ws = cast(Worksheet, wb["Moving average"])
    assert [cell.value for cell in avg_ws[1]][:3] == [
        "Window",
        "Weight (Kg)",
        "Body fat (%)",
    ]
    assert avg_ws.max_row == 3
    assert avg_ws.cell(row=2, column=1).value == 1
    assert avg_ws.cell(row=2, column=2).value == 79.75
    assert avg_ws.cell(row=3, column=2).value == 79.5
    assert avg_ws.cell(row=3, column=3).value == 20.5


def test_write_history_xlsx_without_averages(tmp_path: Path) -> None:
    out = tmp_path / "out.xlsx"
    write_history_xlsx(_history(), [], out, ExcelLayout())
    ws = load_workbook(out)["Moving average"]
    assert ws.max_row == 1
    assert ws.cell(row=1, column=1).value == "Window"


def test_export_frames_shape() -> None:
    hist = history_export_frame(_history())
    assert list(hist["Day"]) == ["Mon", "Tue", "Wed"]
    avg = average_export_frame(moving_average(_history(), 3))
    assert list(avg["Window"]) == [1]
    assert "Date" not in avg.columns


def test_format_sheet_handles_missing_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"


def test_history_export_frame_leaves_undated_weekday_blank() -> None:
    history = [
        Measurement(day=date(2025, 12, 21), weight_kg=80.0),
        Measurement(day=None, weight_kg=79.0),
    ]
    hist = history_export_frame(history)
    assert list(hist["Day"]) == ["Sun", ""]


def test_format_sheet_styles_every_body_cell() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Window", "Weight (Kg)", "Note"])
    ws.append([1, 80.0, "x"])
    ws.append([2, 79.5, "y"])

    _format_sheet(ws)

    assert ws.cell(row=3, column=1).number_format == "0"
    assert ws.cell(row=3, column=2).number_format == "0.00"
    assert ws.cell(row=3, column=3).number_format == "General"
    assert ws.cell(row=3, column=3).border.left.style == "thin"
    assert ws.column_dimensions["A"].width == 8
