"""CLI to log body-composition measurements and show averages and trends."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from dateutil import tz

from wt_tool.config import DEFAULT_WINDOW, WtConfig
from wt_tool.errors import InvalidValueError
from wt_tool.excel_writer import ExcelLayout, write_history_xlsx
from wt_tool.model import Measurement
from wt_tool.report import (
    ReportMode,
    TimeAxis,
    format_moving_average,
    format_stats,
    report,
)
from wt_tool.stats import moving_average
from wt_tool.storage import HistoryFile, ensure_data_dir, parse_value

logger = logging.getLogger(__name__)

_LOCAL_TZ = tz.tzlocal()

# Prompt order for an interactive entry.
_PROMPTS: tuple[tuple[str, str], ...] = (
    ("weight_kg", "Weight (Kg): "),
    ("body_fat_percent", "Body fat (%): "),
    ("water_mass_percent", "Water mass (%): "),
    ("muscle_mass_percent", "Muscle mass (%): "),
)


@dataclass(frozen=True)
class LogWeight:
    """Log today's weight only."""

    weight_kg: float


@dataclass(frozen=True)
class LogData:
    """Prompt for a full measurement and log it."""


@dataclass(frozen=True)
class ShowAverage:
    """Print the moving average of the history."""

    window: int


@dataclass(frozen=True)
class ShowStats:
    """Print the rate of change of every field."""

    window: int
    mode: ReportMode
    time_axis: TimeAxis


@dataclass(frozen=True)
class ExportHistory:
    """Write the history and its moving average to Excel."""

    window: int
    out_path: Path | None


Command = LogWeight | LogData | ShowAverage | ShowStats | ExportHistory


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _finite_float(text: str) -> float:
    try:
        return parse_value(text)
    except InvalidValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Build the ``wt`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="wt",
        description="Log body-composition measurements and show their trends.",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Data directory (default: $WT_DATA_DIR or ~/.local/share/wt).",
    )
    parser.add_argument(
        "--file",
        default=None,
        help="History file (default: <data-dir>/weight_history.csv).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    log_p = sub.add_parser("log", help="Log today's weight, or prompt for all data.")
    log_p.add_argument("weight", nargs="?", type=_finite_float, default=None)

    for name, help_text in (
        ("avg", "Show the moving average history."),
        ("stats", "Show the rate of change of each metric."),
        ("export", "Export history and moving average to Excel."),
    ):
        cmd_p = sub.add_parser(name, help=help_text)
        cmd_p.add_argument(
            "--window",
            type=_positive_int,
            default=DEFAULT_WINDOW,
            help=f"Moving average window in entries (default: {DEFAULT_WINDOW}).",
        )
        if name == "stats":
            cmd_p.add_argument(
                "--partial",
                action="store_true",
                help="Report NA for metrics without data instead of failing.",
            )
            cmd_p.add_argument(
                "--calendar",
                action="store_true",
                help="Fit trends against elapsed days instead of entry index.",
            )
        if name == "export":
            cmd_p.add_argument(
                "--out",
                default=None,
                help="Output .xlsx path (default: timestamped file in data dir).",
            )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    return build_parser().parse_args(argv)


def build_command(ns: argparse.Namespace) -> Command:
    """Turn parsed arguments into a command variant."""
    if ns.command == "log":
        if ns.weight is None:
            return LogData()
        return LogWeight(weight_kg=ns.weight)
    if ns.command == "avg":
        return ShowAverage(window=ns.window)
    if ns.command == "stats":
        return ShowStats(
            window=ns.window,
            mode=ReportMode.PARTIAL if ns.partial else ReportMode.STRICT,
            time_axis=TimeAxis.CALENDAR if ns.calendar else TimeAxis.SAMPLE,
        )
    if ns.command == "export":
        return ExportHistory(
            window=ns.window,
            out_path=Path(ns.out).expanduser() if ns.out else None,
        )
    raise ValueError(f"unknown command: {ns.command}")


def today() -> date:
    """Current local date."""
    return datetime.now(tz=_LOCAL_TZ).date()


def prompt_measurement(
    day: date, read: Callable[[str], str] | None = None
) -> Measurement:
    """Ask for every metric; an empty answer leaves it unset.

    Raises:
        InvalidValueError: If an answer is not a finite number.
        EOFError: If input ends before all metrics are read.
    """
    read = read or input
    print("*** Please enter data...")
    values: dict[str, float | None] = {}
    for field, prompt in _PROMPTS:
        answer = read(prompt).strip()
        values[field] = parse_value(answer) if answer else None
    return Measurement(day=day, **values)


def execute(command: Command, config: WtConfig) -> int:
    """Run one command against the configured history file.

    Returns:
        Exit code (0 on success).
    """
    store = HistoryFile(config.history_file)
    logger.debug("Executing %s on %s", command, store.path)

    if isinstance(command, LogWeight):
        store.append(Measurement(day=today(), weight_kg=command.weight_kg))
        return 0

    if isinstance(command, LogData):
        store.append(prompt_measurement(today()))
        return 0

    if isinstance(command, ShowAverage):
        history = store.load()
        if len(history) < command.window:
            print("Not enough data to show avg.")
            return 0
        print(format_moving_average(moving_average(history, command.window)))
        return 0

    if isinstance(command, ShowStats):
        history = store.load()
        if len(history) < command.window:
            print("Not enough data to show stats.")
            return 0
        summary = report(history, mode=command.mode, time_axis=command.time_axis)
        print(format_stats(summary))
        return 0

    if isinstance(command, ExportHistory):
        history = store.load()
        averages = (
            moving_average(history, command.window)
            if len(history) >= command.window
            else []
        )
        out_path = command.out_path or _default_export_path(config.data_dir)
        write_history_xlsx(history, averages, out_path, ExcelLayout())
        print(f"OK: Output: {out_path}")
        return 0

    raise TypeError(f"unsupported command: {command!r}")


def _default_export_path(data_dir: Path) -> Path:
    ts = datetime.now(tz=_LOCAL_TZ).strftime("%Y-%m-%d_%H-%M-%S")
    return data_dir / "exports" / f"wt_history_{ts}.xlsx"


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``wt`` CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    command = build_command(ns)
    config = WtConfig.resolve(data_dir=ns.data_dir, history_file=ns.file)
    logger.debug("Data dir: %s, history file: %s", config.data_dir, config.history_file)

    ensure_data_dir(config.data_dir)
    return execute(command, config)
