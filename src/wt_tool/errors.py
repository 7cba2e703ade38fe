"""Error taxonomy for the statistics engine."""

from __future__ import annotations


class WtError(Exception):
    """Base class for errors raised by wt_tool."""


class EmptyInputError(WtError):
    """A fit or report was requested over zero usable data points."""

    def __init__(self, field: str | None = None) -> None:
        self.field = field
        if field is None:
            message = "no data points to fit"
        else:
            message = f"no data points for {field}"
        super().__init__(message)


class InsufficientDataError(WtError):
    """The requested window is longer than the available history."""

    def __init__(self, available: int, window: int) -> None:
        self.available = available
        self.window = window
        super().__init__(
            f"window of {window} entries exceeds history of {available} entries"
        )


class InvalidValueError(WtError, ValueError):
    """A measurement value is not a finite number."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"not a finite number: {token!r}")
