"""Entry point for the ``wt`` command."""

from __future__ import annotations

import sys

from wt_tool.cli import main as cli_main
from wt_tool.errors import WtError


def main() -> int:
    """Run the CLI, reporting terminal errors as exit code 1."""
    try:
        return cli_main()
    except (WtError, OSError, EOFError) as exc:
        print(f"wt: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
