"""
CLI entry point using Typer.

Provides commands for BILBO tracking:
- track / untrack / list: manage tracked exercises
- log-session: log a BILBO session and get the next weight
- log-workout: log a working set for 1RM estimation
- set-1rm / recalc-1rm: edit or recalculate the 1RM
- status / stats / plot / history: inspect progress
- estimate: stand-alone 1RM calculator
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..logger import setup_logger
from .app import app
from .commands import analysis, sessions, tracking  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log engine decisions to stderr"),
    ] = False,
    log_file: Annotated[
        Optional[Path],
        typer.Option("--log-file", help="Also write logs to this file"),
    ] = None,
) -> None:
    """
    BILBO high-rep strength progression tracker.
    """
    setup_logger(
        level="DEBUG" if verbose else "WARNING",
        log_file=str(log_file) if log_file is not None else None,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
