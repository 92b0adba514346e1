"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/utils/logging.py

Rich console logging for the CLI. Paths run on worker threads, so DEBUG
output carries the thread name.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

QUIET_LOGGERS = ("arviz", "matplotlib", "numba")


def configure_logging(level: str = "INFO") -> int:
    resolved = getattr(logging, str(level).upper(), None)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    install_rich_traceback(show_locals=False)
    fmt = "[%(threadName)s] %(message)s" if resolved <= logging.DEBUG else "%(message)s"
    logging.basicConfig(
        level=resolved,
        format=fmt,
        datefmt="%H:%M:%S",
        handlers=[RichHandler(rich_tracebacks=True, show_time=True, show_level=True, show_path=False)],
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
    return resolved
