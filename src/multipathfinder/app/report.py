"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/app/report.py

Header, timing and summary output for multi-path runs.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from typing import List

from multipathfinder.core.interfaces import Model
from multipathfinder.io.writers import Writer

TIME_HEADER = "Elapsed Time: "
SYNTHETIC_FIELDS = ("lp_approx__", "lp__")


def header_names(model: Model) -> List[str]:
    return [*model.constrained_param_names(), *SYNTHETIC_FIELDS]


def write_headers(model: Model, parameter_writer: Writer, diagnostic_writer: Writer) -> List[str]:
    names = header_names(model)
    parameter_writer.header(names)
    diagnostic_writer.header(names)
    return names


def timing_lines(paths_seconds: float, psis_seconds: float) -> List[str]:
    pad = " " * len(TIME_HEADER)
    return [
        f"{TIME_HEADER}{paths_seconds:.6f} seconds (Pathfinders)",
        f"{pad}{psis_seconds:.6f} seconds (PSIS)",
        f"{pad}{paths_seconds + psis_seconds:.6f} seconds (Total)",
    ]


def write_timing(writer: Writer, paths_seconds: float, psis_seconds: float) -> None:
    writer.section_break()
    for line in timing_lines(paths_seconds, psis_seconds):
        writer.message(line)
    writer.section_break()


def log_eval_count(log: logging.Logger, eval_count: int, refresh: int) -> None:
    if refresh != 0:
        log.info("Total log probability function evaluations:%d", eval_count)
