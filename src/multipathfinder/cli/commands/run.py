"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/cli/commands/run.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from multipathfinder.config.load import load_config

console = Console()
logger = logging.getLogger(__name__)


def run(
    config: Path = typer.Argument(..., help="Path to multipathfinder config.yaml.", metavar="CONFIG"),
    out_dir: Path | None = typer.Option(
        None,
        "--out-dir",
        "-o",
        help="Output directory (overrides output.dir; relative paths resolve against the current directory).",
    ),
    no_progress: bool = typer.Option(False, "--no-progress", help="Disable the path progress bar."),
) -> None:
    try:
        cfg = load_config(config)
    except (ValueError, ValidationError, FileNotFoundError) as exc:
        console.print(f"Error: {exc}")
        raise typer.Exit(code=1)
    try:
        from multipathfinder.app.run_service import run_from_config

        report = run_from_config(
            cfg,
            out_dir=out_dir,
            progress_bar=cfg.output.progress_bar and not no_progress,
        )
    except ValueError as exc:
        console.print(f"Error: {exc}")
        raise typer.Exit(code=1)
    if not report.ok:
        console.print(f"Run failed: {report.code.name} (exit code {int(report.code)})")
        raise typer.Exit(code=int(report.code))
    console.print(
        f"Wrote {len(report.draws)} draws from {report.num_successful} successful paths "
        f"({len(report.failed_paths)} failed)."
    )
