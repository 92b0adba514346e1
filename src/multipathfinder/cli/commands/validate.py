"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/cli/commands/validate.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

from multipathfinder.config.load import load_config

console = Console()


def validate(
    config: Path = typer.Argument(..., help="Path to multipathfinder config.yaml.", metavar="CONFIG"),
) -> None:
    try:
        cfg = load_config(config)
    except (ValueError, ValidationError, FileNotFoundError) as exc:
        console.print(f"Error: {exc}")
        raise typer.Exit(code=1)
    console.print(f"Config OK: {config}")
    console.print(yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False), markup=False)
