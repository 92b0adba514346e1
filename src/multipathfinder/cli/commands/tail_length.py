"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/cli/commands/tail_length.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import typer
from rich.console import Console

from multipathfinder.core.psis import tail_length as compute_tail_length

console = Console()


def tail_length(
    num_draws: int = typer.Argument(..., min=0, help="Number of aggregated draws.", metavar="N"),
) -> None:
    console.print(f"{compute_tail_length(num_draws):g}")
