"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/cli/app.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import typer

from multipathfinder.cli.commands.run import run as run_cmd
from multipathfinder.cli.commands.tail_length import tail_length as tail_length_cmd
from multipathfinder.cli.commands.validate import validate as validate_cmd
from multipathfinder.utils.logging import configure_logging

app = typer.Typer(
    no_args_is_help=True,
    help="Run several variational paths and merge their draws with importance resampling.",
)
app.info.epilog = "Tip: run `multipathfinder <command> --help` for examples and details."


@app.callback()
def main(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="MULTIPATHFINDER_LOG_LEVEL",
        help="Logging level (e.g., DEBUG, INFO, WARNING).",
    ),
) -> None:
    """Run several variational paths and merge their draws with importance resampling."""
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level")


app.command(
    "run",
    help="Run all paths from CONFIG and write resampled draws to the output directory.",
    short_help="Run a multi-path job.",
)(run_cmd)
app.command(
    "validate",
    help="Validate CONFIG and print the resolved settings.",
    short_help="Validate a config.",
)(validate_cmd)
app.command(
    "tail-length",
    help="Print the Pareto tail length used for N aggregated draws.",
    short_help="Show PSIS tail length.",
)(tail_length_cmd)


if __name__ == "__main__":
    app()
