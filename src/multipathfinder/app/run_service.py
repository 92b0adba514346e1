"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/app/run_service.py

Wire a validated config to files on disk and run the multi-path workflow.

Layout under the output directory:
  draws.csv            resampled draws with header and timing trailer
  diagnostics.csv      diagnostic header
  paths/path_<id>.csv  per-path parameter output from the runner
  paths/path_<id>_diagnostics.csv
  paths/path_<id>_init.csv
  run_status.json

Per-path files are opened on the runner's first write and closed when the
path finishes, so at most 3 x num_workers of them are open at once. A path
whose runner writes nothing leaves no file behind.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Callable, List, Optional

from multipathfinder.app.entrypoints import resolve_entrypoints
from multipathfinder.app.multi_workflow import MultiPathReport, run_multi_pathfinder
from multipathfinder.app.progress import path_progress
from multipathfinder.config.schema import MultiPathConfig
from multipathfinder.core.interfaces import PathSinks, no_interrupt
from multipathfinder.io.writers import FileWriter, StreamWriter
from multipathfinder.utils.run_status import RunStatusWriter

logger = logging.getLogger(__name__)


def _path_sinks(paths_dir: Path, path_id: int, comment_prefix: str) -> PathSinks:
    return PathSinks(
        init_writer=FileWriter(paths_dir / f"path_{path_id}_init.csv", comment_prefix=comment_prefix),
        parameter_writer=FileWriter(paths_dir / f"path_{path_id}.csv", comment_prefix=comment_prefix),
        diagnostic_writer=FileWriter(paths_dir / f"path_{path_id}_diagnostics.csv", comment_prefix=comment_prefix),
    )


def run_from_config(
    cfg: MultiPathConfig,
    *,
    out_dir: Optional[Path] = None,
    progress_bar: bool = False,
    interrupt: Callable[[], None] = no_interrupt,
) -> MultiPathReport:
    """Run `cfg` into `out_dir` (default `cfg.output.dir`, resolved by `load_config`)."""
    entry = resolve_entrypoints(cfg.entrypoints)
    settings = cfg.settings
    run_dir = Path(out_dir) if out_dir is not None else cfg.output.dir
    paths_dir = run_dir / "paths"
    paths_dir.mkdir(parents=True, exist_ok=True)

    status = RunStatusWriter(
        path=run_dir / "run_status.json",
        stage="multipath",
        payload={
            "random_seed": settings.random_seed,
            "path": settings.path,
            "num_paths": settings.num_paths,
            "num_multi_draws": settings.num_multi_draws,
        },
    )
    prefix = cfg.output.comment_prefix
    path_sinks: List[PathSinks] = [
        _path_sinks(paths_dir, settings.path + idx, prefix) for idx in range(settings.num_paths)
    ]
    try:
        with ExitStack() as stack:
            for sinks in path_sinks:
                stack.callback(sinks.close)
            parameter_writer = StreamWriter(stack.enter_context((run_dir / "draws.csv").open("w")), prefix)
            diagnostic_writer = StreamWriter(stack.enter_context((run_dir / "diagnostics.csv").open("w")), prefix)
            report = run_multi_pathfinder(
                entry.model,
                cfg.path_inits(),
                entry.runner,
                settings,
                parameter_writer=parameter_writer,
                diagnostic_writer=diagnostic_writer,
                path_sinks=path_sinks,
                weight_fn=entry.weight_fn,
                progress=path_progress(progress_bar),
                interrupt=interrupt,
            )
    except BaseException as exc:
        status.finish("failed", error=f"{type(exc).__name__}: {exc}")
        raise
    status.finish("completed" if report.ok else "failed", **report.to_dict())
    logger.debug("Run status written to %s", status.path)
    return report
