"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/app/multi_workflow.py

Run several paths and merge their draws with Pareto-smoothed importance
resampling.

Stages: headers -> parallel paths -> (abort if nothing succeeded) ->
aggregate -> resample and stream -> timing trailer. Failures are returned as
an ErrorCode on the report; only the headers precede a failed run's exit.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from multipathfinder.app.report import log_eval_count, write_headers, write_timing
from multipathfinder.config.schema import MultiPathSettings
from multipathfinder.core.aggregate import aggregate
from multipathfinder.core.errors import MultiPathError, NoSuccessfulPathsError
from multipathfinder.core.interfaces import (
    Model,
    PathRunner,
    PathSettings,
    PathSinks,
    ProgressAdapter,
    WeightFn,
    no_interrupt,
    passthrough_progress,
)
from multipathfinder.core.orchestrator import duration_seconds, run_paths
from multipathfinder.core.psis import psis_weights
from multipathfinder.core.resample import resample
from multipathfinder.core.types import ErrorCode
from multipathfinder.io.writers import Writer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MultiPathReport:
    code: ErrorCode
    num_successful: int = 0
    failed_paths: List[int] = field(default_factory=list)
    eval_count: int = 0
    paths_seconds: float = 0.0
    psis_seconds: float = 0.0
    draws: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.code == ErrorCode.OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": int(self.code),
            "code_name": self.code.name,
            "num_successful": self.num_successful,
            "failed_paths": list(self.failed_paths),
            "eval_count": self.eval_count,
            "paths_seconds": self.paths_seconds,
            "psis_seconds": self.psis_seconds,
            "num_multi_draws": len(self.draws),
        }


def run_multi_pathfinder(
    model: Model,
    inits: Union[Optional[Mapping[str, Any]], Sequence[Optional[Mapping[str, Any]]]],
    runner: PathRunner,
    settings: MultiPathSettings,
    *,
    parameter_writer: Writer,
    diagnostic_writer: Writer,
    path_sinks: Optional[Sequence[PathSinks]] = None,
    weight_fn: WeightFn = psis_weights,
    progress: ProgressAdapter = passthrough_progress,
    interrupt: Callable[[], None] = no_interrupt,
    log: Optional[logging.Logger] = None,
) -> MultiPathReport:
    log = log or logger
    start = time.perf_counter()
    write_headers(model, parameter_writer, diagnostic_writer)

    outcome = run_paths(
        model,
        inits,
        runner,
        random_seed=settings.random_seed,
        path=settings.path,
        num_paths=settings.num_paths,
        settings=PathSettings(
            num_draws=settings.num_draws,
            num_elbo_draws=settings.num_elbo_draws,
            refresh=settings.refresh,
            optimizer=settings.optimizer,
            interrupt=interrupt,
        ),
        path_sinks=path_sinks,
        num_workers=settings.num_workers,
        log=log,
        progress=progress,
    )
    paths_end = time.perf_counter()
    report = MultiPathReport(
        code=ErrorCode.OK,
        num_successful=outcome.num_successful,
        failed_paths=list(outcome.failed_paths),
        eval_count=outcome.eval_count,
        paths_seconds=duration_seconds(start, paths_end),
    )

    try:
        aggregated = aggregate(outcome.successful(), log=log)
        log_eval_count(log, outcome.eval_count, settings.refresh)
        draws = resample(
            aggregated,
            settings.num_multi_draws,
            random_seed=settings.random_seed,
            path=settings.path,
            writer=parameter_writer,
            weight_fn=weight_fn,
            log=log,
        )
    except NoSuccessfulPathsError as exc:
        return replace(report, code=exc.code)
    except MultiPathError as exc:
        log.error("%s", exc)
        return replace(report, code=exc.code)
    psis_seconds = duration_seconds(paths_end, time.perf_counter())

    write_timing(parameter_writer, report.paths_seconds, psis_seconds)
    return replace(report, psis_seconds=psis_seconds, draws=draws)
