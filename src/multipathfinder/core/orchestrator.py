"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/core/orchestrator.py

Dispatch independent paths across a shared thread pool.

Each worker writes only its own slot of a pre-allocated result array, so
the association between path id and result does not depend on completion
order. A failed path never cancels its siblings: the call blocks until
every submitted path has finished.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from multipathfinder.core.interfaces import (
    Model,
    PathRunner,
    PathSettings,
    PathSinks,
    ProgressAdapter,
    passthrough_progress,
)
from multipathfinder.core.types import PathResult, PathsOutcome

logger = logging.getLogger(__name__)

InitContext = Optional[Mapping[str, Any]]


def duration_seconds(start: float, end: float) -> float:
    return round(end - start, 3)


def _resolve_inits(inits: Union[InitContext, Sequence[InitContext]], num_paths: int) -> List[InitContext]:
    if inits is None or isinstance(inits, Mapping):
        return [inits] * num_paths
    resolved = list(inits)
    if len(resolved) != num_paths:
        raise ValueError(f"Expected {num_paths} init contexts (one per path), got {len(resolved)}")
    return resolved


def _resolve_sinks(path_sinks: Optional[Sequence[PathSinks]], num_paths: int) -> List[PathSinks]:
    if path_sinks is None:
        return [PathSinks() for _ in range(num_paths)]
    resolved = list(path_sinks)
    if len(resolved) != num_paths:
        raise ValueError(f"Expected {num_paths} per-path sinks, got {len(resolved)}")
    return resolved


def run_paths(
    model: Model,
    inits: Union[InitContext, Sequence[InitContext]],
    runner: PathRunner,
    *,
    random_seed: int,
    path: int,
    num_paths: int,
    settings: Optional[PathSettings] = None,
    path_sinks: Optional[Sequence[PathSinks]] = None,
    num_workers: Optional[int] = None,
    log: Optional[logging.Logger] = None,
    progress: ProgressAdapter = passthrough_progress,
) -> PathsOutcome:
    """
    Run `num_paths` paths concurrently and collect their results.

    Path `i` is seeded with `(random_seed, path + i)`. Failed paths are
    logged by index and excluded; their evaluation counts still contribute to
    the total. A runner that raises, or returns something other than a
    PathResult, is recorded as a failed path. Each path's sinks are closed once
    its runner returns.
    """
    log = log or logger
    if num_paths < 1:
        raise ValueError(f"num_paths must be >= 1, got {num_paths}")
    init_list = _resolve_inits(inits, num_paths)
    sink_list = _resolve_sinks(path_sinks, num_paths)
    path_settings = settings if settings is not None else PathSettings()

    results: List[Optional[PathResult]] = [None] * num_paths
    success_mask = np.zeros(num_paths, dtype=bool)
    eval_counts = np.zeros(num_paths, dtype=np.int64)

    def _run_one(idx: int) -> None:
        try:
            ret = runner(
                model,
                init_list[idx],
                seed=random_seed,
                path_id=path + idx,
                settings=path_settings,
                sinks=sink_list[idx],
            )
            if not isinstance(ret, PathResult):
                log.error(
                    "Pathfinder iteration: %d returned %s instead of a PathResult.", idx, type(ret).__name__
                )
                return
            eval_counts[idx] = ret.eval_count
            if ret.succeeded:
                results[idx] = ret
                success_mask[idx] = True
        except Exception:
            log.exception("Pathfinder iteration: %d raised an exception.", idx)
        finally:
            sink_list[idx].close()

    start = time.perf_counter()
    max_workers = min(num_workers or num_paths, num_paths)
    log.debug("Dispatching %d paths on %d workers (seed=%d, path offset=%d)", num_paths, max_workers, random_seed, path)
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="path") as executor:
        futures: Dict[Future[None], int] = {executor.submit(_run_one, idx): idx for idx in range(num_paths)}
        try:
            for future in progress(as_completed(futures), total=num_paths, desc="paths", leave=False):
                future.result()
        except BaseException:
            # interrupt raised on a worker: drop paths that have not started
            executor.shutdown(wait=False, cancel_futures=True)
            raise
    end = time.perf_counter()

    failed = [idx for idx in range(num_paths) if not success_mask[idx]]
    for idx in failed:
        log.info("Pathfinder iteration: %d failed.", idx)
    return PathsOutcome(
        results=results,
        success_mask=success_mask,
        eval_count=int(eval_counts.sum()),
        elapsed=duration_seconds(start, end),
        failed_paths=failed,
    )
