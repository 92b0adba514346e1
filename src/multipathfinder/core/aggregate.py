"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/core/aggregate.py

Concatenate successful path results into one draw set.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from multipathfinder.core.errors import DimensionMismatchError, NoSuccessfulPathsError
from multipathfinder.core.types import AggregatedSet, PathResult

logger = logging.getLogger(__name__)


def aggregate(results: Sequence[PathResult], log: Optional[logging.Logger] = None) -> AggregatedSet:
    """
    Stack ratios end to end and sample matrices side by side, in input order.

    Raises NoSuccessfulPathsError on empty input and DimensionMismatchError
    when a path disagrees with the first one on row count, or when its ratio
    length differs from its column count.
    """
    log = log or logger
    if not results:
        log.info("No pathfinders ran successfully")
        raise NoSuccessfulPathsError()

    num_rows = results[0].samples.shape[0]
    offsets: List[int] = []
    total = 0
    for pos, res in enumerate(results):
        rows, cols = res.samples.shape
        if rows != num_rows:
            raise DimensionMismatchError(
                f"Path result {pos} has {rows} sample rows; expected {num_rows} (from the first successful path)"
            )
        if cols != res.num_draws:
            raise DimensionMismatchError(
                f"Path result {pos} has {res.num_draws} ratios but {cols} sample columns"
            )
        offsets.append(total)
        total += cols

    ratios = np.empty(total, dtype=float)
    samples = np.empty((num_rows, total), dtype=float)
    for start, res in zip(offsets, results):
        stop = start + res.num_draws
        ratios[start:stop] = res.ratios
        samples[:, start:stop] = res.samples
    log.debug("Aggregated %d draws from %d paths (%d rows)", total, len(results), num_rows)
    return AggregatedSet(ratios=ratios, samples=samples, offsets=tuple(offsets))
