"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/core/resample.py

Importance resampling of aggregated draws.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

import numpy as np

from multipathfinder.core.errors import DegenerateWeightsError
from multipathfinder.core.interfaces import WeightFn
from multipathfinder.core.psis import psis_weights, tail_length
from multipathfinder.core.types import AggregatedSet
from multipathfinder.io.writers import Writer
from multipathfinder.utils.rng import create_rng

logger = logging.getLogger(__name__)


class ImportanceResampler:
    """Categorical draws over column indices, proportional to `weights`."""

    def __init__(self, weights: np.ndarray, rng: np.random.Generator) -> None:
        w = np.asarray(weights, dtype=float).reshape(-1)
        if w.size == 0:
            raise DegenerateWeightsError("Weight vector is empty")
        if not np.all(np.isfinite(w)):
            raise DegenerateWeightsError("Weight vector contains non-finite entries")
        if np.any(w < 0):
            raise DegenerateWeightsError("Weight vector contains negative entries")
        cdf = np.cumsum(w)
        total = float(cdf[-1])
        if total <= 0.0:
            raise DegenerateWeightsError("All importance weights are zero")
        self._cdf = cdf
        self._total = total
        self._last = int(np.searchsorted(cdf, total, side="left"))
        self.rng = rng

    def draw(self) -> int:
        u = self.rng.random() * self._total
        idx = int(np.searchsorted(self._cdf, u, side="right"))
        # u can round up to the total; clamp to the last positive-weight entry.
        return min(idx, self._last)

    def indices(self, num_draws: int) -> Iterator[int]:
        for _ in range(num_draws):
            yield self.draw()


def resample(
    aggregated: AggregatedSet,
    num_draws: int,
    *,
    random_seed: int,
    path: int,
    writer: Writer,
    weight_fn: WeightFn = psis_weights,
    log: Optional[logging.Logger] = None,
) -> List[int]:
    """
    Draw `num_draws` columns of `aggregated` and write each one as it is drawn.

    The generator is keyed by `(random_seed, path)` on the resample stream,
    disjoint from every path stream. Returns the drawn column indices.
    """
    log = log or logger
    if num_draws < 0:
        raise ValueError(f"num_draws must be >= 0, got {num_draws}")
    tail_len = tail_length(aggregated.num_draws)
    weights = weight_fn(aggregated.ratios, tail_len, log)
    if len(weights) != aggregated.num_draws:
        raise DegenerateWeightsError(
            f"Weight correction returned {len(weights)} weights for {aggregated.num_draws} draws"
        )
    sampler = ImportanceResampler(weights, create_rng(random_seed, path, stream="resample"))
    log.debug("Resampling %d of %d draws (tail length %.2f)", num_draws, aggregated.num_draws, tail_len)
    drawn: List[int] = []
    for idx in sampler.indices(num_draws):
        writer.row(aggregated.column(idx))
        drawn.append(idx)
    return drawn
