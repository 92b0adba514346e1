"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/core/psis.py

Pareto-smoothed importance weights over an externally chosen tail length.

Smoothing is delegated to `arviz.psislw`, which sizes the tail as
ceil(min(0.2 N, 3 sqrt(N / reff))). Passing reff = 9 N / tail_len**2 makes
that tail equal to `tail_len` for any tail_len <= 0.2 N.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

import arviz as az
import numpy as np

logger = logging.getLogger(__name__)

K_WARN_THRESHOLD = 0.7


def tail_length(num_draws: int) -> float:
    """Number of upper-order ratio statistics to smooth: min(0.2 N, 3 sqrt(N))."""
    return min(0.2 * num_draws, 3.0 * math.sqrt(num_draws))


def reff_for_tail(num_draws: int, tail_len: float) -> float:
    # The (1 + 1e-12) factor keeps ceil() from rounding an integral tail up by one.
    return 9.0 * num_draws / tail_len**2 * (1.0 + 1e-12)


def _normalize(lw: np.ndarray) -> np.ndarray:
    amax = np.max(lw)
    return lw - (amax + np.log(np.sum(np.exp(lw - amax))))


def psis_log_weights(
    log_ratios: np.ndarray, tail_len: float, log: Optional[logging.Logger] = None
) -> Tuple[np.ndarray, float]:
    """Return normalized smoothed log weights and the fitted shape k (inf if not fitted)."""
    log = log or logger
    lw = np.array(log_ratios, dtype=float).reshape(-1)
    n = lw.shape[0]
    if n == 0:
        return lw, math.inf
    lw[np.isnan(lw)] = -np.inf
    lw_max = np.max(lw)
    if lw_max == np.inf:
        # Infinite ratios dominate: uniform mass on them.
        return _normalize(np.where(lw == np.inf, 0.0, -np.inf)), math.inf
    if lw_max == -np.inf:
        log.warning("All importance ratios are -inf or NaN; no usable weights.")
        return np.full(n, -np.inf), math.inf
    if n < 2 or tail_len <= 0:
        log.debug("Tail length %.2f too short for Pareto smoothing (n=%d).", tail_len, n)
        return _normalize(lw), math.inf

    smoothed, k = az.psislw(lw, reff=reff_for_tail(n, tail_len))
    k = float(np.asarray(k))
    if np.isfinite(k) and k > K_WARN_THRESHOLD:
        log.warning(
            "Pareto k value (%.2f) is greater than %.1f. Importance resampling was not able to improve "
            "the approximation, which may indicate that the approximation itself is poor.",
            k,
            K_WARN_THRESHOLD,
        )
    return np.asarray(smoothed, dtype=float).reshape(-1), k


def psis_weights(log_ratios: np.ndarray, tail_len: float, log: Optional[logging.Logger] = None) -> np.ndarray:
    """Normalized PSIS weights for `log_ratios`; same length as the input."""
    lw, _ = psis_log_weights(log_ratios, tail_len, log=log)
    return np.exp(lw)
