"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/core/types.py

Result containers shared by the path, aggregation and resampling phases.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional

import numpy as np


class ErrorCode(IntEnum):
    """Process-style status codes (sysexits numbering)."""

    OK = 0
    DATAERR = 65
    SOFTWARE = 70
    CONFIG = 78


class PathStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass
class PathResult:
    """Output of one path: log density ratios and a (d x n_i) draw matrix."""

    status: PathStatus
    ratios: np.ndarray
    samples: np.ndarray
    eval_count: int = 0

    def __post_init__(self) -> None:
        self.ratios = np.asarray(self.ratios, dtype=float).reshape(-1)
        samples = np.asarray(self.samples, dtype=float)
        if samples.ndim != 2:
            if samples.size:
                raise ValueError(f"samples must be a 2-D (rows x draws) array, got shape {samples.shape}")
            samples = samples.reshape(0, 0)
        self.samples = samples
        self.eval_count = int(self.eval_count)
        if self.eval_count < 0:
            raise ValueError("eval_count must be non-negative")

    @property
    def succeeded(self) -> bool:
        return self.status == PathStatus.OK

    @property
    def num_draws(self) -> int:
        return int(self.ratios.shape[0])

    @classmethod
    def failure(cls, eval_count: int = 0) -> "PathResult":
        return cls(
            status=PathStatus.FAILED,
            ratios=np.empty(0),
            samples=np.empty((0, 0)),
            eval_count=eval_count,
        )


@dataclass(frozen=True)
class AggregatedSet:
    ratios: np.ndarray
    samples: np.ndarray
    offsets: tuple[int, ...]

    @property
    def num_draws(self) -> int:
        return int(self.ratios.shape[0])

    def column(self, idx: int) -> np.ndarray:
        return self.samples[:, idx]


@dataclass
class PathsOutcome:
    """
    Slot-per-path record of the parallel phase.

    `results[i]` is filled only by the worker that ran path `i`; failed paths
    leave their slot as None and `success_mask[i]` False.
    """

    results: List[Optional[PathResult]]
    success_mask: np.ndarray
    eval_count: int = 0
    elapsed: float = 0.0
    failed_paths: List[int] = field(default_factory=list)

    @property
    def num_successful(self) -> int:
        return int(self.success_mask.sum())

    def successful(self) -> List[PathResult]:
        return [res for res, ok in zip(self.results, self.success_mask) if ok and res is not None]
