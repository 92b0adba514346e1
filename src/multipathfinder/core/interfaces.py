"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/core/interfaces.py

Collaborator contracts: the target model, the single-path runner, the
importance-weight correction and the progress wrapper around path
completion.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Protocol, TypeVar

import numpy as np

from multipathfinder.core.types import PathResult
from multipathfinder.io.writers import NullWriter, Writer

T = TypeVar("T")


class Model(Protocol):
    """Target density. Must tolerate concurrent read-only use from worker threads."""

    def constrained_param_names(self) -> List[str]: ...


def no_interrupt() -> None:
    return None


@dataclass(frozen=True)
class PathSettings:
    """
    Per-path settings handed to every runner call unchanged.

    `interrupt` is called by the runner once per optimizer iteration; raising
    from it (e.g. KeyboardInterrupt) aborts the whole run, not just the path.
    """

    num_draws: int = 1000
    num_elbo_draws: int = 25
    refresh: int = 100
    optimizer: Any = None
    interrupt: Callable[[], None] = no_interrupt


@dataclass
class PathSinks:
    """Per-path outputs forwarded to the runner untouched."""

    init_writer: Writer = field(default_factory=NullWriter)
    parameter_writer: Writer = field(default_factory=NullWriter)
    diagnostic_writer: Writer = field(default_factory=NullWriter)

    def close(self) -> None:
        for writer in (self.init_writer, self.parameter_writer, self.diagnostic_writer):
            close = getattr(writer, "close", None)
            if close is not None:
                close()


class PathRunner(Protocol):
    """
    Run one path. Deterministic for a fixed (seed, path_id); reports failure
    through `PathResult.status` rather than raising.
    """

    def __call__(
        self,
        model: Model,
        init: Optional[Mapping[str, Any]],
        *,
        seed: int,
        path_id: int,
        settings: PathSettings,
        sinks: PathSinks,
    ) -> PathResult: ...


class WeightFn(Protocol):
    def __call__(self, log_ratios: np.ndarray, tail_len: float, log: Optional[logging.Logger] = None) -> np.ndarray: ...


class ProgressAdapter(Protocol):
    def __call__(self, iterable: Iterable[T], **kwargs: Any) -> Iterable[T]: ...


def passthrough_progress(iterable: Iterable[T], **_kwargs: Any) -> Iterable[T]:
    return iterable
