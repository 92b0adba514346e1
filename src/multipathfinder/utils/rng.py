"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/utils/rng.py

Seeded generator construction with per-purpose stream isolation.

A generator is keyed by (seed, stream kind, stream id). Paths use the
"path" kind with id `path + i`; importance resampling uses the "resample"
kind with id `path`, so it never shares a stream with any path even when
the ids coincide.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from typing import Literal

import numpy as np

StreamKind = Literal["path", "resample"]

_STREAM_KINDS: dict[str, int] = {"path": 0, "resample": 1}


def seed_sequence(seed: int, stream_id: int, *, stream: StreamKind = "path") -> np.random.SeedSequence:
    if seed < 0:
        raise ValueError(f"seed must be a non-negative integer, got {seed}")
    if stream_id < 0:
        raise ValueError(f"stream id must be a non-negative integer, got {stream_id}")
    try:
        kind = _STREAM_KINDS[stream]
    except KeyError:
        raise ValueError(f"Unknown stream kind '{stream}'. Available: {sorted(_STREAM_KINDS)}") from None
    return np.random.SeedSequence(entropy=int(seed), spawn_key=(kind, int(stream_id)))


def create_rng(seed: int, stream_id: int, *, stream: StreamKind = "path") -> np.random.Generator:
    return np.random.default_rng(seed_sequence(seed, stream_id, stream=stream))
