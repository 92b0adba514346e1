"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/app/progress.py

tqdm bar over path completions. Disabled off-terminal, in CI, and when
MULTIPATHFINDER_NONINTERACTIVE is set.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from typing import Any, TypeVar

from tqdm import tqdm

from multipathfinder.core.interfaces import ProgressAdapter, passthrough_progress

T = TypeVar("T")
NONINTERACTIVE_ENV_VAR = "MULTIPATHFINDER_NONINTERACTIVE"
_TRUTHY = {"1", "true", "yes", "y", "on"}


def interactive_terminal() -> bool:
    for name in (NONINTERACTIVE_ENV_VAR, "CI"):
        if os.environ.get(name, "").strip().lower() in _TRUTHY:
            return False
    stream = getattr(sys, "stderr", None)
    return bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())


def path_progress(enabled: bool) -> ProgressAdapter:
    """Progress wrapper for the orchestrator's completion loop."""
    if not enabled or not interactive_terminal():
        return passthrough_progress

    def _progress(iterable: Iterable[T], **kwargs: Any) -> Iterable[T]:
        return tqdm(
            iterable,
            total=kwargs.get("total"),
            desc=kwargs.get("desc", "paths"),
            unit="path",
            leave=kwargs.get("leave", False),
            dynamic_ncols=True,
        )

    return _progress
