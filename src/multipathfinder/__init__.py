"""Multi-path variational inference with importance resampling."""

from __future__ import annotations

__version__ = "0.1.0"
