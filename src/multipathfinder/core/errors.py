"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/core/errors.py

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from multipathfinder.core.types import ErrorCode


class MultiPathError(RuntimeError):
    code: ErrorCode = ErrorCode.SOFTWARE


class NoSuccessfulPathsError(MultiPathError):
    def __init__(self) -> None:
        super().__init__("No pathfinders ran successfully")


class DimensionMismatchError(MultiPathError):
    code = ErrorCode.DATAERR


class DegenerateWeightsError(MultiPathError):
    pass
