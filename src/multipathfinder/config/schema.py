"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/config/schema.py

Defines the multipathfinder v1 configuration schema.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class StrictBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class OptimizerConfig(StrictBaseModel):
    """L-BFGS settings forwarded unmodified to the single-path runner."""

    init_radius: float = Field(2.0, ge=0.0)
    history_size: int = Field(5, ge=1)
    init_alpha: float = Field(0.001, gt=0.0)
    tol_obj: float = Field(1e-12, ge=0.0)
    tol_rel_obj: float = Field(1e4, ge=0.0)
    tol_grad: float = Field(1e-8, ge=0.0)
    tol_rel_grad: float = Field(1e7, ge=0.0)
    tol_param: float = Field(1e-8, ge=0.0)
    num_iterations: int = Field(1000, ge=1)
    save_iterations: bool = False


class MultiPathSettings(StrictBaseModel):
    random_seed: int = Field(..., ge=0)
    path: int = Field(1, ge=0, description="Stream offset; path i runs on stream path + i.")
    num_paths: int = Field(4, ge=1)
    num_elbo_draws: int = Field(25, ge=1)
    num_draws: int = Field(1000, ge=1, description="Approximate draws returned by each path.")
    num_multi_draws: int = Field(1000, ge=0, description="Draws kept after importance resampling.")
    refresh: int = Field(100, ge=0, description="0 suppresses progress logging.")
    num_workers: Optional[int] = Field(None, ge=1)
    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)


class EntrypointsConfig(StrictBaseModel):
    model: str
    runner: str
    weights: Optional[str] = None

    @field_validator("model", "runner", "weights")
    @classmethod
    def _check_import_string(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        module, sep, attr = v.partition(":")
        if not sep or not module.strip() or not attr.strip():
            raise ValueError(f"entrypoint '{v}' must look like 'package.module:attribute'")
        return v.strip()


class OutputConfig(StrictBaseModel):
    dir: Path = Path("output")
    progress_bar: bool = True
    comment_prefix: str = "# "


class MultiPathConfig(StrictBaseModel):
    schema_version: Literal[1] = 1
    settings: MultiPathSettings
    entrypoints: EntrypointsConfig
    inits: Optional[List[Dict[str, Any]]] = None
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode="after")
    def _check_inits(self) -> "MultiPathConfig":
        if self.inits is not None and len(self.inits) not in (1, self.settings.num_paths):
            raise ValueError(
                f"inits must hold 1 entry or one per path ({self.settings.num_paths}), got {len(self.inits)}"
            )
        return self

    def path_inits(self) -> Union[None, Dict[str, Any], List[Dict[str, Any]]]:
        """A single entry is shared by every path; otherwise one entry per path."""
        if self.inits is not None and len(self.inits) == 1:
            return self.inits[0]
        return self.inits


class MultiPathRoot(StrictBaseModel):
    multipathfinder: MultiPathConfig
