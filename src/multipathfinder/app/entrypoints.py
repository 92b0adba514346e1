"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/app/entrypoints.py

Resolve `package.module:attribute` strings named in a config into the model,
path runner and weight correction used by a run. Raises ValueError on
import/load failures.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Any, Callable

from multipathfinder.config.schema import EntrypointsConfig
from multipathfinder.core.interfaces import Model, PathRunner, WeightFn
from multipathfinder.core.psis import psis_weights


def load_object(spec: str) -> Any:
    module_name, _, attr_path = spec.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"Failed to import module '{module_name}' for entrypoint '{spec}': {exc}") from exc
    obj: Any = module
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"Entrypoint '{spec}' has no attribute '{part}'") from None
    return obj


def _instantiate_model(obj: Any) -> Model:
    if hasattr(obj, "constrained_param_names") and not isinstance(obj, type):
        return obj
    if callable(obj):
        model = obj()
        if not hasattr(model, "constrained_param_names"):
            raise ValueError(f"Model factory {obj!r} returned an object without constrained_param_names()")
        return model
    raise ValueError(f"Model entrypoint {obj!r} is neither a model nor a model factory")


def _require_callable(obj: Any, label: str) -> Callable[..., Any]:
    if not callable(obj):
        raise ValueError(f"{label} entrypoint {obj!r} is not callable")
    return obj


@dataclass(frozen=True)
class ResolvedEntrypoints:
    model: Model
    runner: PathRunner
    weight_fn: WeightFn


def resolve_entrypoints(cfg: EntrypointsConfig) -> ResolvedEntrypoints:
    model = _instantiate_model(load_object(cfg.model))
    runner = _require_callable(load_object(cfg.runner), "Runner")
    weight_fn = _require_callable(load_object(cfg.weights), "Weights") if cfg.weights else psis_weights
    return ResolvedEntrypoints(model=model, runner=runner, weight_fn=weight_fn)
