"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/config/load.py

Read a YAML config and resolve its file references against the config's
folder: `output.dir`, and `inits` when it names a YAML file rather than
listing the init contexts inline.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml

from multipathfinder.config.schema import MultiPathConfig, MultiPathRoot


def _load_inits_file(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"inits file not found: {path}")
    data = yaml.safe_load(path.read_text())
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(f"inits file {path} must hold a mapping or a list of mappings")
    return data


def load_config(path: Path) -> MultiPathConfig:
    path = Path(path)
    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict) or "multipathfinder" not in raw:
        raise ValueError("Config schema v1 required (missing root key: multipathfinder)")
    payload = raw.get("multipathfinder", {})
    if not isinstance(payload, dict):
        raise ValueError("Config schema v1 required (multipathfinder must be a mapping)")
    if payload.get("schema_version") != 1:
        raise ValueError("Config schema v1 required (schema_version: 1)")

    base = path.resolve().parent
    inits = payload.get("inits")
    if isinstance(inits, str):
        inits_path = Path(inits)
        payload["inits"] = _load_inits_file(inits_path if inits_path.is_absolute() else base / inits_path)

    cfg = MultiPathRoot.model_validate(raw).multipathfinder
    if not cfg.output.dir.is_absolute():
        cfg.output.dir = base / cfg.output.dir
    return cfg
