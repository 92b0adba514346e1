"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/tests/test_config.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from multipathfinder.app.entrypoints import load_object, resolve_entrypoints
from multipathfinder.config.load import load_config
from multipathfinder.config.schema import EntrypointsConfig, MultiPathSettings
from multipathfinder.core.psis import psis_weights
from multipathfinder.tests.fakes import GaussianModel, gaussian_runner


def _write(tmp_path: Path, payload: dict) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(payload, sort_keys=False))
    return path


def _payload(**settings) -> dict:
    return {
        "multipathfinder": {
            "schema_version": 1,
            "settings": {"random_seed": 3, **settings},
            "entrypoints": {
                "model": "multipathfinder.tests.fakes:make_model",
                "runner": "multipathfinder.tests.fakes:gaussian_runner",
            },
        }
    }


def test_load_config_applies_defaults(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, _payload()))
    assert cfg.settings.random_seed == 3
    assert cfg.settings.path == 1
    assert cfg.settings.num_paths == 4
    assert cfg.settings.num_multi_draws == 1000
    assert cfg.settings.optimizer.history_size == 5
    assert cfg.output.dir == tmp_path.resolve() / "output"


def test_missing_root_key(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="missing root key"):
        load_config(_write(tmp_path, {"other": {}}))


def test_schema_version_required(tmp_path: Path) -> None:
    payload = _payload()
    payload["multipathfinder"]["schema_version"] = 2
    with pytest.raises(ValueError, match="schema_version: 1"):
        load_config(_write(tmp_path, payload))


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path, _payload(num_chains=2)))


@pytest.mark.parametrize(
    "overrides",
    [{"num_paths": 0}, {"random_seed": -1}, {"num_multi_draws": -1}, {"refresh": -5}, {"num_workers": 0}],
)
def test_settings_bounds(overrides: dict) -> None:
    base = {"random_seed": 1}
    base.update(overrides)
    with pytest.raises(ValidationError):
        MultiPathSettings(**base)


def test_zero_multi_draws_is_valid() -> None:
    assert MultiPathSettings(random_seed=1, num_multi_draws=0).num_multi_draws == 0


def test_inits_length_must_match_paths(tmp_path: Path) -> None:
    payload = _payload(num_paths=3)
    payload["multipathfinder"]["inits"] = [{"mu": 0.0}, {"mu": 1.0}]
    with pytest.raises(ValidationError, match="one per path"):
        load_config(_write(tmp_path, payload))


def test_entrypoint_format_is_checked() -> None:
    with pytest.raises(ValidationError, match="package.module:attribute"):
        EntrypointsConfig(model="no_colon", runner="a:b")


def test_resolve_entrypoints() -> None:
    resolved = resolve_entrypoints(
        EntrypointsConfig(
            model="multipathfinder.tests.fakes:make_model",
            runner="multipathfinder.tests.fakes:gaussian_runner",
        )
    )
    assert isinstance(resolved.model, GaussianModel)
    assert resolved.runner is gaussian_runner
    assert resolved.weight_fn is psis_weights


def test_load_object_errors() -> None:
    with pytest.raises(ValueError, match="Failed to import"):
        load_object("multipathfinder.does_not_exist:thing")
    with pytest.raises(ValueError, match="no attribute"):
        load_object("multipathfinder.tests.fakes:missing")


def test_output_dir_resolves_against_config_folder(tmp_path: Path) -> None:
    payload = _payload()
    payload["multipathfinder"]["output"] = {"dir": "runs/a"}
    cfg_dir = tmp_path / "cfg"
    cfg_dir.mkdir()
    cfg = load_config(_write(cfg_dir, payload))
    assert cfg.output.dir == cfg_dir.resolve() / "runs" / "a"


def test_absolute_output_dir_is_kept(tmp_path: Path) -> None:
    payload = _payload()
    payload["multipathfinder"]["output"] = {"dir": str(tmp_path / "abs")}
    assert load_config(_write(tmp_path, payload)).output.dir == tmp_path / "abs"


def test_inits_file_resolves_against_config_folder(tmp_path: Path) -> None:
    (tmp_path / "inits.yaml").write_text(yaml.safe_dump([{"mu": 0.0}, {"mu": 1.0}]))
    payload = _payload(num_paths=2)
    payload["multipathfinder"]["inits"] = "inits.yaml"
    cfg = load_config(_write(tmp_path, payload))
    assert cfg.inits == [{"mu": 0.0}, {"mu": 1.0}]
    assert cfg.path_inits() == [{"mu": 0.0}, {"mu": 1.0}]


def test_single_init_mapping_is_shared(tmp_path: Path) -> None:
    (tmp_path / "inits.yaml").write_text(yaml.safe_dump({"mu": 0.5}))
    payload = _payload(num_paths=3)
    payload["multipathfinder"]["inits"] = "inits.yaml"
    cfg = load_config(_write(tmp_path, payload))
    assert cfg.path_inits() == {"mu": 0.5}


def test_missing_inits_file(tmp_path: Path) -> None:
    payload = _payload()
    payload["multipathfinder"]["inits"] = "nope.yaml"
    with pytest.raises(FileNotFoundError, match="inits file not found"):
        load_config(_write(tmp_path, payload))
