"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/tests/test_run_status.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import json
from pathlib import Path

from multipathfinder.utils.run_status import RunStatusWriter


def test_run_status_lifecycle(tmp_path: Path) -> None:
    path = tmp_path / "run" / "run_status.json"
    writer = RunStatusWriter(path=path, stage="multipath", payload={"num_paths": 4})
    started = json.loads(path.read_text())
    assert started["status"] == "running"
    assert started["num_paths"] == 4
    assert started["stage"] == "multipath"

    writer.finish(status="failed", code=70)
    payload = json.loads(path.read_text())
    assert payload["status"] == "failed"
    assert payload["code"] == 70
    assert "finished_at" in payload
    assert writer.status == "failed"
    assert not list(path.parent.glob("*.tmp"))
