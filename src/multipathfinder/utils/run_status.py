"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/utils/run_status.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RunStatusWriter:
    """run_status.json for one run; every write replaces the file atomically."""

    path: Path
    stage: str
    status: str = "running"
    payload: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        base = {
            "stage": self.stage,
            "status": self.status,
            "started_at": _utc_now(),
        }
        base.update(self.payload)
        self.payload = base
        self.write()

    def finish(self, status: str = "completed", **fields: Any) -> None:
        self.payload.update(fields)
        self.payload["status"] = status
        self.status = status
        self.payload["finished_at"] = _utc_now()
        self.write()

    def write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f"{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w") as fh:
                json.dump(self.payload, fh, indent=2)
            os.replace(tmp_name, self.path)
        finally:
            Path(tmp_name).unlink(missing_ok=True)
