"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/io/writers.py

Ordered output sinks for parameter and diagnostic streams.

Every sink accepts four kinds of calls: a header row of field names, one
numeric row per draw, an empty section break, and a free-text message.
Sinks must emit calls in the order they are made.

Module Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, List, Optional, Protocol, Sequence, Tuple

import numpy as np


class Writer(Protocol):
    def header(self, names: Sequence[str]) -> None: ...

    def row(self, values: Sequence[float]) -> None: ...

    def section_break(self) -> None: ...

    def message(self, text: str) -> None: ...


def _format_value(value: float) -> str:
    return repr(float(value)) if np.isfinite(value) else str(float(value))


class StreamWriter:
    """Comma-separated rows over a text handle; comments carry `comment_prefix`."""

    def __init__(self, stream: Optional[IO[str]], comment_prefix: str = "# ") -> None:
        self.stream = stream
        self.comment_prefix = comment_prefix
        self._lock = threading.Lock()

    def _emit(self, line: str) -> None:
        with self._lock:
            self.stream.write(line + "\n")

    def header(self, names: Sequence[str]) -> None:
        self._emit(",".join(str(n) for n in names))

    def row(self, values: Sequence[float]) -> None:
        self._emit(",".join(_format_value(v) for v in np.asarray(values, dtype=float).reshape(-1)))

    def section_break(self) -> None:
        self._emit(self.comment_prefix.rstrip())

    def message(self, text: str) -> None:
        self._emit(f"{self.comment_prefix}{text}")


class FileWriter(StreamWriter):
    """
    StreamWriter over a path. The file is opened on the first call and released
    by `close()`; a later call reopens it for append, so nothing is lost.
    """

    def __init__(self, path: Path, comment_prefix: str = "# ") -> None:
        super().__init__(None, comment_prefix=comment_prefix)
        self.path = Path(path)
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self.stream is not None

    def _emit(self, line: str) -> None:
        with self._lock:
            if self.stream is None:
                self.stream = self.path.open("a" if self._opened else "w")
                self._opened = True
            self.stream.write(line + "\n")

    def close(self) -> None:
        with self._lock:
            if self.stream is not None:
                self.stream.close()
                self.stream = None


@dataclass
class RecordingWriter:
    """In-memory sink; `events` holds (kind, payload) tuples in call order."""

    events: List[Tuple[str, Any]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def header(self, names: Sequence[str]) -> None:
        with self._lock:
            self.events.append(("header", list(names)))

    def row(self, values: Sequence[float]) -> None:
        with self._lock:
            self.events.append(("row", np.array(values, dtype=float).reshape(-1)))

    def section_break(self) -> None:
        with self._lock:
            self.events.append(("break", None))

    def message(self, text: str) -> None:
        with self._lock:
            self.events.append(("message", text))

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.events]

    def rows(self) -> List[np.ndarray]:
        return [payload for kind, payload in self.events if kind == "row"]

    def messages(self) -> List[str]:
        return [payload for kind, payload in self.events if kind == "message"]


class NullWriter:
    def header(self, names: Sequence[str]) -> None:
        return None

    def row(self, values: Sequence[float]) -> None:
        return None

    def section_break(self) -> None:
        return None

    def message(self, text: str) -> None:
        return None
