"""Log sinks: where the fixture server writes its console lines."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class LogSink(Protocol):
    def log(self, message: str) -> None: ...


class ConsoleSink:
    """Prints each line to a text stream (stdout unless told otherwise)."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def log(self, message: str) -> None:
        print(message, file=self._stream or sys.stdout, flush=True)


class MemorySink:
    """Collects lines in memory so tests can inspect them."""

    def __init__(self):
        self.lines: list[str] = []

    def log(self, message: str) -> None:
        self.lines.append(message)

    def count(self, message: str) -> int:
        return self.lines.count(message)
