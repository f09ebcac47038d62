from __future__ import annotations

import sys
from typing import TextIO


class Printer:
    """
    Single append-only sink for user-facing messages.

    Informational lines go to `out`, warnings and errors to `err`. Streams are
    resolved at call time when not given so that redirected stdio is honoured.
    """

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None):
        self._out = out
        self._err = err

    def info(self, msg: str) -> None:
        self._write(self._out or sys.stdout, msg)

    def warning(self, msg: str) -> None:
        self._write(self._err or sys.stderr, msg)

    def error(self, msg: str, exc: BaseException | None = None) -> None:
        line = f"Error: {msg}" if exc is None else f"Error: {msg}: {exc}"
        self._write(self._err or sys.stderr, line)

    def _write(self, stream: TextIO, line: str) -> None:
        print(line, file=stream)
