"""Fixed-size command line buffer fed one character at a time."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, Iterator, Optional, TextIO, Union

MAX_LENGTH_MESSAGE = "*** Max command length exceeded ***\n"

_TERMINATOR = "\0"


class LineBufferFull(Exception):
    """Raised when a character does not fit in the line buffer."""


def _characters(stream: Union[TextIO, Iterable[str]]) -> Iterator[str]:
    if hasattr(stream, "read"):
        return iter(lambda: stream.read(1), "")
    return iter(stream)


class LineBuffer:
    """Collects characters until a complete, non-empty line is available.

    Backspace removes the last character, carriage returns are ignored and a
    line feed terminates the command unless the line is empty.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("line buffer size must be positive")
        self.size = size
        self._chars: list[str] = []

    @property
    def count(self) -> int:
        """Number of characters stored, terminator included."""
        return len(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def clear(self) -> None:
        self._chars.clear()

    def is_empty(self) -> bool:
        return not self._chars

    def is_full(self) -> bool:
        return len(self._chars) >= self.size

    def is_cmd_ready(self) -> bool:
        return bool(self._chars) and self._chars[-1] == _TERMINATOR

    def _put(self, c: str) -> bool:
        if self.is_full():
            raise LineBufferFull(f"line buffer of {self.size} characters is full")
        self._chars.append(c)
        return self.is_cmd_ready()

    def consume_char(self, c: str) -> bool:
        """Consume one character; return True once a command is ready.

        Raises LineBufferFull when the character does not fit.
        """
        if len(c) != 1:
            raise ValueError("expected a single character")
        if c == "\b":
            if self._chars:
                self._chars.pop()
        elif c != "\r":
            if c != "\n":
                return self._put(c)
            if self._chars:
                return self._put(_TERMINATOR)
        return False

    def consume_str(self, s: str) -> bool:
        """Consume characters of ``s`` up to any NUL; return the last readiness."""
        ready = False
        for c in s:
            if c == _TERMINATOR:
                break
            ready = self.consume_char(c)
        return ready

    def gets_at(self, index: int) -> Optional[str]:
        """Return the ready command starting at ``index``, or None."""
        if not self.is_cmd_ready() or not 0 <= index < len(self._chars):
            return None
        return "".join(self._chars[index:]).split(_TERMINATOR, 1)[0]

    def gets(self) -> Optional[str]:
        return self.gets_at(0)

    def process(
        self,
        stream: Union[TextIO, Iterable[str]],
        handler: Callable[[str], object],
        out: Optional[TextIO] = None,
    ) -> None:
        """Read characters until the stream ends, passing each command to ``handler``."""
        out = sys.stdout if out is None else out
        for c in _characters(stream):
            try:
                ready = self.consume_char(c)
            except LineBufferFull:
                out.write(MAX_LENGTH_MESSAGE)
                self.clear()
                continue
            if ready:
                command = self.gets()
                handler(command)
                self.clear()