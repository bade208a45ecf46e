"""Program-break heap shared by the C library allocator and the scheduler."""

from __future__ import annotations

import contextlib
from typing import Iterator


class OutOfMemory(MemoryError):
    """Raised when the program break would move past the heap limit."""


class NewlibHeap:
    """Tracks the program break between a heap base and limit address.

    Moving the break happens with task switching suspended, as the allocator
    lock does; suspension nests.
    """

    def __init__(self, base: int, limit: int) -> None:
        if limit < base:
            raise ValueError("heap limit must not lie below the heap base")
        self.base = base
        self.limit = limit
        self.current_end = base
        self.bytes_remaining = limit - base
        self.total_provided = 0
        self._suspend_depth = 0

    @contextlib.contextmanager
    def suspended(self) -> Iterator["NewlibHeap"]:
        """Suspend task switching for the duration of the block."""
        self._suspend_depth += 1
        try:
            yield self
        finally:
            self._suspend_depth -= 1

    def is_suspended(self) -> bool:
        return self._suspend_depth > 0

    def sbrk(self, incr: int) -> int:
        """Move the break by ``incr`` bytes and return its previous address.

        Raises OutOfMemory, leaving the break unchanged, when the new break
        would pass the heap limit.
        """
        with self.suspended():
            previous_end = self.current_end
            if self.current_end + incr > self.limit:
                raise OutOfMemory(
                    f"cannot grow heap by {incr} bytes: {self.bytes_remaining} remaining"
                )
            self.current_end += incr
            self.bytes_remaining -= incr
            self.total_provided += incr
            return previous_end

    def free_heap_size(self, pool_free: int = 0) -> int:
        """Free bytes: those free in the allocator's pool plus those never handed out."""
        return pool_free + self.bytes_remaining