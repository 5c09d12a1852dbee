"""Instruction cache that prefetches words from memory in batches."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto

from .memory import Memory, TickerMem

BATCH_SIZE = 8
REFILL_THRESHOLD = 3
WORD_SIZE = 4


class CacheStatus(Enum):
    """Progress of the prefetch logic."""

    NONE = auto()
    WAITING = auto()
    FINISHED = auto()
    LAST_READ = auto()
    UNABLED = auto()


@dataclass
class InstructionCache:
    """Prefetches instruction words; a zero word marks the end of the program."""

    memory: Memory
    pc: int = 0
    status: CacheStatus = CacheStatus.NONE
    pending: deque[TickerMem] = field(default_factory=deque)
    cache: deque[tuple[int, int]] = field(default_factory=deque)

    def read(self) -> tuple[int, int]:
        """Remove and return the oldest cached ``(word, pc)`` pair."""
        if not self.cache:
            raise IndexError("instruction cache is empty")
        return self.cache.popleft()

    def is_empty(self) -> bool:
        """Return whether no fetched instruction is waiting to be read."""
        return not self.cache

    def clear(self, pc: int) -> None:
        """Drop everything fetched or in flight and restart fetching at ``pc``."""
        self.pc = pc
        self.cache.clear()
        self.pending.clear()
        self.status = CacheStatus.NONE

    def _request(self, count: int) -> bool:
        """Queue up to ``count`` reads; return False once a zero word is met."""
        for _ in range(count):
            if self.memory.read(self.pc) == 0:
                return False
            self.pending.append(TickerMem(self.memory, self.pc))
            self.pc += WORD_SIZE
        return True

    def _advance_pending(self, next_status: CacheStatus) -> None:
        if all([access.read() for access in self.pending]):
            self.cache.extend((access.val, access.pc) for access in self.pending)
            self.pending.clear()
            self.status = next_status

    def check(self) -> None:
        """Advance prefetching by one clock cycle."""
        status = self.status
        if status is CacheStatus.UNABLED:
            return
        if status is CacheStatus.NONE:
            complete = self._request(BATCH_SIZE)
            self.status = CacheStatus.WAITING if complete else CacheStatus.LAST_READ
        elif status is CacheStatus.WAITING:
            self._advance_pending(CacheStatus.FINISHED)
        elif status is CacheStatus.LAST_READ:
            self._advance_pending(CacheStatus.UNABLED)
        elif status is CacheStatus.FINISHED and len(self.cache) <= REFILL_THRESHOLD:
            complete = self._request(BATCH_SIZE - len(self.cache))
            self.status = CacheStatus.WAITING if complete else CacheStatus.LAST_READ