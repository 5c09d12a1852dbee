"""Load/store buffer keeping memory accesses in program order."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .memory import TickerMem


class MemoryOp(Enum):
    """Kind of memory access."""

    NOTHING = auto()
    READ = auto()
    WRITE = auto()


@dataclass
class LoadStoreEntry:
    """One pending memory access."""

    m: TickerMem
    op: str = ""
    rw: MemoryOp = MemoryOp.NOTHING
    ready: bool = False

    def execute(self) -> bool:
        """Advance the access by one cycle; return True once it has completed."""
        if self.rw is MemoryOp.WRITE:
            return self.m.write()
        if self.rw is MemoryOp.READ:
            return self.m.read()
        return False


@dataclass
class LoadStoreQueue:
    """Memory accesses keyed by their order; only the oldest one advances."""

    entries: dict[int, LoadStoreEntry] = field(default_factory=dict)

    def add(self, index: int, entry: LoadStoreEntry) -> None:
        """Queue ``entry`` under order key ``index``."""
        self.entries[index] = entry

    def execute(self) -> bool:
        """Advance the oldest access; return True if it completed and was removed."""
        if not self.entries:
            return False
        oldest = min(self.entries)
        if self.entries[oldest].execute():
            del self.entries[oldest]
            return True
        return False