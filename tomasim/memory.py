"""Word-addressed memory, program loading and delayed memory access."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import islice
from typing import Iterator

WORD_MASK = 0xFFFFFFFF
ACCESS_LATENCY = 3


def parse_word(text: str) -> int:
    """Turn eight hex digits holding little-endian bytes into a word."""
    if len(text) < 8:
        raise ValueError(f"expected 8 hex digits, got {text!r}")
    return int.from_bytes(bytes.fromhex(text[:8]), "little")


def _take(chars: Iterator[str], count: int) -> str:
    chunk = "".join(islice(chars, count))
    if len(chunk) != count:
        raise ValueError("unexpected end of program text")
    return chunk


@dataclass
class Memory:
    """Sparse memory mapping word addresses to 32-bit values."""

    cells: dict[int, int] = field(default_factory=dict)

    def read(self, address: int) -> int:
        """Return the word at ``address``, or 0 if never written."""
        return self.cells.get(address & WORD_MASK, 0)

    def write(self, address: int, data: int) -> None:
        """Store a word at ``address``."""
        self.cells[address & WORD_MASK] = data & WORD_MASK

    def load(self, text: str) -> None:
        """Load a program in hex text form; ``@ADDRESS`` moves the write position."""
        chars = (c for c in text if not c.isspace())
        pc = 0
        for first in chars:
            if first == "@":
                pc = int(_take(chars, 8), 16)
            else:
                self.write(pc, parse_word(first + _take(chars, 7)))
                pc = (pc + 4) & WORD_MASK

    def dump(self) -> str:
        """Return every stored word, one ``address: value`` line each."""
        return "".join(
            f"{address:x}: {value:08x}\n" for address, value in sorted(self.cells.items())
        )


@dataclass
class TickerMem:
    """A memory access that completes on its third attempt."""

    memory: Memory
    pc: int
    val: int = 0
    ticker: int = 0

    def _tick(self) -> bool:
        self.ticker += 1
        return self.ticker == ACCESS_LATENCY

    def read(self) -> bool:
        """Advance the access; on completion load ``val`` and return True."""
        if not self._tick():
            return False
        self.val = self.memory.read(self.pc)
        return True

    def write(self) -> bool:
        """Advance the access; on completion store ``val`` and return True."""
        if not self._tick():
            return False
        self.memory.write(self.pc, self.val)
        return True