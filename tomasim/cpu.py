"""The clocked processor and its command-line entry point."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .cdb import CommonDataBus
from .inst_cache import InstructionCache
from .lsb import LoadStoreQueue
from .memory import Memory
from .registers import RegisterFile, RegisterStatus
from .rob import ReorderBuffer
from .stations import ReservationStations


@dataclass
class Processor:
    """All units of the out-of-order core, advanced one clock at a time."""

    memory: Memory = field(default_factory=Memory)
    max_cycles: Optional[int] = None
    ticker: int = field(default=0, init=False)
    registers: RegisterFile = field(init=False, repr=False)
    status: RegisterStatus = field(init=False, repr=False)
    stations: ReservationStations = field(init=False, repr=False)
    cache: InstructionCache = field(init=False, repr=False)
    lsb: LoadStoreQueue = field(init=False, repr=False)
    rob: ReorderBuffer = field(init=False, repr=False)
    cdb: CommonDataBus = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.registers = RegisterFile()
        self.status = RegisterStatus()
        self.stations = ReservationStations(self.registers, self.status)
        self.cache = InstructionCache(self.memory)
        self.lsb = LoadStoreQueue()
        self.rob = ReorderBuffer(self.cache, self.stations)
        self.cdb = self.rob.cdb

    def step(self) -> bool:
        """Run one clock cycle; return whether any unit still has work."""
        self.cdb.execute()
        self.ticker += 1
        self.cache.check()
        self.lsb.execute()
        return self.rob.execute()

    def run(self) -> int:
        """Clock until idle and return the number of cycles taken."""
        while self.step():
            if self.max_cycles is not None and self.ticker >= self.max_cycles:
                raise RuntimeError(f"program still running after {self.ticker} cycles")
        return self.ticker


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load a program from standard input, run it and print the cycle count."""
    parser = argparse.ArgumentParser(
        prog="tomasim",
        description="Run a hex program read from standard input and print the cycle count.",
    )
    parser.parse_args(argv)
    processor = Processor()
    processor.memory.load(sys.stdin.read())
    print(processor.run())
    return 0


if __name__ == "__main__":
    sys.exit(main())