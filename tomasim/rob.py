"""Reorder buffer driving fetch, decode, issue, execute and commit."""

from __future__ import annotations

from dataclasses import dataclass, field

from .alu import calculate
from .cdb import CommonDataBus
from .decoder import UNKNOWN, decode
from .entry import RobEntry, State
from .inst_cache import CacheStatus, InstructionCache
from .registers import NO_TAG, RegisterFile, RegisterStatus, write_back
from .stations import ADD, LOAD, ReservationStations

ROB_CAPACITY = 10000


@dataclass
class ReorderBuffer:
    """In-order window of instructions between fetch and commit."""

    cache: InstructionCache
    stations: ReservationStations
    capacity: int = ROB_CAPACITY
    head: int = 0
    tail: int = 1
    entries: list[RobEntry] = field(init=False, repr=False)
    codes: dict[int, int] = field(init=False, default_factory=dict)
    cdb: CommonDataBus = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.entries = [RobEntry() for _ in range(self.capacity)]
        self.cdb = CommonDataBus(self.stations, self.entries)

    @property
    def registers(self) -> RegisterFile:
        return self.stations.registers

    @property
    def status(self) -> RegisterStatus:
        return self.stations.status

    def _entry(self, index: int) -> RobEntry:
        if index >= len(self.entries):
            raise OverflowError("reorder buffer is full")
        return self.entries[index]

    def execute(self) -> bool:
        """Run one cycle over entries ``head..tail``; return whether work remains."""
        active = False
        alu_used = False
        committed = False
        i = self.head
        while i <= self.tail:
            entry = self._entry(i)
            st = entry.st
            if st is State.DECODED:
                slot = self.stations.launch(entry, i)
                if slot is not None:
                    self.codes[i] = slot
                active = True
            elif st is State.ISSUE:
                slot_id = self.codes[i]
                slot = self.stations.slots[slot_id]
                if not alu_used and slot.qj == NO_TAG and slot.qk == NO_TAG:
                    calculate(entry)
                    entry.st = State.EXEC
                    self.cdb.add(i, entry.value)
                    alu_used = True
                    active = True
                if entry.op not in LOAD:
                    self.stations.clear(slot_id)
            elif st is State.EXEC:
                in_order = i == 0 or (
                    self.entries[i - 1].st is State.COMMIT and not committed
                )
                if in_order and entry.op in ADD:
                    write_back(self.registers, self.status, i, entry.rd, entry.value)
                    entry.st = State.COMMIT
                    self.head += 1
                    committed = True
                active = True
            elif st is State.WRITE:
                self.head += 1
                active = True
            elif st is State.NONE:
                if not self.cache.is_empty() and not self.status.busy_pc:
                    word, pc = self.cache.read()
                    entry.ins = word
                    entry.pc = pc
                    entry.st = State.WAITING
                    self.tail += 1
                    self.registers.pc = pc
                    active = True
                elif self.cache.pending or self.cache.status in (
                    CacheStatus.WAITING,
                    CacheStatus.LAST_READ,
                ):
                    active = True
            elif st is State.WAITING:
                instruction = decode(entry.ins, entry.pc)
                if instruction.op != UNKNOWN:
                    self.entries[i] = RobEntry.from_instruction(instruction)
                active = True
            i += 1
        return active