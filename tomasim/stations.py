"""Reservation stations holding issued instructions until their operands arrive."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .entry import RobEntry, State
from .registers import OperandSource, RegisterFile, RegisterStatus, read_operands

LOAD = frozenset({"lb", "lbu", "lh", "lhu", "lw", "sb", "sh", "sw"})
ADD = frozenset({
    "add", "sub", "and", "or", "xor", "sll", "srl", "sra", "slt", "sltu",
    "addi", "andi", "ori", "xori", "slli", "srli", "srai", "slti", "sltiu",
})
JUMP = frozenset({
    "beq", "bge", "bgeu", "blt", "bltu", "bne",
    "jal", "jalr", "auipc", "lui", "ebreak", "ecall",
})

STATION_COUNT = 6
_FAMILIES = ((LOAD, (0, 1)), (ADD, (2, 3)), (JUMP, (4, 5)))


@dataclass
class _Slot:
    busy: bool = False
    op: str = ""
    vj: int = 0
    vk: int = 0
    qj: int = 0
    qk: int = 0
    a: int = 0
    dest: int = 0
    pj: OperandSource = OperandSource.NONE
    pk: OperandSource = OperandSource.NONE


@dataclass
class ReservationStations:
    """Six stations: 0-1 for memory, 2-3 for arithmetic, 4-5 for control flow."""

    registers: RegisterFile
    status: RegisterStatus
    slots: list[_Slot] = field(default_factory=lambda: [_Slot() for _ in range(STATION_COUNT)])

    def launch(self, entry: RobEntry, index: int) -> Optional[int]:
        """Issue reorder buffer entry ``index`` into a free station.

        Returns the station number, or None if no suitable station is free.
        """
        candidates = next((ids for ops, ids in _FAMILIES if entry.op in ops), ())
        for slot_id in candidates:
            slot = self.slots[slot_id]
            if slot.busy:
                continue
            entry.st = State.ISSUE
            operands = read_operands(entry, self.registers, self.status)
            slot.busy = True
            slot.op = entry.op
            slot.dest = index
            slot.vj, slot.vk = operands.vj, operands.vk
            slot.qj, slot.qk = operands.qj, operands.qk
            slot.pj, slot.pk = operands.pj, operands.pk
            return slot_id
        return None

    def clear(self, slot: int) -> None:
        """Release station ``slot``; raise IndexError if it does not exist."""
        if not 0 <= slot < STATION_COUNT:
            raise IndexError(f"no reservation station {slot}")
        self.slots[slot] = _Slot(
            busy=False, op="", vj=-1, vk=-1, qj=-1, qk=-1, a=-1, dest=-1,
        )