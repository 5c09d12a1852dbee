"""Register file, register renaming status and operand fetch."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .entry import RobEntry

REGISTER_COUNT = 32
NO_TAG = -1
WORD_MASK = 0xFFFFFFFF

DOUBLE_REG = frozenset({
    "add", "sub", "and", "or", "xor", "sll", "srl", "sra", "slt", "sltu",
    "sb", "sh", "sw", "beq", "bge", "bgeu", "blt", "bltu", "bne",
})
FIRST_REG = frozenset({
    "jalr", "addi", "andi", "ori", "xori", "slli", "srli", "srai", "slti", "sltiu",
    "lb", "lbu", "lh", "lhu", "lw",
})
ONLY_PC = frozenset({"jal", "auipc", "lui"})


class OperandSource(Enum):
    """Which instruction field an operand came from."""

    NONE = auto()
    RS1 = auto()
    RS2 = auto()
    IMM = auto()
    RD = auto()


@dataclass
class Operands:
    """Operand values (``vj``, ``vk``) or producer tags (``qj``, ``qk``)."""

    vj: int = 0
    vk: int = 0
    qj: int = NO_TAG
    qk: int = NO_TAG
    pj: OperandSource = OperandSource.NONE
    pk: OperandSource = OperandSource.NONE


def _signed(value: int) -> int:
    value &= WORD_MASK
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass
class RegisterFile:
    """Architectural registers and the program counter."""

    regs: list[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    rename_regs: list[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    pc: int = 0
    busy_pc: bool = False

    def read(self, reg: int) -> int:
        """Return the unsigned value of register ``reg``."""
        return self.regs[reg]

    def write(self, reg: int, value: int) -> None:
        """Store a 32-bit value in register ``reg``."""
        self.regs[reg] = value & WORD_MASK

    def reset(self) -> None:
        """Zero every register."""
        self.regs[:] = [0] * REGISTER_COUNT

    def read_pc(self) -> int:
        """Return the program counter, or -1 while it is being changed."""
        return -1 if self.busy_pc else self.pc


@dataclass
class RegisterStatus:
    """Which registers await a result, and from which reorder buffer entry."""

    busy: list[bool] = field(default_factory=lambda: [False] * REGISTER_COUNT)
    reorder: list[int] = field(default_factory=lambda: [NO_TAG] * REGISTER_COUNT)
    busy_pc: bool = False

    def is_busy(self, idx: int) -> bool:
        """Return whether register ``idx`` awaits a result; False if out of range."""
        return 0 <= idx < REGISTER_COUNT and self.busy[idx]


def _fetch(reg: int, registers: RegisterFile, status: RegisterStatus) -> tuple[int, int]:
    if status.busy[reg]:
        return -1, status.reorder[reg]
    return _signed(registers.read(reg)), NO_TAG


def read_operands(entry: RobEntry, registers: RegisterFile, status: RegisterStatus) -> Operands:
    """Fetch the operands of ``entry``, recording ready register values on it."""
    if entry.op in DOUBLE_REG:
        vj, qj = _fetch(entry.rs1, registers, status)
        if qj == NO_TAG:
            entry.rs1_val = vj
        vk, qk = _fetch(entry.rs2, registers, status)
        if qk == NO_TAG:
            entry.rs2_val = vk
        return Operands(vj, vk, qj, qk, OperandSource.RS1, OperandSource.RS2)
    if entry.op in FIRST_REG:
        vj, qj = _fetch(entry.rs1, registers, status)
        if qj == NO_TAG:
            entry.rs1_val = vj
        return Operands(vj, entry.imm, qj, NO_TAG, OperandSource.RS1, OperandSource.IMM)
    if entry.op in ONLY_PC:
        return Operands(vk=entry.imm)
    return Operands()


def write_back(
    registers: RegisterFile, status: RegisterStatus, index: int, reg: int, value: int
) -> None:
    """Write ``value`` to ``reg`` if entry ``index`` is still its latest producer."""
    if status.reorder[reg] == index:
        status.busy[reg] = False
        status.reorder[reg] = NO_TAG
        registers.write(reg, value)