"""Arithmetic unit: computes results and addresses for reorder buffer entries."""

from __future__ import annotations

from typing import Callable

from .entry import RobEntry

_SHIFT_MASK = 0x1F


def _signed(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _shift_left(a: int, b: int) -> int:
    return a << (b & _SHIFT_MASK)


def _shift_right(a: int, b: int) -> int:
    return a >> (b & _SHIFT_MASK)


_REGISTER_OPS: dict[str, Callable[[int, int], int]] = {
    "add": lambda a, b: a + b,
    "sub": lambda a, b: a - b,
    "and": lambda a, b: a & b,
    "or": lambda a, b: a | b,
    "xor": lambda a, b: a ^ b,
    "sll": _shift_left,
    "srl": _shift_right,
    "sra": _shift_right,
    "slt": lambda a, b: int(a < b),
    "sltu": lambda a, b: int(a < b),
}

_IMMEDIATE_OPS: dict[str, Callable[[int, int], int]] = {
    "addi": lambda a, b: a + b,
    "andi": lambda a, b: a & b,
    "ori": lambda a, b: a | b,
    "xori": lambda a, b: a ^ b,
    "slli": _shift_left,
    "srli": _shift_right,
    "srai": _shift_right,
    "slti": lambda a, b: int(a < b),
    "sltiu": lambda a, b: int(a < b),
}

# Loads and stores compute their effective address.
_ADDRESS_OPS = frozenset({"lb", "lbu", "lh", "lhu", "lw", "sb", "sh", "sw"})

# A branch stores its target only when its condition holds.
_BRANCH_CONDITIONS: dict[str, Callable[[int, int], bool]] = {
    "beq": lambda a, b: a == b,
    "bge": lambda a, b: a >= b,
    "bgeu": lambda a, b: a < b,
    "blt": lambda a, b: a != b,
}

# Recognised operations for which the unit computes nothing.
_PASSIVE_OPS = frozenset(
    {"bltu", "bne", "jal", "jalr", "auipc", "lui", "ebreak", "ecall", "mul"}
)


def calculate(entry: RobEntry) -> None:
    """Compute ``entry.value`` from its operands; raise ValueError on unknown ops."""
    op = entry.op
    a, b = entry.rs1_val, entry.rs2_val
    if op in _REGISTER_OPS:
        entry.value = _signed(_REGISTER_OPS[op](a, b))
    elif op in _IMMEDIATE_OPS:
        entry.value = _signed(_IMMEDIATE_OPS[op](a, entry.imm))
    elif op in _ADDRESS_OPS:
        entry.value = _signed(a + entry.imm)
    elif op in _BRANCH_CONDITIONS:
        if _BRANCH_CONDITIONS[op](a, b):
            entry.value = _signed(entry.pc + entry.imm)
    elif op not in _PASSIVE_OPS:
        raise ValueError(f"unknown instruction: {op!r}")