"""Reorder buffer entries and their pipeline states."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .decoder import Instruction


class State(Enum):
    """Pipeline stage of a reorder buffer entry."""

    NONE = auto()
    WAITING = auto()
    DECODED = auto()
    ISSUE = auto()
    EXEC = auto()
    WRITE = auto()
    COMMIT = auto()


@dataclass
class RobEntry:
    """One slot of the reorder buffer."""

    ins: int = 0
    op: str = ""
    pc: int = -1
    rd: int = 0
    rs1: int = 0
    rs2: int = 0
    rs1_val: int = 0
    rs2_val: int = 0
    imm: int = 0
    st: State = State.NONE
    value: int = 0

    @classmethod
    def from_instruction(cls, instruction: Instruction) -> RobEntry:
        """Build a decoded entry from a decoded instruction."""
        return cls(
            op=instruction.op,
            pc=instruction.pc,
            rd=instruction.rd,
            rs1=instruction.rs1,
            rs2=instruction.rs2,
            imm=instruction.imm,
            st=State.DECODED,
        )