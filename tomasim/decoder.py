"""Instruction word decoding and disassembly."""

from __future__ import annotations

from dataclasses import dataclass

REGISTER_NAMES = (
    "zero", "ra", "sp", "gp", "tp", "t0", "t1", "t2",
    "s0", "s1", "a0", "a1", "a2", "a3", "a4", "a5",
    "a6", "a7", "s2", "s3", "s4", "s5", "s6", "s7",
    "s8", "s9", "s10", "s11", "t3", "t4", "t5", "t6",
)

UNKNOWN = "uk"

LOAD_OPS = frozenset({"lb", "lbu", "lh", "lhu", "lw"})

# funct3 0 resolves to "and" whatever funct7 holds.
_R_OPS = {
    0b000: "and",
    0b111: "and",
    0b110: "or",
    0b100: "xor",
    0b001: "sll",
    0b010: "slt",
    0b011: "sltu",
}
_R_SHIFT_OPS = {0b0000000: "srl", 0b0100000: "sra"}

_I_OPS = {
    0b000: "addi",
    0b111: "andi",
    0b110: "ori",
    0b100: "xori",
    0b010: "slti",
    0b011: "sltiu",
}
_I_SHIFT_OPS = {0b0000000: "srli", 0b0100000: "srai"}

_LOAD_OPS = {0b000: "lb", 0b100: "lbu", 0b001: "lh", 0b101: "lhu", 0b010: "lw"}
_STORE_OPS = {0b000: "sb", 0b001: "sh", 0b010: "sw"}
_BRANCH_OPS = {
    0b000: "beq",
    0b101: "bge",
    0b111: "bgeu",
    0b100: "blt",
    0b110: "bltu",
    0b001: "bne",
}
_SYSTEM_OPS = {0: "ebreak", 1: "ecall"}


def register_name(reg: int) -> str:
    """Return the ABI name of a register, or "uk" when out of range."""
    if 0 <= reg < len(REGISTER_NAMES):
        return REGISTER_NAMES[reg]
    return UNKNOWN


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word together with its address."""

    word: int
    pc: int
    op: str
    rd: int = 0
    rs1: int = 0
    rs2: int = 0
    imm: int = 0
    kind: str = ""

    def show(self) -> str:
        """Return a one-line disassembly of the instruction."""
        reg = register_name
        op = self.op
        if self.kind == "R":
            body = f"{op} {reg(self.rd)} {reg(self.rs1)} {reg(self.rs2)}"
        elif self.kind == "S":
            body = f"{op} {reg(self.rs2)} {self.imm}({reg(self.rs1)})"
        elif self.kind == "B":
            body = f"{op} {reg(self.rs1)} {reg(self.rs2)} {self.imm}"
        elif self.kind == "U" or op == "jal":
            body = f"{op} {reg(self.rd)} {self.imm:x}"
        elif op in ("ebreak", "ecall"):
            body = op
        elif op == "jalr":
            body = f"{op} {reg(self.rd)} {reg(self.rs1)} {self.imm:x}"
        elif op in LOAD_OPS:
            body = f"{op} {reg(self.rd)} {self.imm}({reg(self.rs1)})"
        else:
            body = f"{op} {reg(self.rd)} {reg(self.rs1)} {self.imm}"
        return f"{self.word:08x}" + " " * 12 + body


def decode(word: int, pc: int) -> Instruction:
    """Decode a 32-bit instruction word located at ``pc``."""
    word &= 0xFFFFFFFF
    opcode = word & 0x7F
    funct3 = (word >> 12) & 0x7
    funct7 = (word >> 25) & 0x7F
    rd = (word >> 7) & 0x1F
    rs1 = (word >> 15) & 0x1F
    rs2 = (word >> 20) & 0x1F
    imm_i = (word >> 20) & 0xFFF

    if opcode == 0b0110011:
        if funct3 == 0b101:
            op = _R_SHIFT_OPS.get(funct7, UNKNOWN)
        else:
            op = _R_OPS.get(funct3, UNKNOWN)
        return Instruction(
            word, pc, op,
            rd=(word >> 7) & 0xF,
            rs1=(word >> 15) & 0xF,
            rs2=(word >> 20) & 0xF,
            kind="R",
        )

    if opcode == 0b0010011:
        if funct3 == 0b001:
            return Instruction(word, pc, "slli", rd=rd, rs1=rs1, imm=(word >> 20) & 0x1F, kind="I*")
        if funct3 == 0b101:
            op = _I_SHIFT_OPS.get(funct7, UNKNOWN)
        else:
            op = _I_OPS.get(funct3, UNKNOWN)
        return Instruction(word, pc, op, rd=rd, rs1=rs1, imm=imm_i, kind="I")

    if opcode == 0b0000011:
        op = _LOAD_OPS.get(funct3, UNKNOWN)
        return Instruction(word, pc, op, rd=rd, rs1=rs1, imm=imm_i, kind="I")

    if opcode == 0b0100011:
        imm = (((word >> 25) & 0x7F) << 5) | ((word >> 7) & 0x1F)
        op = _STORE_OPS.get(funct3, UNKNOWN)
        return Instruction(word, pc, op, rs1=rs1, rs2=rs2, imm=imm, kind="S")

    if opcode == 0b1100011:
        imm = (
            (((word >> 31) & 0x1) << 12)
            | (((word >> 7) & 0x1) << 11)
            | (((word >> 25) & 0x3F) << 5)
            | (((word >> 8) & 0xF) << 1)
        )
        op = _BRANCH_OPS.get(funct3, UNKNOWN)
        return Instruction(word, pc, op, rs1=rs1, rs2=rs2, imm=imm, kind="B")

    if opcode == 0b1101111:
        imm = (
            (((word >> 31) & 0x1) << 20)
            | (((word >> 12) & 0xFF) << 12)
            | (((word >> 20) & 0x1) << 11)
            | (((word >> 21) & 0x3FF) << 1)
        )
        return Instruction(word, pc, "jal", rd=rd, imm=imm, kind="J")

    if opcode == 0b1100111:
        op = "jalr" if funct3 == 0 else UNKNOWN
        return Instruction(word, pc, op, rd=rd, rs1=rs1, imm=imm_i, kind="I")

    if opcode == 0b0010111:
        return Instruction(word, pc, "auipc", rd=rd, imm=(word >> 12) & 0xFFFFF, kind="U")

    if opcode == 0b0110111:
        return Instruction(word, pc, "lui", rd=rd, imm=(word >> 12) & 0xFFFFF, kind="U")

    if opcode == 0b1110011:
        op = _SYSTEM_OPS.get(imm_i, UNKNOWN)
        return Instruction(word, pc, op, rd=rd, rs1=rs1, imm=imm_i, kind="I")

    return Instruction(word, pc, UNKNOWN)