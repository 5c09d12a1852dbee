import pytest

from tomasim.decoder import Instruction, decode, register_name


def r_word(funct7, rs2, rs1, funct3, rd, opcode=0b0110011):
    return (funct7 << 25) | (rs2 << 20) | (rs1 << 15) | (funct3 << 12) | (rd << 7) | opcode


def i_word(imm, rs1, funct3, rd, opcode=0b0010011):
    return (imm << 20) | (rs1 << 15) | (funct3 << 12) | (rd << 7) | opcode


def s_word(imm, rs2, rs1, funct3):
    return (
        ((imm >> 5) << 25) | (rs2 << 20) | (rs1 << 15) | (funct3 << 12)
        | ((imm & 0x1F) << 7) | 0b0100011
    )


def b_word(imm, rs2, rs1, funct3):
    return (
        (((imm >> 12) & 1) << 31)
        | (((imm >> 5) & 0x3F) << 25)
        | (rs2 << 20)
        | (rs1 << 15)
        | (funct3 << 12)
        | (((imm >> 1) & 0xF) << 8)
        | (((imm >> 11) & 1) << 7)
        | 0b1100011
    )


def j_word(imm, rd):
    return (
        (((imm >> 20) & 1) << 31)
        | (((imm >> 1) & 0x3FF) << 21)
        | (((imm >> 11) & 1) << 20)
        | (((imm >> 12) & 0xFF) << 12)
        | (rd << 7)
        | 0b1101111
    )


@pytest.mark.parametrize(
    "funct3,op",
    [(0b111, "and"), (0b110, "or"), (0b100, "xor"), (0b001, "sll"), (0b010, "slt"), (0b011, "sltu")],
)
def test_r_type_ops(funct3, op):
    ins = decode(r_word(0, 3, 2, funct3, 1), 0)
    assert ins.op == op
    assert ins.kind == "R"
    assert (ins.rd, ins.rs1, ins.rs2) == (1, 2, 3)


@pytest.mark.parametrize("funct7", [0b0000000, 0b0100000])
def test_r_type_funct3_zero_decodes_as_and(funct7):
    assert decode(r_word(funct7, 1, 1, 0, 1), 0).op == "and"


def test_r_type_shift_variants():
    assert decode(r_word(0b0000000, 1, 2, 0b101, 3), 0).op == "srl"
    assert decode(r_word(0b0100000, 1, 2, 0b101, 3), 0).op == "sra"
    assert decode(r_word(0b0000001, 1, 2, 0b101, 3), 0).op == "uk"


def test_r_type_registers_use_four_bits():
    ins = decode(r_word(0, 17, 18, 0b100, 19), 0)
    assert (ins.rd, ins.rs1, ins.rs2) == (19 & 0xF, 18 & 0xF, 17 & 0xF)


def test_addi_keeps_twelve_bit_immediate():
    ins = decode(i_word(0x7FF, 5, 0b000, 10), 8)
    assert ins.op == "addi"
    assert ins.kind == "I"
    assert (ins.rd, ins.rs1, ins.imm, ins.pc) == (10, 5, 0x7FF, 8)


def test_slli_uses_shift_immediate():
    ins = decode(i_word(0b0100000 << 5 | 7, 1, 0b001, 2), 0)
    assert ins.op == "slli"
    assert ins.kind == "I*"
    assert ins.imm == 7


def test_srai_and_srli():
    assert decode(i_word(0b0100000 << 5 | 4, 1, 0b101, 2), 0).op == "srai"
    assert decode(i_word(4, 1, 0b101, 2), 0).op == "srli"
    assert decode(i_word(0b0000011 << 5, 1, 0b101, 2), 0).op == "uk"


@pytest.mark.parametrize(
    "funct3,op",
    [(0b000, "lb"), (0b100, "lbu"), (0b001, "lh"), (0b101, "lhu"), (0b010, "lw"), (0b011, "uk")],
)
def test_loads(funct3, op):
    ins = decode(i_word(40, 2, funct3, 3, opcode=0b0000011), 0)
    assert ins.op == op
    assert ins.imm == 40


@pytest.mark.parametrize("imm", [0, 1, 31, 32, 0x7FF, 0xFFF])
def test_store_immediate_round_trip(imm):
    ins = decode(s_word(imm, 6, 7, 0b010), 0)
    assert ins.op == "sw"
    assert ins.kind == "S"
    assert (ins.imm, ins.rs2, ins.rs1) == (imm, 6, 7)


@pytest.mark.parametrize("imm", [0, 2, 30, 2046, 2048, 4094, 4096, 8190])
def test_branch_immediate_round_trip(imm):
    ins = decode(b_word(imm, 4, 5, 0b001), 0)
    assert ins.op == "bne"
    assert ins.kind == "B"
    assert (ins.imm, ins.rs2, ins.rs1) == (imm, 4, 5)


@pytest.mark.parametrize(
    "funct3,op",
    [(0b000, "beq"), (0b101, "bge"), (0b111, "bgeu"), (0b100, "blt"), (0b110, "bltu"), (0b010, "uk")],
)
def test_branch_ops(funct3, op):
    assert decode(b_word(8, 1, 2, funct3), 0).op == op


@pytest.mark.parametrize("imm", [0, 2, 2048, 4096, 0xFFFFE, 0x100000, 0x1FFFFE])
def test_jal_immediate_round_trip(imm):
    ins = decode(j_word(imm, 1), 0)
    assert ins.op == "jal"
    assert ins.imm == imm
    assert ins.rd == 1


def test_jalr():
    ins = decode(i_word(12, 1, 0, 5, opcode=0b1100111), 0)
    assert (ins.op, ins.rd, ins.rs1, ins.imm) == ("jalr", 5, 1, 12)
    assert decode(i_word(12, 1, 1, 5, opcode=0b1100111), 0).op == "uk"


@pytest.mark.parametrize("opcode,op", [(0b0110111, "lui"), (0b0010111, "auipc")])
def test_upper_immediate(opcode, op):
    ins = decode((0xABCDE << 12) | (9 << 7) | opcode, 0)
    assert ins.op == op
    assert ins.kind == "U"
    assert (ins.imm, ins.rd) == (0xABCDE, 9)


@pytest.mark.parametrize("imm,op", [(0, "ebreak"), (1, "ecall"), (2, "uk")])
def test_system(imm, op):
    assert decode(i_word(imm, 0, 0, 0, opcode=0b1110011), 0).op == op


def test_unknown_opcode():
    ins = decode(0x7F, 4)
    assert ins.op == "uk"
    assert ins.pc == 4


def test_register_name():
    assert register_name(0) == "zero"
    assert register_name(31) == "t6"
    assert register_name(32) == "uk"


def test_show_header_and_padding():
    word = r_word(0, 12, 11, 0b100, 10)
    line = decode(word, 0).show()
    assert line.split()[0] == format(word, "08x")
    assert " " * 12 in line
    assert line.split()[1:] == ["xor", "a0", "a1", "a2"]


def test_show_upper_immediate_in_hex():
    word = (0x12345 << 12) | (10 << 7) | 0b0110111
    assert decode(word, 0).show().endswith("lui a0 12345")


def test_show_system_and_load():
    assert decode(i_word(0, 0, 0, 0, opcode=0b1110011), 0).show().endswith("ebreak")
    line = decode(i_word(16, 2, 0b010, 10, opcode=0b0000011), 0).show()
    assert line.split()[1:] == ["lw", "a0", "16(sp)"]


def test_instruction_is_immutable():
    ins = Instruction(0, 0, "uk")
    with pytest.raises(AttributeError):
        ins.op = "add"
    assert ins.op == "uk"