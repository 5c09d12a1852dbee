import pytest

from tomasim.memory import Memory, TickerMem, parse_word


def le_hex(value):
    return value.to_bytes(4, "little").hex()


def test_parse_word_little_endian():
    assert parse_word("37010000") == 0x137


@pytest.mark.parametrize("value", [0, 1, 0x12345678, 0xFFFFFFFF, 0x80000000])
def test_parse_word_round_trip(value):
    assert parse_word(le_hex(value)) == value


def test_parse_word_rejects_short_text():
    with pytest.raises(ValueError):
        parse_word("1234")


def test_parse_word_rejects_non_hex():
    with pytest.raises(ValueError):
        parse_word("zz000000")


def test_read_missing_is_zero():
    assert Memory().read(100) == 0


def test_write_then_read():
    mem = Memory()
    mem.write(8, 0xDEADBEEF)
    mem.write(8, 7)
    assert mem.read(8) == 7


def test_load_with_address_marker():
    mem = Memory()
    mem.load("@00000100\n37010000 13050000\n")
    assert mem.read(0x100) == parse_word("37010000")
    assert mem.read(0x104) == parse_word("13050000")
    assert mem.read(0) == 0


def test_load_starts_at_zero_and_ignores_spaces_inside_words():
    mem = Memory()
    mem.load("37 01 00 00\n13 05 00 00")
    assert mem.read(0) == parse_word("37010000")
    assert mem.read(4) == parse_word("13050000")


def test_load_multiple_sections():
    mem = Memory()
    mem.load(f"@00000000 {le_hex(11)} @00001000 {le_hex(22)} {le_hex(33)}")
    assert [mem.read(a) for a in (0, 0x1000, 0x1004)] == [11, 22, 33]


def test_load_truncated_raises():
    with pytest.raises(ValueError):
        Memory().load("370100")


def test_dump_format_sorted():
    mem = Memory()
    mem.write(0x20, 1)
    mem.write(0x10, 0xAB)
    assert mem.dump() == "10: 000000ab\n20: 00000001\n"


def test_ticker_read_completes_on_third_tick():
    mem = Memory()
    mem.write(12, 99)
    access = TickerMem(mem, 12)
    assert [access.read() for _ in range(3)] == [False, False, True]
    assert access.val == 99
    assert access.read() is False


def test_ticker_write_completes_on_third_tick():
    mem = Memory()
    access = TickerMem(mem, 16, 42)
    assert access.write() is False
    assert access.write() is False
    assert mem.read(16) == 0
    assert access.write() is True
    assert mem.read(16) == 42