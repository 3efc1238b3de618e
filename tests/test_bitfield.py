"""
Tests for bit-field packing.
"""

from dataclasses import dataclass

import pytest

from citrii.codec import BIG, LITTLE, BitFields, Record, bitfields, bits, fixed, i16, record, u16
from citrii.errors import BitFieldLayoutError


@bitfields(u16)
@dataclass
class Hair(BitFields):
    style: int = bits(8)
    color: int = bits(3)
    flip: int = bits(1)
    padding: int = bits(4)


@bitfields(u16)
@dataclass
class Partial(BitFields):
    low: int = bits(3)
    high: int = bits(5)


@record(BIG)
@dataclass
class BigHolder(Record):
    hair: Hair = fixed(Hair)


@record(LITTLE)
@dataclass
class LittleHolder(Record):
    hair: Hair = fixed(Hair)


def test_unpack_lowest_bits_first() -> None:
    hair = Hair.unpack(0x1234)

    assert hair.style == 0x34
    assert hair.color == 2
    assert hair.flip == 0
    assert hair.padding == 1


def test_layout_shifts() -> None:
    """Each field starts where the previous one ends."""
    assert [(spec.name, spec.shift) for spec in Hair.LAYOUT] == [
        ('style', 0),
        ('color', 8),
        ('flip', 11),
        ('padding', 12),
    ]
    assert [spec.shift for spec in Partial.LAYOUT] == [0, 3]


def test_pack() -> None:
    assert Hair(style=0x34, color=2, flip=0, padding=1).pack() == 0x1234
    assert Hair(flip=1).pack() == 0x0800


@pytest.mark.parametrize('raw', [0x0000, 0xFFFF, 0x1234, 0x8001, 0x0F0F])
def test_round_trip(raw: int) -> None:
    assert Hair.unpack(raw).pack() == raw


def test_partial_width_round_trip() -> None:
    """Widths may sum to less than the base; the unused bits read back as zero."""
    assert Partial.unpack(0xFFFF).pack() == 0x00FF
    assert Partial.unpack(Partial(low=5, high=17).pack()) == Partial(low=5, high=17)


def test_value_too_wide() -> None:
    with pytest.raises(ValueError):
        Hair(color=8).pack()

    with pytest.raises(ValueError):
        Hair(style=-1).pack()


def test_layout_wider_than_base() -> None:
    with pytest.raises(BitFieldLayoutError):

        @bitfields(u16)
        @dataclass
        class TooWide(BitFields):
            a: int = bits(9)
            b: int = bits(8)


def test_zero_width() -> None:
    with pytest.raises(BitFieldLayoutError):

        @bitfields(u16)
        @dataclass
        class Empty(BitFields):
            a: int = bits(0)


def test_signed_base_rejected() -> None:
    with pytest.raises(BitFieldLayoutError):
        bitfields(i16)


def test_follows_record_byte_order() -> None:
    hair = Hair.unpack(0x1234)

    assert BigHolder(hair=hair).to_bytes() == b'\x12\x34'
    assert LittleHolder(hair=hair).to_bytes() == b'\x34\x12'
    assert LittleHolder.read_bytes(b'\x34\x12').hair == hair
