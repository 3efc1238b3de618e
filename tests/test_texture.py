"""
Tests for texture item parsing and pixel decoding.
"""

import pytest

from citrii.asset.builder import encode_texture_item
from citrii.asset.texture import (
    RawTexture,
    TextureFormat,
    WrapMode,
    decode_pixel_pair,
    expand1,
    expand4,
    expand5,
    expand6,
    padded_size,
    parse_texture,
    read_texture_item,
)
from citrii.errors import EndOfData, MalformedItem, TrailingBytesMismatch, UnknownFormatCode, UnknownWrapMode


def intensity_rows(rgba: bytes, width: int) -> list[list[int]]:
    """Red channel of each output row."""
    row_len = width * 4
    return [list(rgba[i : i + row_len : 4]) for i in range(0, len(rgba), row_len)]


def test_expansion_formulas() -> None:
    assert expand1(0) == 0
    assert expand1(1) == 255
    assert expand4(0x0) == 0x00
    assert expand4(0x9) == 0x99
    assert expand4(0xF) == 0xFF
    assert expand5(1) == 8
    assert expand5(31) == 255
    assert expand6(1) == 4
    assert expand6(63) == 255


@pytest.mark.parametrize(
    ('texture_format', 'source', 'expected'),
    [
        (TextureFormat.I4, b'\x3c', (0xCC, 0xCC, 0xCC, 255, 0x33, 0x33, 0x33, 255)),
        (TextureFormat.I8, b'\x10\x20', (0x10, 0x10, 0x10, 255, 0x20, 0x20, 0x20, 255)),
        (TextureFormat.A4, b'\x3c', (0, 0, 0, 0xCC, 0, 0, 0, 0x33)),
        (TextureFormat.A8, b'\x01\x02', (0, 0, 0, 1, 0, 0, 0, 2)),
        (TextureFormat.IA4, b'\x5a\x12', (0x55, 0x55, 0x55, 0xAA, 0x11, 0x11, 0x11, 0x22)),
        (TextureFormat.IA8, b'\x01\x02\x03\x04', (2, 2, 2, 1, 4, 4, 4, 3)),
        (TextureFormat.RG8, b'\x01\x02\x03\x04', (2, 1, 0, 255, 4, 3, 0, 255)),
        (TextureFormat.RGB565, b'\x00\xf8\x1f\x00', (255, 0, 0, 255, 0, 0, 255, 255)),
        (TextureFormat.RGB8, b'\x01\x02\x03\x04\x05\x06', (3, 2, 1, 255, 6, 5, 4, 255)),
        (TextureFormat.RGB5A1, b'\x01\xf8\x3e\x00', (255, 0, 0, 255, 0, 0, 255, 0)),
        (TextureFormat.RGBA4, b'\x34\x12\x34\x12', (0x11, 0x22, 0x33, 0x44, 0x11, 0x22, 0x33, 0x44)),
        (TextureFormat.RGBA8, bytes(range(1, 9)), (4, 3, 2, 1, 8, 7, 6, 5)),
    ],
)
def test_pair_decode(texture_format: TextureFormat, source: bytes, expected: tuple) -> None:
    """Each format turns one pixel pair into two RGBA8 texels."""
    assert len(source) == texture_format.pair_size
    assert decode_pixel_pair(texture_format, source) == bytes(expected)


def test_rgb565_white_and_green() -> None:
    assert decode_pixel_pair(TextureFormat.RGB565, b'\xff\xff\xe0\x07') == bytes((255, 255, 255, 255, 0, 255, 0, 255))


@pytest.mark.parametrize(('size', 'expected'), [(0, 8), (1, 8), (8, 8), (9, 16), (33, 64), (128, 128)])
def test_padded_size(size: int, expected: int) -> None:
    assert padded_size(size) == expected


def test_swizzle_order(raw_texture: RawTexture) -> None:
    """Rows are stored bottom-up and tiles interleave x and y bits."""
    rows = intensity_rows(raw_texture.decode(), 8)

    assert rows[0] == [42, 43, 46, 47, 58, 59, 62, 63]
    assert rows[7] == [0, 1, 4, 5, 16, 17, 20, 21]
    assert sorted(v for row in rows for v in row) == list(range(64))


def test_second_tile_column() -> None:
    """The second 8x8 tile starts 64 texels into the stream."""
    texture = RawTexture(16, 8, TextureFormat.I8, WrapMode.EDGE, WrapMode.EDGE, bytes(i % 256 for i in range(128)))

    rows = intensity_rows(texture.decode(), 16)

    assert rows[7][8:] == [64, 65, 68, 69, 80, 81, 84, 85]


@pytest.mark.parametrize(('width', 'height'), [(8, 8), (5, 3), (1, 1), (12, 20)])
def test_output_length(width: int, height: int) -> None:
    texture_format = TextureFormat.RGBA4
    size = padded_size(width) * padded_size(height) * texture_format.bits_per_pixel // 8
    texture = RawTexture(width, height, texture_format, WrapMode.EDGE, WrapMode.EDGE, bytes(size))

    assert len(texture.decode()) == width * height * 4


def test_decode_is_pure(raw_texture: RawTexture) -> None:
    assert raw_texture.decode() == raw_texture.decode()


def test_parse_item(raw_texture: RawTexture) -> None:
    item = encode_texture_item(raw_texture)
    assert len(item) == 8 + 64

    texture, rest = parse_texture(item + b'\x00\x00')

    assert rest == 2
    assert texture == raw_texture


def test_read_item(raw_texture: RawTexture) -> None:
    decoded = read_texture_item(encode_texture_item(raw_texture))

    assert (decoded.width, decoded.height) == (8, 8)
    assert decoded.wrap_u == WrapMode.REPEAT
    assert decoded.wrap_v == WrapMode.MIRROR
    assert decoded.rgba == raw_texture.decode()


def test_trailing_tolerance(raw_texture: RawTexture) -> None:
    item = encode_texture_item(raw_texture)
    read_texture_item(item + bytes(3))

    with pytest.raises(TrailingBytesMismatch):
        read_texture_item(item + bytes(4))


def test_unknown_codes(raw_texture: RawTexture) -> None:
    item = bytearray(encode_texture_item(raw_texture))

    bad_format = bytearray(item)
    bad_format[5] = 12
    with pytest.raises(UnknownFormatCode):
        parse_texture(bytes(bad_format))

    bad_wrap = bytearray(item)
    bad_wrap[7] = 3
    with pytest.raises(UnknownWrapMode):
        parse_texture(bytes(bad_wrap))

    bad_tag = bytearray(item)
    bad_tag[4] = 2
    with pytest.raises(MalformedItem):
        parse_texture(bytes(bad_tag))


def test_truncated_pixels(raw_texture: RawTexture) -> None:
    item = encode_texture_item(raw_texture)

    with pytest.raises(EndOfData):
        parse_texture(item[:-1])
    with pytest.raises(EndOfData):
        parse_texture(item[:7])
