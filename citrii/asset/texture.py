"""Texture items: packed pixel formats stored in swizzled 8x8 tiles.

Decoding produces a flat RGBA8 buffer in raster order (top row first).
Source rows are stored bottom-up and each 8x8 tile interleaves the low three
bits of x and y (x in the even bits, y in the odd bits).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable

from citrii.codec import LITTLE, Record, fixed, record, u8, u16
from citrii.const import TEXTURE_TAG, TRAILING_TOLERANCE
from citrii.errors import EndOfData, MalformedItem, TrailingBytesMismatch, UnknownFormatCode, UnknownWrapMode
from citrii.log import log


class TextureFormat(IntEnum):
    I4 = 0
    I8 = 1
    A4 = 2
    A8 = 3
    IA4 = 4
    IA8 = 5
    RG8 = 6
    RGB565 = 7
    RGB8 = 8
    RGB5A1 = 9
    RGBA4 = 10
    RGBA8 = 11

    @classmethod
    def from_code(cls, code: int) -> TextureFormat:
        try:
            return cls(code)
        except ValueError:
            raise UnknownFormatCode(f'Unknown texture format code {code}') from None

    @property
    def bits_per_pixel(self) -> int:
        return _BITS_PER_PIXEL[self]

    @property
    def pair_size(self) -> int:
        """Bytes holding two horizontally adjacent texels."""
        return self.bits_per_pixel * 2 // 8


_BITS_PER_PIXEL = {
    TextureFormat.I4: 4,
    TextureFormat.I8: 8,
    TextureFormat.A4: 4,
    TextureFormat.A8: 8,
    TextureFormat.IA4: 8,
    TextureFormat.IA8: 16,
    TextureFormat.RG8: 16,
    TextureFormat.RGB565: 16,
    TextureFormat.RGB8: 24,
    TextureFormat.RGB5A1: 16,
    TextureFormat.RGBA4: 16,
    TextureFormat.RGBA8: 32,
}


class WrapMode(IntEnum):
    EDGE = 0
    REPEAT = 1
    MIRROR = 2

    @classmethod
    def from_code(cls, code: int) -> WrapMode:
        try:
            return cls(code)
        except ValueError:
            raise UnknownWrapMode(f'Unknown texture wrap mode {code}') from None


# Channel expansion to 8 bits by bit replication
def expand1(v: int) -> int:
    return v * 255


def expand4(v: int) -> int:
    return (v << 4) | v


def expand5(v: int) -> int:
    return (v << 3) | (v >> 2)


def expand6(v: int) -> int:
    return (v << 2) | (v >> 4)


_E4 = bytes(expand4(v) for v in range(16))
_E5 = bytes(expand5(v) for v in range(32))
_E6 = bytes(expand6(v) for v in range(64))

OPAQUE = 255

# Intra-tile offsets of the low 3 bits of x and y
X_LUT = (0x00, 0x01, 0x04, 0x05, 0x10, 0x11, 0x14, 0x15)
Y_LUT = (0x00, 0x02, 0x08, 0x0A, 0x20, 0x22, 0x28, 0x2A)


def _decode_i4(s: bytes) -> bytes:
    x = _E4[s[0] & 0xF]
    y = _E4[s[0] >> 4]
    return bytes((x, x, x, OPAQUE, y, y, y, OPAQUE))


def _decode_i8(s: bytes) -> bytes:
    x, y = s[0], s[1]
    return bytes((x, x, x, OPAQUE, y, y, y, OPAQUE))


def _decode_a4(s: bytes) -> bytes:
    return bytes((0, 0, 0, _E4[s[0] & 0xF], 0, 0, 0, _E4[s[0] >> 4]))


def _decode_a8(s: bytes) -> bytes:
    return bytes((0, 0, 0, s[0], 0, 0, 0, s[1]))


def _decode_ia4(s: bytes) -> bytes:
    xa, xi = _E4[s[0] & 0xF], _E4[s[0] >> 4]
    ya, yi = _E4[s[1] & 0xF], _E4[s[1] >> 4]
    return bytes((xi, xi, xi, xa, yi, yi, yi, ya))


def _decode_ia8(s: bytes) -> bytes:
    xa, xi, ya, yi = s[0], s[1], s[2], s[3]
    return bytes((xi, xi, xi, xa, yi, yi, yi, ya))


def _decode_rg8(s: bytes) -> bytes:
    xg, xr, yg, yr = s[0], s[1], s[2], s[3]
    return bytes((xr, xg, 0, OPAQUE, yr, yg, 0, OPAQUE))


def _rgb565(lo: int, hi: int) -> tuple[int, int, int, int]:
    r = _E5[hi >> 3]
    g = _E6[((hi & 0b111) << 3) | (lo >> 5)]
    b = _E5[lo & 0b11111]
    return r, g, b, OPAQUE


def _decode_rgb565(s: bytes) -> bytes:
    return bytes(_rgb565(s[0], s[1]) + _rgb565(s[2], s[3]))


def _decode_rgb8(s: bytes) -> bytes:
    return bytes((s[2], s[1], s[0], OPAQUE, s[5], s[4], s[3], OPAQUE))


def _rgb5a1(lo: int, hi: int) -> tuple[int, int, int, int]:
    r = _E5[hi >> 3]
    g = _E5[((hi & 0b111) << 2) | (lo >> 6)]
    b = _E5[(lo & 0b111110) >> 1]
    a = expand1(lo & 1)
    return r, g, b, a


def _decode_rgb5a1(s: bytes) -> bytes:
    return bytes(_rgb5a1(s[0], s[1]) + _rgb5a1(s[2], s[3]))


def _rgba4(lo: int, hi: int) -> tuple[int, int, int, int]:
    return _E4[hi >> 4], _E4[hi & 0xF], _E4[lo >> 4], _E4[lo & 0xF]


def _decode_rgba4(s: bytes) -> bytes:
    return bytes(_rgba4(s[0], s[1]) + _rgba4(s[2], s[3]))


def _decode_rgba8(s: bytes) -> bytes:
    return bytes((s[3], s[2], s[1], s[0], s[7], s[6], s[5], s[4]))


# Indexed by format code
PAIR_DECODERS: tuple[Callable[[bytes], bytes], ...] = (
    _decode_i4,
    _decode_i8,
    _decode_a4,
    _decode_a8,
    _decode_ia4,
    _decode_ia8,
    _decode_rg8,
    _decode_rgb565,
    _decode_rgb8,
    _decode_rgb5a1,
    _decode_rgba4,
    _decode_rgba8,
)


def decode_pixel_pair(texture_format: TextureFormat, source: bytes) -> bytes:
    """Decode one pixel pair into 8 bytes (two RGBA8 texels)."""
    return PAIR_DECODERS[texture_format](source)


def padded_size(size: int) -> int:
    """Storage size of a texture dimension: next power of two, at least 8."""
    result = 1 if size <= 1 else 1 << (size - 1).bit_length()
    return max(result, 8)


@record(LITTLE)
@dataclass
class TextureHeader(Record):
    width: int = fixed(u16)
    height: int = fixed(u16)
    tag: int = fixed(u8)
    format: int = fixed(u8)
    wrap_u: int = fixed(u8)
    wrap_v: int = fixed(u8)


@dataclass(frozen=True)
class DecodedTexture:
    """Linear RGBA8 pixels, ready for upload."""

    width: int
    height: int
    wrap_u: WrapMode
    wrap_v: WrapMode
    rgba: bytes = field(repr=False)


@dataclass
class RawTexture:
    width: int
    height: int
    format: TextureFormat
    wrap_u: WrapMode
    wrap_v: WrapMode
    pixels: bytes = field(repr=False)

    @property
    def padded_width(self) -> int:
        return padded_size(self.width)

    @property
    def padded_height(self) -> int:
        return padded_size(self.height)

    @property
    def pixel_byte_len(self) -> int:
        """Size of the stored (padded, swizzled) pixel data."""
        return self.padded_width * self.padded_height * self.format.bits_per_pixel // 8

    def decode(self) -> bytes:
        """Unswizzle and expand to `width * height * 4` RGBA8 bytes.

        For odd widths the second texel of each row's last pair is dropped.
        """
        if len(self.pixels) < self.pixel_byte_len:
            raise ValueError(f'Texture needs {self.pixel_byte_len} pixel bytes, got {len(self.pixels)}')

        width, height = self.width, self.height
        pixels = self.pixels
        pair_size = self.format.pair_size
        decode_pair = PAIR_DECODERS[self.format]
        tiles_per_row = self.padded_width // 8

        result = bytearray(width * height * 4)
        pos = 0
        for y in range(height):
            source_y = height - y - 1
            tile_row = (source_y // 8) * tiles_per_row
            fy = Y_LUT[source_y % 8]
            for x in range(0, width, 2):
                o = (((x // 8) + tile_row) * 64 + X_LUT[x % 8] + fy) // 2
                pair = decode_pair(pixels[pair_size * o : pair_size * (o + 1)])
                n = 8 if x + 1 < width else 4
                result[pos : pos + n] = pair[:n]
                pos += n
        return bytes(result)

    def bake(self) -> DecodedTexture:
        """Decode into the form handed to the renderer."""
        return DecodedTexture(
            width=self.width,
            height=self.height,
            wrap_u=self.wrap_u,
            wrap_v=self.wrap_v,
            rgba=self.decode(),
        )


def parse_texture(data: bytes) -> tuple[RawTexture, int]:
    """Parse a texture item.

    Returns:
        The texture and the number of unread trailing bytes
    """
    view = memoryview(data)
    if len(view) < TextureHeader.byte_len():
        raise EndOfData(f'Texture header needs {TextureHeader.byte_len()} bytes, got {len(view)}')

    header = TextureHeader.unpack_from(view)
    if header.tag != TEXTURE_TAG:
        raise MalformedItem(f'Bad texture tag {header.tag:#04x}')

    texture_format = TextureFormat.from_code(header.format)
    wrap_u = WrapMode.from_code(header.wrap_u)
    wrap_v = WrapMode.from_code(header.wrap_v)

    begin = TextureHeader.byte_len()
    size = padded_size(header.width) * padded_size(header.height) * texture_format.bits_per_pixel // 8
    if begin + size > len(view):
        raise EndOfData(f'Texture pixels need {size} bytes, only {len(view) - begin} remaining')

    texture = RawTexture(
        width=header.width,
        height=header.height,
        format=texture_format,
        wrap_u=wrap_u,
        wrap_v=wrap_v,
        pixels=bytes(view[begin : begin + size]),
    )
    return texture, len(view) - begin - size


def read_texture_item(data: bytes) -> DecodedTexture:
    """Parse, check the trailer and decode one texture item."""
    texture, rest = parse_texture(data)
    if rest >= TRAILING_TOLERANCE:
        raise TrailingBytesMismatch(f'Texture item has {rest} trailing bytes')
    if rest:
        log.debug(f'Texture item has {rest} trailing bytes (tolerated)')
    return texture.bake()
