"""Append-only binary writer for container building."""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from citrii.codec.primitives import LITTLE

if TYPE_CHECKING:
    from citrii.codec.record import Record


class Writer:
    """Appends values to a growing buffer; earlier fields can be patched in place."""

    def __init__(self, byte_order: str = LITTLE) -> None:
        self._data = bytearray()
        self._order = byte_order

    @property
    def position(self) -> int:
        """Offset of the next byte written."""
        return len(self._data)

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def _pack(self, fmt: str, *values: int | float) -> None:
        self._data += struct.pack(self._order + fmt, *values)

    def write_bytes(self, data: bytes) -> None:
        self._data += data

    def write_int16(self, value: int) -> None:
        self._pack('h', value)

    def write_uint16(self, value: int) -> None:
        self._pack('H', value)

    def write_uint32(self, value: int) -> None:
        self._pack('I', value)

    def write_uint32_array(self, values: list[int]) -> None:
        self._pack(f'{len(values)}I', *values)

    def write_record(self, value: Record) -> None:
        """Append a fixed-layout record (its own byte order applies)."""
        self._data += value.to_bytes()

    def reserve(self, count: int) -> int:
        """Append `count` zero bytes to be patched later; returns their offset."""
        offset = len(self._data)
        self._data += bytes(count)
        return offset

    def patch_uint32(self, offset: int, value: int) -> None:
        """Overwrite an already written unsigned 32-bit integer."""
        if offset < 0 or offset + 4 > len(self._data):
            raise IndexError(f'Cannot patch 4 bytes at {offset}, only {len(self._data)} written')
        struct.pack_into(self._order + 'I', self._data, offset, value)
