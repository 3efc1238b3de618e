"""Binary reader with position tracking for container parsing."""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from citrii.codec.primitives import LITTLE
from citrii.errors import EndOfData

if TYPE_CHECKING:
    from citrii.codec.record import R


class Reader:
    """Binary reader with position tracking over an immutable buffer."""

    def __init__(self, data: bytes, byte_order: str = LITTLE) -> None:
        self._data = memoryview(data)
        self._position = 0
        self._order = byte_order

    @property
    def position(self) -> int:
        """Current read position."""
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        """Set read position."""
        if value < 0 or value > len(self._data):
            raise EndOfData(f'Position {value} out of range [0, {len(self._data)}]')
        self._position = value

    @property
    def remaining(self) -> int:
        """Bytes remaining to read."""
        return len(self._data) - self._position

    def _unpack(self, fmt: str, count: int) -> tuple:
        return struct.unpack(self._order + fmt, self.read_view(count))

    def read_view(self, count: int) -> memoryview:
        """Read raw bytes without copying."""
        if count < 0 or self._position + count > len(self._data):
            raise EndOfData(f'Cannot read {count} bytes at position {self._position}, only {self.remaining} remaining')
        result = self._data[self._position : self._position + count]
        self._position += count
        return result

    def read_bytes(self, count: int) -> bytes:
        """Read raw bytes."""
        return bytes(self.read_view(count))

    def read_int16(self) -> int:
        """Read signed 16-bit integer."""
        return self._unpack('h', 2)[0]

    def read_uint16(self) -> int:
        """Read unsigned 16-bit integer."""
        return self._unpack('H', 2)[0]

    def read_uint32(self) -> int:
        """Read unsigned 32-bit integer."""
        return self._unpack('I', 4)[0]

    def read_uint32_array(self, count: int) -> list[int]:
        """Read `count` consecutive unsigned 32-bit integers."""
        return list(self._unpack(f'{count}I', 4 * count))

    def read_record(self, cls: type[R]) -> R:
        """Read a fixed-layout record (its own byte order applies)."""
        return cls.read_bytes(self.read_view(cls.byte_len()))

    def skip(self, count: int) -> None:
        """Skip bytes."""
        if count < 0 or self._position + count > len(self._data):
            raise EndOfData(f'Cannot skip {count} bytes at position {self._position}, only {self.remaining} remaining')
        self._position += count
