"""Primitive and fixed-size array codecs.

A codec is any object with a constant ``byte_len`` and the three operations::

    read(src, order) -> value
    write(value, dest, order) -> None
    default() -> value

``src``/``dest`` must be exactly ``byte_len`` bytes long. ``order`` is the byte
order of the enclosing record; primitives and arrays follow it, nested records
and fixed-order primitives ignore it.
"""

from __future__ import annotations

import struct
from typing import Any

from citrii.errors import RecordLengthError


LITTLE = '<'
BIG = '>'


def check_length(codec: Any, buffer: Any) -> None:
    """Raise RecordLengthError if buffer is not exactly codec.byte_len bytes."""
    if len(buffer) != codec.byte_len:
        raise RecordLengthError(f'{codec!r} needs {codec.byte_len} bytes, got {len(buffer)}')


def as_codec(obj: Any) -> Any:
    """Return the codec for a codec instance or a declared record/bit-field class."""
    codec = getattr(obj, '__codec__', None)
    if codec is not None:
        return codec
    if all(hasattr(obj, attr) for attr in ('byte_len', 'read', 'write', 'default')):
        return obj
    raise TypeError(f'{obj!r} is not a codec')


class Primitive:
    """A single integer or float encoded with `struct`."""

    def __init__(self, name: str, fmt: str, order: str | None = None) -> None:
        self.name = name
        self.fmt = fmt
        self.order = order
        self.byte_len = struct.calcsize(LITTLE + fmt)
        self.bits = self.byte_len * 8
        self.signed = fmt.islower() and fmt != 'f'
        self.is_float = fmt in 'fd'
        self._structs = {
            LITTLE: struct.Struct(LITTLE + fmt),
            BIG: struct.Struct(BIG + fmt),
        }

    def __repr__(self) -> str:
        return f'<{self.name}>'

    def with_order(self, order: str) -> Primitive:
        """Same primitive, always encoded in the given byte order."""
        suffix = 'le' if order == LITTLE else 'be'
        return Primitive(f'{self.name}{suffix}', self.fmt, order)

    def struct_for(self, order: str) -> struct.Struct:
        return self._structs[self.order or order]

    def default(self) -> int | float:
        return 0.0 if self.is_float else 0

    def read(self, src: Any, order: str) -> int | float:
        check_length(self, src)
        return self.struct_for(order).unpack_from(src)[0]

    def write(self, value: int | float, dest: Any, order: str) -> None:
        check_length(self, dest)
        self.struct_for(order).pack_into(dest, 0, value)


u8 = Primitive('u8', 'B')
i8 = Primitive('i8', 'b')
u16 = Primitive('u16', 'H')
i16 = Primitive('i16', 'h')
u32 = Primitive('u32', 'I')
i32 = Primitive('i32', 'i')
u64 = Primitive('u64', 'Q')
i64 = Primitive('i64', 'q')
f32 = Primitive('f32', 'f')

u16be = u16.with_order(BIG)


class Array:
    """N elements of one codec, laid out back to back."""

    def __init__(self, element: Any, count: int) -> None:
        if count < 1:
            raise ValueError(f'Array length must be positive, got {count}')
        self.element = as_codec(element)
        self.count = count
        self.byte_len = self.element.byte_len * count

        # Arrays of plain primitives decode in a single struct call
        self._structs: dict[str, struct.Struct] | None = None
        if isinstance(self.element, Primitive):
            fmt = f'{count}{self.element.fmt}'
            if self.element.order is not None:
                packed = struct.Struct(self.element.order + fmt)
                self._structs = {LITTLE: packed, BIG: packed}
            else:
                self._structs = {LITTLE: struct.Struct(LITTLE + fmt), BIG: struct.Struct(BIG + fmt)}

    def __repr__(self) -> str:
        return f'<{self.element!r}[{self.count}]>'

    def default(self) -> list[Any]:
        return [self.element.default() for _ in range(self.count)]

    def read(self, src: Any, order: str) -> list[Any]:
        check_length(self, src)
        if self._structs is not None:
            return list(self._structs[order].unpack_from(src))

        step = self.element.byte_len
        return [self.element.read(src[i * step : (i + 1) * step], order) for i in range(self.count)]

    def write(self, value: list[Any], dest: Any, order: str) -> None:
        check_length(self, dest)
        if len(value) != self.count:
            raise ValueError(f'{self!r} expects {self.count} elements, got {len(value)}')

        if self._structs is not None:
            self._structs[order].pack_into(dest, 0, *value)
            return

        step = self.element.byte_len
        for i, item in enumerate(value):
            self.element.write(item, dest[i * step : (i + 1) * step], order)


def array(element: Any, count: int) -> Array:
    """Fixed-size array codec, e.g. ``array(u16, 10)``."""
    return Array(element, count)
