"""Bit-fields packed into one unsigned integer.

Fields are packed from bit 0 upwards in declaration order, so the first
declared field occupies the least significant bits::

    @bitfields(u16)
    @dataclass
    class Hair(BitFields):
        style: int = bits(8)
        color: int = bits(3)
        flip: int = bits(1)
        padding: int = bits(4)

A bit-field class is itself a codec of its base integer's size and can be
used as a record field. The byte order is the enclosing record's.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from citrii.codec.primitives import Primitive
from citrii.errors import BitFieldLayoutError


WIDTH_KEY = 'citrii.bits'

B = TypeVar('B', bound='BitFields')


@dataclass(frozen=True)
class BitSpec:
    name: str
    width: int
    shift: int

    @property
    def mask(self) -> int:
        return (1 << self.width) - 1


def bits(width: int) -> Any:
    """Declare a bit-field of `width` bits."""
    return dataclasses.field(default=0, metadata={WIDTH_KEY: width})


class BitFieldCodec:
    """Reads/writes the base integer and unpacks/packs it."""

    def __init__(self, cls: type[BitFields]) -> None:
        self.cls = cls
        self.base = cls.BASE
        self.byte_len = cls.BASE.byte_len

    def __repr__(self) -> str:
        return f'<{self.cls.__name__}:{self.base.name}>'

    def default(self) -> BitFields:
        return self.cls()

    def read(self, src: Any, order: str) -> BitFields:
        return self.cls.unpack(self.base.read(src, order))

    def write(self, value: BitFields, dest: Any, order: str) -> None:
        self.base.write(value.pack(), dest, order)


class BitFields:
    """Base class for bit-field groups; see :func:`bitfields`."""

    BASE: Primitive
    LAYOUT: tuple[BitSpec, ...] = ()

    @classmethod
    def unpack(cls: type[B], raw: int) -> B:
        """Split a raw integer into fields, lowest bits first."""
        values = {}
        for spec in cls.LAYOUT:
            values[spec.name] = (raw >> spec.shift) & spec.mask
        return cls(**values)

    def pack(self) -> int:
        """Combine the fields into the raw integer."""
        raw = 0
        for spec in self.LAYOUT:
            value = getattr(self, spec.name)
            if value < 0 or value >> spec.width:
                raise ValueError(f'{type(self).__name__}.{spec.name}={value} does not fit in {spec.width} bits')
            raw |= value << spec.shift
        return raw


def bitfields(base: Primitive) -> Callable[[type[B]], type[B]]:
    """Build the layout of a `BitFields` dataclass over an unsigned base integer.

    Zero widths and layouts wider than the base integer are rejected here,
    at declaration time.
    """
    if not isinstance(base, Primitive) or base.signed or base.is_float:
        raise BitFieldLayoutError(f'Bit-fields need an unsigned integer base, got {base!r}')

    def decorate(cls: type[B]) -> type[B]:
        if not dataclasses.is_dataclass(cls) or not issubclass(cls, BitFields):
            raise TypeError(f'{cls.__name__} must be a BitFields dataclass')

        layout = []
        shift = 0
        for f in dataclasses.fields(cls):
            width = f.metadata.get(WIDTH_KEY)
            if width is None:
                raise TypeError(f'{cls.__name__}.{f.name} is not declared with bits()')
            if width <= 0:
                raise BitFieldLayoutError(f'{cls.__name__}.{f.name} has invalid width {width}')
            layout.append(BitSpec(name=f.name, width=width, shift=shift))
            shift += width

        if shift > base.bits:
            raise BitFieldLayoutError(f'{cls.__name__} declares {shift} bits, more than its {base.bits}-bit base')

        cls.BASE = base
        cls.LAYOUT = tuple(layout)
        cls.__codec__ = BitFieldCodec(cls)
        return cls

    return decorate
