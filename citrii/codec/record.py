"""Fixed-layout records.

A record is a dataclass whose fields are declared with :func:`fixed`. The
:func:`record` decorator walks the fields once and builds a descriptor table
(name, offset, byte length, codec); reading and writing just iterate that
table. Fields are packed back to back in declaration order with no padding.

Example::

    @record(BIG)
    @dataclass
    class Pair(Record):
        b: int = fixed(u16)
        c: int = fixed(u16)

    @record(LITTLE)
    @dataclass
    class Outer(Record):
        a: int = fixed(u8)
        s: Pair = fixed(Pair)        # encoded big-endian
        d: list[int] = fixed(array(u16, 3))
        e: int = fixed(u32)

    Outer.byte_len() == 15
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from citrii.codec.primitives import LITTLE, as_codec, check_length
from citrii.errors import RecordLengthError


CODEC_KEY = 'citrii.codec'

R = TypeVar('R', bound='Record')


@dataclass(frozen=True)
class FieldSpec:
    """One entry of a record's descriptor table."""

    name: str
    offset: int
    byte_len: int
    codec: Any

    @property
    def end(self) -> int:
        return self.offset + self.byte_len


def fixed(codec: Any) -> Any:
    """Declare a record field encoded with `codec`; defaults to the codec's zero value."""
    codec = as_codec(codec)
    return dataclasses.field(default_factory=codec.default, metadata={CODEC_KEY: codec})


class RecordCodec:
    """Adapts a record class to the codec interface so it can be nested."""

    def __init__(self, cls: type[Record]) -> None:
        self.cls = cls
        self.byte_len = cls.BYTE_LEN

    def __repr__(self) -> str:
        return f'<{self.cls.__name__}>'

    def default(self) -> Record:
        return self.cls()

    def read(self, src: Any, order: str) -> Record:
        # Nested records keep their own byte order
        return self.cls.read_bytes(src)

    def write(self, value: Record, dest: Any, order: str) -> None:
        value.write_bytes(dest)


class Record:
    """Base class for fixed-layout records; see :func:`record`."""

    BYTE_ORDER: str = LITTLE
    BYTE_LEN: int = 0
    FIELDS: tuple[FieldSpec, ...] = ()

    @classmethod
    def byte_len(cls) -> int:
        """Total encoded size: the sum of the field sizes."""
        return cls.BYTE_LEN

    @classmethod
    def field_spec(cls, name: str) -> FieldSpec:
        """Look up a field's descriptor by name."""
        for spec in cls.FIELDS:
            if spec.name == name:
                return spec
        raise KeyError(name)

    @classmethod
    def read_bytes(cls: type[R], src: Any) -> R:
        """Decode a record from exactly `byte_len()` bytes."""
        view = memoryview(src)
        check_length(cls.__codec__, view)
        values = {}
        for spec in cls.FIELDS:
            values[spec.name] = spec.codec.read(view[spec.offset : spec.end], cls.BYTE_ORDER)
        return cls(**values)

    @classmethod
    def unpack_from(cls: type[R], buffer: Any, offset: int = 0) -> R:
        """Decode a record starting at `offset` inside a larger buffer."""
        if offset < 0 or offset + cls.BYTE_LEN > len(buffer):
            raise RecordLengthError(
                f'{cls.__name__} ({cls.BYTE_LEN} bytes) does not fit at {offset} in {len(buffer)} bytes'
            )
        return cls.read_bytes(memoryview(buffer)[offset : offset + cls.BYTE_LEN])

    def write_bytes(self, dest: Any) -> None:
        """Encode into exactly `byte_len()` writable bytes."""
        view = memoryview(dest)
        check_length(self.__codec__, view)
        for spec in self.FIELDS:
            spec.codec.write(getattr(self, spec.name), view[spec.offset : spec.end], self.BYTE_ORDER)

    def pack_into(self, buffer: Any, offset: int = 0) -> None:
        """Encode at `offset` inside a larger writable buffer."""
        if offset < 0 or offset + self.BYTE_LEN > len(buffer):
            raise RecordLengthError(
                f'{type(self).__name__} ({self.BYTE_LEN} bytes) does not fit at {offset} in {len(buffer)} bytes'
            )
        self.write_bytes(memoryview(buffer)[offset : offset + self.BYTE_LEN])

    def to_bytes(self) -> bytes:
        """Encode into a fresh buffer."""
        buffer = bytearray(self.BYTE_LEN)
        self.write_bytes(buffer)
        return bytes(buffer)


def record(order: str = LITTLE) -> Callable[[type[R]], type[R]]:
    """Build the descriptor table of a `Record` dataclass.

    `order` applies to the record's own primitive, array and bit-field
    fields. Apply on top of ``@dataclass``.
    """

    def decorate(cls: type[R]) -> type[R]:
        if not dataclasses.is_dataclass(cls) or not issubclass(cls, Record):
            raise TypeError(f'{cls.__name__} must be a Record dataclass')

        specs = []
        offset = 0
        for f in dataclasses.fields(cls):
            codec = f.metadata.get(CODEC_KEY)
            if codec is None:
                raise TypeError(f'{cls.__name__}.{f.name} is not declared with fixed()')
            specs.append(FieldSpec(name=f.name, offset=offset, byte_len=codec.byte_len, codec=codec))
            offset += codec.byte_len

        cls.BYTE_ORDER = order
        cls.BYTE_LEN = offset
        cls.FIELDS = tuple(specs)
        cls.__codec__ = RecordCodec(cls)
        return cls

    return decorate
