"""Declarative fixed-layout binary codecs."""

from citrii.codec.bitfield import BitFields, bitfields, bits
from citrii.codec.primitives import (
    BIG,
    LITTLE,
    Array,
    Primitive,
    array,
    as_codec,
    f32,
    i8,
    i16,
    i32,
    i64,
    u8,
    u16,
    u16be,
    u32,
    u64,
)
from citrii.codec.record import FieldSpec, Record, fixed, record

__all__ = [
    'BIG',
    'LITTLE',
    'Array',
    'BitFields',
    'FieldSpec',
    'Primitive',
    'Record',
    'array',
    'as_codec',
    'bitfields',
    'bits',
    'f32',
    'fixed',
    'i8',
    'i16',
    'i32',
    'i64',
    'record',
    'u8',
    'u16',
    'u16be',
    'u32',
    'u64',
]
