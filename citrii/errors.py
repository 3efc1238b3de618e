"""Exceptions raised while decoding resources and databases."""


class CitriiError(Exception):
    """Base class for all decoding errors."""


class EndOfData(CitriiError, ValueError):
    """A read ran past the end of the buffer."""


class RecordLengthError(CitriiError):
    """A byte slice does not match the fixed length of its record.

    This means the caller sliced the buffer wrongly; it is never recovered from.
    """


class BitFieldLayoutError(CitriiError, ValueError):
    """A bit-field declaration has a zero width or does not fit its base integer."""


class ContainerError(CitriiError):
    """The resource container cannot be read."""


class MalformedOffset(ContainerError):
    """A section/item offset or redirect points outside its section."""


class MalformedItem(ContainerError):
    """An item or header does not have the expected shape."""


class TrailingBytesMismatch(ContainerError):
    """An item left more (or fewer) bytes behind than tolerated."""


class UnknownFormatCode(ContainerError):
    """Texture format code outside 0-11."""


class UnknownWrapMode(ContainerError):
    """Texture wrap mode code outside 0-2."""


class ChecksumMismatch(CitriiError):
    """A stored CRC16 does not match the data it covers."""

    def __init__(self, begin: int, end: int, stored: int, calculated: int) -> None:
        super().__init__(
            f'CRC16 mismatch over [{begin:#x}, {end:#x}): stored {stored:#06x}, calculated {calculated:#06x}'
        )
        self.begin = begin
        self.end = end
        self.stored = stored
        self.calculated = calculated


class DatabaseSizeMismatch(CitriiError, ValueError):
    """The database buffer does not have the fixed database length."""
