"""
CRC16 used by the Mii database.

CCITT polynomial 0x1021, initial value 0, MSB first, no final XOR
(the XMODEM variant). Each checksum covers a byte range and is stored
big-endian immediately after it.
"""

import struct

from citrii.errors import ChecksumMismatch
from citrii.log import log


CRC16_POLY = 0x1021


def crc16(data: bytes) -> int:
    """Calculate the CRC16 of `data`."""
    crc = 0
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            crc <<= 1
            if crc & 0x10000:
                crc = (crc ^ CRC16_POLY) & 0xFFFF
    return crc & 0xFFFF


def calculate_crc16(data: bytes, begin: int, end: int) -> int:
    """Calculate the CRC16 over data[begin:end]."""
    return crc16(memoryview(data)[begin:end])


def stored_crc16(data: bytes, end: int) -> int:
    """Read the big-endian CRC16 stored right after a range ending at `end`."""
    return struct.unpack_from('>H', data, end)[0]


def verify_crc16(data: bytes, begin: int, end: int) -> bool:
    """
    Verify the CRC16 over data[begin:end].

    Returns:
        True if the stored CRC16 matches the calculated one
    """
    return stored_crc16(data, end) == calculate_crc16(data, begin, end)


def check_crc16(data: bytes, begin: int, end: int) -> None:
    """Raise ChecksumMismatch unless the CRC16 over data[begin:end] is valid."""
    stored = stored_crc16(data, end)
    calculated = calculate_crc16(data, begin, end)
    if stored != calculated:
        log.error(f'CRC16 mismatch over [{begin:#x}, {end:#x}): stored={stored:#06x}, calculated={calculated:#06x}')
        raise ChecksumMismatch(begin, end, stored, calculated)
    log.debug(f'CRC16 over [{begin:#x}, {end:#x}) ok: {stored:#06x}')


def update_crc16(data: bytearray, begin: int, end: int) -> int:
    """
    Recompute the CRC16 over data[begin:end] and store it in place.

    Returns:
        The new CRC16
    """
    crc = calculate_crc16(data, begin, end)
    struct.pack_into('>H', data, end, crc)
    return crc
