"""Mii database (CFL_DB.dat) load, verify and save."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from citrii.codec import LITTLE, Record, array, fixed, record, u8, u16, u16be, u32
from citrii.const import CRC_A_RANGE, CRC_B_RANGE, DATABASE_SIZE
from citrii.crc import check_crc16, update_crc16
from citrii.errors import DatabaseSizeMismatch
from citrii.log import log
from citrii.model.profile import CFHEObject, Profile, ProfileAlt, ProfileFull, SLOT_COUNT


CFHE_OBJECT_COUNT = 3000
CRC_RANGES = (CRC_A_RANGE, CRC_B_RANGE)


@record(LITTLE)
@dataclass
class Database(Record):
    cfog: list[int] = fixed(array(u8, 4))
    magic: int = fixed(u32)  # 0x00000100
    owned: list[ProfileFull] = fixed(array(ProfileFull, SLOT_COUNT))
    cfhe: list[int] = fixed(array(u8, 4))
    cfhe_tail: int = fixed(u16)
    cfhe_head: int = fixed(u16)
    cfhe_objects: list[CFHEObject] = fixed(array(CFHEObject, CFHE_OBJECT_COUNT))
    unk: list[int] = fixed(array(u8, 0xE))
    crc_a: int = fixed(u16be)
    cfra: list[int] = fixed(array(u8, 4))
    invited_count: int = fixed(u32)
    invited_order: list[int] = fixed(array(u8, SLOT_COUNT))
    invited: list[Profile] = fixed(array(Profile, SLOT_COUNT))
    unk2: list[int] = fixed(array(u8, 0x12))
    crc_b: int = fixed(u16be)
    cfhe_profiles: list[ProfileAlt] = fixed(array(ProfileAlt, CFHE_OBJECT_COUNT))

    def owned_slot_to_index(self, slot: int) -> int | None:
        """Index into `owned` of the non-null profile placed in `slot`."""
        for i, profile in enumerate(self.owned):
            if not profile.main.is_null() and profile.main.slot == slot:
                return i
        return None

    def owned_profiles(self) -> list[tuple[int, ProfileFull]]:
        """(index, profile) for every non-null owned profile."""
        return [(i, profile) for i, profile in enumerate(self.owned) if not profile.main.is_null()]


@dataclass
class DatabaseFile:
    """A decoded database plus the path it was loaded from.

    Loading refuses any buffer whose CRCs do not match; saving always
    builds a fresh buffer and recomputes both CRCs.
    """

    database: Database
    path: Path | None = None

    @classmethod
    def load(cls, path: Path) -> DatabaseFile:
        """Read and verify a database file.

        Args:
            path: Path to CFL_DB.dat

        Returns:
            Parsed DatabaseFile
        """
        data = path.read_bytes()
        return cls.from_bytes(data, path=path)

    @classmethod
    def from_bytes(cls, data: bytes, path: Path | None = None) -> DatabaseFile:
        """Verify both CRCs and decode the database.

        Raises:
            DatabaseSizeMismatch: data is not exactly DATABASE_SIZE bytes
            ChecksumMismatch: a stored CRC does not match
        """
        if len(data) != DATABASE_SIZE:
            log.error(f'Database is {len(data):#x} bytes, expected {DATABASE_SIZE:#x}')
            raise DatabaseSizeMismatch(f'Database is {len(data):#x} bytes, expected {DATABASE_SIZE:#x}')

        for begin, end in CRC_RANGES:
            check_crc16(data, begin, end)

        database = Database.read_bytes(data)
        log.info(f'Loaded database with {len(database.owned_profiles())} owned profiles')
        return cls(database=database, path=path)

    def to_bytes(self) -> bytes:
        """Encode the database and stamp both CRCs (also stored back on the record)."""
        data = bytearray(Database.byte_len())
        self.database.write_bytes(data)

        self.database.crc_a = update_crc16(data, *CRC_A_RANGE)
        self.database.crc_b = update_crc16(data, *CRC_B_RANGE)
        log.debug(f'CRC16: a={self.database.crc_a:#06x}, b={self.database.crc_b:#06x}')
        return bytes(data)

    def save(self, path: Path | None = None) -> None:
        """Write the database, replacing the target file atomically.

        Args:
            path: Output path; defaults to the path it was loaded from
        """
        path = path or self.path
        if path is None:
            raise ValueError('No path to save the database to')

        data = self.to_bytes()
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f'.{path.name}.', dir=path.parent)
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            log.error(f'Failed to save database to {path}: {e}')
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        self.path = path
        log.info(f'Saved database to {path}')
