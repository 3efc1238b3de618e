"""
Level-3 RomFS lookup.

Directories and files are stored as linked lists of metadata entries,
each followed by its UTF-16LE name. Offsets in the entries are relative
to the directory or file table; 0xFFFFFFFF ends a sibling chain.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from citrii.codec import LITTLE, Record, fixed, record, u32, u64
from citrii.errors import MalformedOffset
from citrii.log import log


INVALID_FIELD = 0xFFFFFFFF


@record(LITTLE)
@dataclass
class Header(Record):
    header_length: int = fixed(u32)
    dir_hash_table_offset: int = fixed(u32)
    dir_hash_table_length: int = fixed(u32)
    dir_table_offset: int = fixed(u32)
    dir_table_length: int = fixed(u32)
    file_hash_table_offset: int = fixed(u32)
    file_hash_table_length: int = fixed(u32)
    file_table_offset: int = fixed(u32)
    file_table_length: int = fixed(u32)
    data_offset: int = fixed(u32)


@record(LITTLE)
@dataclass
class DirectoryMetadata(Record):
    parent_dir_offset: int = fixed(u32)
    next_dir_offset: int = fixed(u32)
    first_child_dir_offset: int = fixed(u32)
    first_file_offset: int = fixed(u32)
    same_hash_next_dir_offset: int = fixed(u32)
    name_length: int = fixed(u32)


@record(LITTLE)
@dataclass
class FileMetadata(Record):
    parent_dir_offset: int = fixed(u32)
    next_file_offset: int = fixed(u32)
    data_offset: int = fixed(u64)
    data_length: int = fixed(u64)
    same_hash_next_file_offset: int = fixed(u32)
    name_length: int = fixed(u32)


R = TypeVar('R', bound=Record)


def _entry_at(romfs: bytes, cls: type[R], offset: int) -> R:
    if offset + cls.byte_len() > len(romfs):
        raise MalformedOffset(f'RomFS {cls.__name__} at {offset:#x} runs past the image end {len(romfs):#x}')
    return cls.unpack_from(romfs, offset)


def _name_at(romfs: bytes, begin: int, length: int) -> bytes:
    if begin + length > len(romfs):
        raise MalformedOffset(f'RomFS name at {begin:#x} ({length} bytes) runs past the image end {len(romfs):#x}')
    return bytes(romfs[begin : begin + length])


def _visit(seen: set[int], offset: int, kind: str) -> None:
    if offset in seen:
        raise MalformedOffset(f'RomFS {kind} chain loops back to {offset:#x}')
    seen.add(offset)


def get_romfs_file(romfs: bytes, path: list[str]) -> bytes | None:
    """
    Find a file inside a RomFS image.

    Args:
        romfs: The whole level-3 image
        path: Directory names followed by the file name

    Returns:
        The file contents, or None if any path component is missing

    Raises:
        MalformedOffset: An entry, name or data extent lies outside the image,
            or a sibling chain revisits an entry
    """
    *dir_names, file_name = path

    header = _entry_at(romfs, Header, 0)
    directory = _entry_at(romfs, DirectoryMetadata, header.dir_table_offset)

    for dir_name in dir_names:
        expected = dir_name.encode('utf-16-le')
        child_offset = directory.first_child_dir_offset
        seen: set[int] = set()
        while True:
            if child_offset == INVALID_FIELD:
                log.debug(f'RomFS directory {dir_name!r} not found')
                return None
            _visit(seen, child_offset, 'directory')
            entry = header.dir_table_offset + child_offset
            directory = _entry_at(romfs, DirectoryMetadata, entry)
            name_begin = entry + DirectoryMetadata.byte_len()
            if _name_at(romfs, name_begin, directory.name_length) == expected:
                break
            child_offset = directory.next_dir_offset

    expected = file_name.encode('utf-16-le')
    file_offset = directory.first_file_offset
    seen = set()
    while file_offset != INVALID_FIELD:
        _visit(seen, file_offset, 'file')
        entry = header.file_table_offset + file_offset
        file = _entry_at(romfs, FileMetadata, entry)
        name_begin = entry + FileMetadata.byte_len()
        if _name_at(romfs, name_begin, file.name_length) == expected:
            data_begin = header.data_offset + file.data_offset
            data_end = data_begin + file.data_length
            if data_end > len(romfs):
                raise MalformedOffset(
                    f'RomFS file {"/".join(path)} data [{data_begin:#x}, {data_end:#x}) runs past the image end {len(romfs):#x}'
                )
            log.debug(f'RomFS file {"/".join(path)}: {file.data_length:#x} bytes at {data_begin:#x}')
            return bytes(romfs[data_begin:data_end])
        file_offset = file.next_file_offset

    log.debug(f'RomFS file {file_name!r} not found')
    return None
