"""
Tests for RomFS file lookup.
"""

import struct

import pytest

from citrii.asset.builder import build_container
from citrii.asset.container import Asset
from citrii.errors import MalformedOffset
from citrii.romfs import INVALID_FIELD, DirectoryMetadata, FileMetadata, Header, get_romfs_file


def padded_name(name: str) -> bytes:
    data = name.encode('utf-16-le')
    return data + bytes(-len(data) % 4)


def build_romfs(root_files: dict[str, bytes], dirs: dict[str, dict[str, bytes]]) -> bytes:
    """Lay out a minimal RomFS image: directory table, file table, then data."""
    dir_table = bytearray()
    file_table = bytearray()
    data = bytearray()

    def add_files(files: dict[str, bytes], parent: int) -> int:
        if not files:
            return INVALID_FIELD
        first = len(file_table)
        names = list(files)
        for i, name in enumerate(names):
            entry_len = FileMetadata.byte_len() + len(padded_name(name))
            next_offset = len(file_table) + entry_len if i + 1 < len(names) else INVALID_FIELD
            meta = FileMetadata(
                parent_dir_offset=parent,
                next_file_offset=next_offset,
                data_offset=len(data),
                data_length=len(files[name]),
                same_hash_next_file_offset=INVALID_FIELD,
                name_length=len(name.encode('utf-16-le')),
            )
            file_table.extend(meta.to_bytes() + padded_name(name))
            data.extend(files[name])
        return first

    # Root first, children follow it
    root_len = DirectoryMetadata.byte_len()
    child_offsets = []
    offset = root_len
    for name in dirs:
        child_offsets.append(offset)
        offset += DirectoryMetadata.byte_len() + len(padded_name(name))

    root = DirectoryMetadata(
        parent_dir_offset=0,
        next_dir_offset=INVALID_FIELD,
        first_child_dir_offset=child_offsets[0] if child_offsets else INVALID_FIELD,
        first_file_offset=add_files(root_files, 0),
        same_hash_next_dir_offset=INVALID_FIELD,
        name_length=0,
    )
    dir_table.extend(root.to_bytes())

    for i, (name, files) in enumerate(dirs.items()):
        meta = DirectoryMetadata(
            parent_dir_offset=0,
            next_dir_offset=child_offsets[i + 1] if i + 1 < len(child_offsets) else INVALID_FIELD,
            first_child_dir_offset=INVALID_FIELD,
            first_file_offset=add_files(files, child_offsets[i]),
            same_hash_next_dir_offset=INVALID_FIELD,
            name_length=len(name.encode('utf-16-le')),
        )
        dir_table.extend(meta.to_bytes() + padded_name(name))

    dir_table_offset = Header.byte_len()
    file_table_offset = dir_table_offset + len(dir_table)
    data_offset = file_table_offset + len(file_table)
    header = Header(
        header_length=Header.byte_len(),
        dir_table_offset=dir_table_offset,
        dir_table_length=len(dir_table),
        file_table_offset=file_table_offset,
        file_table_length=len(file_table),
        data_offset=data_offset,
    )
    return header.to_bytes() + bytes(dir_table) + bytes(file_table) + bytes(data)


@pytest.fixture()
def romfs() -> bytes:
    return build_romfs(
        {'readme.txt': b'hello', 'CFL_Res.dat': b'resource'},
        {'font': {'cbf_std.bcfnt': b'font data'}, 'res': {'a.bin': b'A', 'b.bin': b'BB'}},
    )


def test_struct_sizes() -> None:
    assert Header.byte_len() == 0x28
    assert DirectoryMetadata.byte_len() == 0x18
    assert FileMetadata.byte_len() == 0x20


def test_root_file(romfs: bytes) -> None:
    assert get_romfs_file(romfs, ['readme.txt']) == b'hello'
    assert get_romfs_file(romfs, ['CFL_Res.dat']) == b'resource'


def test_nested_file(romfs: bytes) -> None:
    assert get_romfs_file(romfs, ['font', 'cbf_std.bcfnt']) == b'font data'
    assert get_romfs_file(romfs, ['res', 'a.bin']) == b'A'
    assert get_romfs_file(romfs, ['res', 'b.bin']) == b'BB'


def test_missing(romfs: bytes) -> None:
    assert get_romfs_file(romfs, ['nothing.bin']) is None
    assert get_romfs_file(romfs, ['res', 'c.bin']) is None
    assert get_romfs_file(romfs, ['fonts', 'cbf_std.bcfnt']) is None
    # Names compare exactly
    assert get_romfs_file(romfs, ['README.TXT']) is None


def test_asset_from_romfs(container_sections: list[list[bytes]]) -> None:
    image = build_romfs({'CFL_Res.dat': build_container(container_sections)}, {})

    asset = Asset.from_romfs(image)

    assert asset is not None
    assert len(asset.hair_models) == 3


def test_asset_missing_from_romfs() -> None:
    image = build_romfs({'other.dat': b''}, {})

    assert Asset.from_romfs(image) is None


def patched(image: bytes, offset: int, fmt: str, value: int) -> bytes:
    data = bytearray(image)
    struct.pack_into(fmt, data, offset, value)
    return bytes(data)


def test_truncated_image(romfs: bytes) -> None:
    """Entries that do not fit in the image are rejected, not read short."""
    with pytest.raises(MalformedOffset):
        get_romfs_file(b'\x28\x00\x00\x00', ['CFL_Res.dat'])
    with pytest.raises(MalformedOffset):
        get_romfs_file(romfs[: Header.byte_len() + 8], ['readme.txt'])

    assert Asset.from_romfs(b'\x28\x00\x00\x00') is None
    assert Asset.from_romfs(romfs[: Header.byte_len() + 8]) is None


def test_file_chain_loops_back(romfs: bytes) -> None:
    """A file entry whose next sibling is itself stops the walk."""
    header = Header.unpack_from(romfs)
    # next_file_offset of the first root file points back at it
    image = patched(romfs, header.file_table_offset + 4, '<I', 0)

    assert get_romfs_file(image, ['readme.txt']) == b'hello'
    with pytest.raises(MalformedOffset, match='loops'):
        get_romfs_file(image, ['CFL_Res.dat'])
    assert Asset.from_romfs(image) is None


def test_directory_chain_loops_back(romfs: bytes) -> None:
    header = Header.unpack_from(romfs)
    font = DirectoryMetadata.byte_len()
    image = patched(romfs, header.dir_table_offset + font + 4, '<I', font)

    assert get_romfs_file(image, ['font', 'cbf_std.bcfnt']) == b'font data'
    with pytest.raises(MalformedOffset, match='loops'):
        get_romfs_file(image, ['res', 'a.bin'])


def test_data_past_end(romfs: bytes) -> None:
    header = Header.unpack_from(romfs)
    # data_length of readme.txt
    image = patched(romfs, header.file_table_offset + 16, '<Q', len(romfs))

    with pytest.raises(MalformedOffset, match='data'):
        get_romfs_file(image, ['readme.txt'])


def test_name_past_end(romfs: bytes) -> None:
    header = Header.unpack_from(romfs)
    image = patched(romfs, header.file_table_offset + 28, '<I', len(romfs))

    with pytest.raises(MalformedOffset, match='name'):
        get_romfs_file(image, ['readme.txt'])
