"""
Face resource container (CFL_Res.dat).

Layout (little-endian):
- Header: u16 section_count, u16 version, u32 section_offsets[section_count]
- Section: u16 item_count, u16 reserved, u32 item_offsets[item_count + 1],
  followed by the section's data chunk

An item offset keeps the byte offset inside the chunk in its low 22 bits.
A non-zero value in the top 10 bits is a 1-based index of another item of
the same section whose bytes are reused. The extra last offset marks the end
of the final item.

Sections 0-8 hold models and 9-19 hold textures; the role of each section is
fixed by its position. Any problem anywhere fails the whole container.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

from citrii.asset.model import FaceConfig, ModelLayout, parse_model
from citrii.asset.texture import DecodedTexture, read_texture_item
from citrii.const import (
    FACE_CANVAS_SECTION,
    FACE_CONFIG_SECTION,
    HAIR_MODEL_SKIP,
    HAIR_SECTION,
    ITEM_OFFSET_MASK,
    REDIRECT_SHIFT,
    MODEL_SECTIONS,
    RESOURCE_PATH,
    SECTION_COUNT,
    TRAILING_TOLERANCE,
)
from citrii.errors import ContainerError, EndOfData, MalformedItem, MalformedOffset, TrailingBytesMismatch
from citrii.io.reader import Reader
from citrii.log import log
from citrii.romfs import get_romfs_file


SECTION_HEADER_PREFIX = 4  # u16 item_count + u16 reserved


@dataclass
class AssetHeader:
    version: int
    section_offsets: list[int]

    @classmethod
    def read(cls, reader: Reader) -> AssetHeader:
        """Read AssetHeader from reader."""
        section_count = reader.read_uint16()
        version = reader.read_uint16()
        section_offsets = reader.read_uint32_array(section_count)
        return cls(version=version, section_offsets=section_offsets)


@dataclass
class SectionHeader:
    item_offsets: list[int]

    @property
    def item_count(self) -> int:
        return len(self.item_offsets) - 1

    @property
    def byte_len(self) -> int:
        return SECTION_HEADER_PREFIX + 4 * len(self.item_offsets)

    @classmethod
    def read(cls, reader: Reader) -> SectionHeader:
        """Read SectionHeader from reader."""
        item_count = reader.read_uint16()
        reader.skip(2)  # buffer size, unused
        return cls(item_offsets=reader.read_uint32_array(item_count + 1))


@dataclass
class Section:
    """A section header plus the data chunk that follows it."""

    index: int
    header: SectionHeader
    chunk: memoryview = field(repr=False)

    @classmethod
    def read(cls, data: bytes, index: int, offset: int) -> Section:
        if offset > len(data):
            raise MalformedOffset(f'Section {index} offset {offset:#x} is past the end ({len(data):#x})')
        reader = Reader(data)
        reader.position = offset
        header = SectionHeader.read(reader)
        chunk = memoryview(data)[reader.position :]
        end = header.item_offsets[-1] & ITEM_OFFSET_MASK
        if end > len(chunk):
            raise MalformedOffset(f'Section {index} ends at {end:#x}, past its chunk of {len(chunk):#x}')
        return cls(index=index, header=header, chunk=chunk)

    def resolve(self, item: int) -> tuple[int, int]:
        """Return the [begin, end) chunk range of an item, following a redirect."""
        offsets = self.header.item_offsets
        if not 0 <= item < self.header.item_count:
            raise MalformedOffset(f'Section {self.index} has no item {item}')

        k = item
        begin = offsets[k]
        redirect = begin >> REDIRECT_SHIFT
        if redirect:
            k = redirect - 1
            if k >= self.header.item_count:
                raise MalformedOffset(f'Section {self.index} item {item} redirects to missing item {k}')
            begin = offsets[k]

        begin &= ITEM_OFFSET_MASK
        end = offsets[k + 1] & ITEM_OFFSET_MASK
        if begin > end or end > len(self.chunk):
            raise MalformedOffset(
                f'Section {self.index} item {item}: range [{begin:#x}, {end:#x}) outside chunk of {len(self.chunk):#x}'
            )
        return begin, end

    def item_data(self, item: int) -> memoryview:
        begin, end = self.resolve(item)
        return self.chunk[begin:end]

    def items(self) -> list[memoryview]:
        return [self.item_data(i) for i in range(self.header.item_count)]


def read_sections(data: bytes) -> tuple[AssetHeader, list[Section]]:
    """Parse the container header and every section header."""
    reader = Reader(data)
    header = AssetHeader.read(reader)
    log.debug(f'Container version={header.version}, sections={len(header.section_offsets)}')

    sections = [Section.read(data, index, offset) for index, offset in enumerate(header.section_offsets)]
    return header, sections


def _read_model_item(section: int, item_data: memoryview) -> tuple[ModelLayout, FaceConfig | None]:
    face_config = None
    model_data = item_data
    if section == FACE_CONFIG_SECTION:
        reader = Reader(item_data)
        face_config = reader.read_record(FaceConfig)
        model_data = item_data[reader.position :]
    elif section == HAIR_SECTION:
        if len(item_data) < HAIR_MODEL_SKIP:
            raise MalformedItem(f'Hair item is {len(item_data)} bytes, shorter than its {HAIR_MODEL_SKIP:#x}-byte prefix')
        model_data = item_data[HAIR_MODEL_SKIP:]

    model, rest = parse_model(model_data)

    if section == FACE_CANVAS_SECTION:
        cover_data_len = len(model.index_list) // 3 * 2
        if rest < cover_data_len or rest >= cover_data_len + TRAILING_TOLERANCE:
            raise TrailingBytesMismatch(
                f'Section {section} model has {rest} trailing bytes, expected {cover_data_len} cover bytes'
            )
    elif rest >= TRAILING_TOLERANCE:
        raise TrailingBytesMismatch(f'Section {section} model has {rest} trailing bytes')
    elif rest:
        log.debug(f'Section {section} model has {rest} trailing bytes (tolerated)')

    return model.bake(), face_config


@dataclass
class Asset:
    """All decoded models and textures of a resource container.

    Every list keeps the container's item indices; empty items are None.
    """

    version: int

    beard_models: list[ModelLayout | None]
    accessory_models: list[ModelLayout | None]
    face_models: list[ModelLayout | None]
    scalp_models: list[ModelLayout | None]
    glass_models: list[ModelLayout | None]
    hair_models: list[ModelLayout | None]
    face_canvas_models: list[ModelLayout | None]
    nose_canvas_models: list[ModelLayout | None]
    nose_models: list[ModelLayout | None]

    accessory_textures: list[DecodedTexture | None]
    eye_textures: list[DecodedTexture | None]
    eyebrow_textures: list[DecodedTexture | None]
    beard_textures: list[DecodedTexture | None]
    wrinkle_textures: list[DecodedTexture | None]
    makeup_textures: list[DecodedTexture | None]
    glass_textures: list[DecodedTexture | None]
    mole_textures: list[DecodedTexture | None]
    lip_textures: list[DecodedTexture | None]
    mustache_textures: list[DecodedTexture | None]
    nose_textures: list[DecodedTexture | None]

    face_configs: list[FaceConfig | None]

    @classmethod
    def load(cls, path: Path) -> Asset | None:
        """Load a resource container file; None if it is unreadable."""
        return cls.from_bytes(path.read_bytes())

    @classmethod
    def from_romfs(cls, romfs: bytes) -> Asset | None:
        """Load the resource container out of a RomFS image; None if missing or unreadable."""
        try:
            data = get_romfs_file(romfs, RESOURCE_PATH)
        except ContainerError as e:
            log.error(f'RomFS image is unreadable: {e}')
            return None
        if data is None:
            log.error(f'{"/".join(RESOURCE_PATH)} not found in RomFS')
            return None
        return cls.from_bytes(data)

    @classmethod
    def from_bytes(cls, data: bytes) -> Asset | None:
        """Parse a resource container; None if any part of it is unreadable."""
        try:
            return cls.parse(data)
        except (ContainerError, EndOfData) as e:
            log.error(f'Resource container is unreadable: {e}')
            return None

    @classmethod
    def parse(cls, data: bytes) -> Asset:
        """Parse a resource container, raising on the first problem."""
        header, sections = read_sections(data)
        if len(sections) < SECTION_COUNT:
            raise MalformedItem(f'Container has {len(sections)} sections, expected {SECTION_COUNT}')
        if len(sections) > SECTION_COUNT:
            log.warning(f'Container has {len(sections)} sections, only the first {SECTION_COUNT} are used')

        section_list: list[list] = []
        face_configs: list[FaceConfig | None] = []
        for section in sections:
            item_list: list = []
            for item_data in section.items():
                if not item_data:
                    item_list.append(None)
                    if section.index == FACE_CONFIG_SECTION:
                        face_configs.append(None)
                    continue

                if section.index in MODEL_SECTIONS:
                    model, face_config = _read_model_item(section.index, item_data)
                    item_list.append(model)
                    if section.index == FACE_CONFIG_SECTION:
                        face_configs.append(face_config)
                else:
                    item_list.append(read_texture_item(item_data))

            log.debug(f'Section {section.index}: {len(item_list)} items')
            section_list.append(item_list)

        lists = dict(zip(SECTION_FIELDS, section_list))
        return cls(version=header.version, face_configs=face_configs, **lists)


# Attribute names of Asset in section order
SECTION_FIELDS = tuple(f.name for f in fields(Asset))[1:SECTION_COUNT + 1]
