"""Encoders for resource container items and whole containers.

The inverse of `citrii.asset.container`: used to repack resources and to
build containers in tests.
"""

from __future__ import annotations

from citrii.asset.model import AttributeMode, RawModel
from citrii.asset.texture import RawTexture, TextureHeader
from citrii.const import INDEX_LIST_TAG, ITEM_OFFSET_MASK, MAX_REDIRECT, REDIRECT_SHIFT, TEXTURE_TAG
from citrii.io.writer import Writer
from citrii.log import log


def encode_texture_item(texture: RawTexture) -> bytes:
    """Encode a texture item: header followed by the swizzled pixel data."""
    if len(texture.pixels) != texture.pixel_byte_len:
        raise ValueError(f'Texture needs {texture.pixel_byte_len} pixel bytes, got {len(texture.pixels)}')

    writer = Writer()
    writer.write_record(
        TextureHeader(
            width=texture.width,
            height=texture.height,
            tag=TEXTURE_TAG,
            format=int(texture.format),
            wrap_u=int(texture.wrap_u),
            wrap_v=int(texture.wrap_v),
        )
    )
    writer.write_bytes(texture.pixels)
    return writer.to_bytes()


def encode_model_item(model: RawModel) -> bytes:
    """Encode a model body (without any per-section prefix or trailer)."""
    writer = Writer()
    writer.write_uint16(model.vertex_count)
    writer.write_uint16(int(model.normal_mode))
    writer.write_uint16(int(model.texcoord_mode))
    writer.write_uint16(1 if model.index_list else 0)
    writer.write_bytes(model.vertex_list)

    if model.normal_mode == AttributeMode.COMMON:
        for value in model.default_normal:
            writer.write_int16(value)
    if model.texcoord_mode == AttributeMode.COMMON:
        for value in model.default_texcoord:
            writer.write_int16(value)

    if model.index_list:
        writer.write_bytes(INDEX_LIST_TAG)
        writer.write_uint16(len(model.index_list))
        writer.write_bytes(model.index_list)
    return writer.to_bytes()


def build_container(sections: list[list[bytes]], version: int = 0) -> bytes:
    """Lay out a resource container.

    Each section is a list of item payloads; an empty payload is an empty
    item. A payload identical to an earlier one in the same section is
    stored once and referenced through a redirect.
    """
    writer = Writer()
    writer.write_uint16(len(sections))
    writer.write_uint16(version)

    section_table_pos = writer.reserve(4 * len(sections))

    section_offsets = []
    for index, items in enumerate(sections):
        section_offsets.append(writer.position)
        offsets, chunk = _layout_section(items)
        log.debug(f'Section {index}: {len(items)} items, {len(chunk)} bytes')

        writer.write_uint16(len(items))
        writer.write_uint16(0)
        writer.write_uint32_array(offsets)
        writer.write_bytes(chunk)

    for i, offset in enumerate(section_offsets):
        writer.patch_uint32(section_table_pos + 4 * i, offset)

    return writer.to_bytes()


def _layout_section(items: list[bytes]) -> tuple[list[int], bytes]:
    chunk = bytearray()
    offsets = []
    first_seen: dict[bytes, int] = {}

    for index, item in enumerate(items):
        item = bytes(item)
        cursor = len(chunk)
        target = first_seen.get(item) if item else None
        if target is not None and target + 1 <= MAX_REDIRECT:
            # Low bits still mark the end of the previous item
            offsets.append(((target + 1) << REDIRECT_SHIFT) | cursor)
            continue

        offsets.append(cursor)
        chunk.extend(item)
        if item:
            first_seen.setdefault(item, index)

    offsets.append(len(chunk))
    if len(chunk) > ITEM_OFFSET_MASK:
        raise ValueError(f'Section data of {len(chunk)} bytes does not fit 22-bit offsets')
    return offsets, bytes(chunk)
