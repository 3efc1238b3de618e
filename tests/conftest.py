"""
Pytest configuration and shared fixtures.

Containers and databases are synthesised in memory; no binary fixtures
are needed.
"""

from datetime import datetime
from typing import Callable

import pytest

from citrii.asset.builder import encode_model_item, encode_texture_item
from citrii.asset.model import AttributeMode, FaceConfig, RawModel
from citrii.asset.texture import RawTexture, TextureFormat, WrapMode
from citrii.const import FACE_CANVAS_SECTION, FACE_CONFIG_SECTION, HAIR_MODEL_SKIP, HAIR_SECTION, SECTION_COUNT
from citrii.model.database import Database, DatabaseFile
from citrii.model.profile import Profile, ProfileFull, encode_name


MAC = [0x00, 0x1F, 0x32, 0x11, 0x22, 0x33]
SYSTEM_ID = [1, 2, 3, 4, 5, 6, 7, 8]


@pytest.fixture()
def raw_texture() -> RawTexture:
    """8x8 I8 texture whose stored bytes count up from 0."""
    return RawTexture(
        width=8,
        height=8,
        format=TextureFormat.I8,
        wrap_u=WrapMode.REPEAT,
        wrap_v=WrapMode.MIRROR,
        pixels=bytes(range(64)),
    )


@pytest.fixture()
def raw_model() -> RawModel:
    """Three vertices with per-vertex normals, a shared texcoord and one triangle."""
    return RawModel(
        normal_mode=AttributeMode.INDIVIDUAL,
        texcoord_mode=AttributeMode.COMMON,
        vertex_list=bytes(range(36)),
        index_list=bytes([0, 1, 2]),
        default_texcoord=(7, -3),
    )


@pytest.fixture()
def face_config() -> FaceConfig:
    return FaceConfig(hair_pos=[1.0, 2.0, 3.0], nose_pos=[0.5, 0.0, 0.0], beard_pos=[0.0, -1.5, 0.0])


@pytest.fixture()
def make_model_item(raw_model: RawModel, face_config: FaceConfig) -> Callable[[int], bytes]:
    """Build a model item with the prefix/trailer its section expects."""

    def make(section: int) -> bytes:
        body = encode_model_item(raw_model)
        if section == FACE_CONFIG_SECTION:
            return face_config.to_bytes() + body
        if section == HAIR_SECTION:
            return bytes(HAIR_MODEL_SKIP) + body
        if section == FACE_CANVAS_SECTION:
            return body + bytes(len(raw_model.index_list) // 3 * 2)
        return body

    return make


@pytest.fixture()
def container_sections(make_model_item: Callable[[int], bytes], raw_texture: RawTexture) -> list[list[bytes]]:
    """Twenty sections: each model section holds a model, an empty item and a duplicate model."""
    texture_item = encode_texture_item(raw_texture)
    sections = []
    for index in range(SECTION_COUNT):
        if index < 9:
            item = make_model_item(index)
            sections.append([item, b'', item])
        else:
            sections.append([texture_item])
    return sections


@pytest.fixture()
def database_file() -> DatabaseFile:
    """Empty database with one owned profile in slot 0."""
    database = Database()
    profile = Profile.new(MAC, SYSTEM_ID, datetime(2020, 5, 17, 12, 0, 0), slot=0)
    database.owned[0] = ProfileFull(main=profile, author=encode_name('Tester'))
    return DatabaseFile(database=database)


@pytest.fixture()
def database_data(database_file: DatabaseFile) -> bytes:
    """Encoded database with valid CRCs."""
    return database_file.to_bytes()
