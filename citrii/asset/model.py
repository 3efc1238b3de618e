"""Model items: vertex/index streams and their attribute layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Union

from citrii.codec import LITTLE, Record, array, f32, fixed, record, u16
from citrii.const import INDEX_LIST_TAG
from citrii.errors import MalformedItem
from citrii.io.reader import Reader


POSITION_SLOT = 0
NORMAL_SLOT = 1
TEXCOORD_SLOT = 2

POSITION_SIZE = 6  # 3 x i16
NORMAL_SIZE = 6  # 3 x i16
TEXCOORD_SIZE = 4  # 2 x i16


class AttributeMode(IntEnum):
    NONE = 0
    COMMON = 1
    INDIVIDUAL = 2

    @classmethod
    def from_count(cls, attribute_count: int) -> AttributeMode:
        if attribute_count == 0:
            return cls.NONE
        if attribute_count == 1:
            return cls.COMMON
        return cls.INDIVIDUAL


class AttributeType(Enum):
    SHORT = 'short'
    FLOAT = 'float'


@dataclass(frozen=True)
class VaryingAttribute:
    """Per-vertex attribute read from the vertex stream."""

    dimension: int
    data_type: AttributeType
    offset: int


@dataclass(frozen=True)
class ConstantAttribute:
    """One value shared by every vertex."""

    values: tuple[int, ...]


Attribute = Union[VaryingAttribute, ConstantAttribute]


@dataclass(frozen=True)
class ModelLayout:
    """Everything the renderer needs to draw a model."""

    attributes: tuple[tuple[int, Attribute], ...]
    stride: int
    vertex_list: bytes = field(repr=False)
    index_list: bytes = field(repr=False)

    @property
    def index_count(self) -> int:
        return len(self.index_list)

    def attribute(self, slot: int) -> Attribute | None:
        for index, attribute in self.attributes:
            if index == slot:
                return attribute
        return None


@record(LITTLE)
@dataclass
class ModelHeader(Record):
    vertex_count: int = fixed(u16)
    normal_count: int = fixed(u16)
    texcoord_count: int = fixed(u16)
    index_list_count: int = fixed(u16)


@record(LITTLE)
@dataclass
class FaceConfig(Record):
    """Attachment points stored in front of each face model."""

    hair_pos: list[float] = fixed(array(f32, 3))
    nose_pos: list[float] = fixed(array(f32, 3))
    beard_pos: list[float] = fixed(array(f32, 3))


def vertex_stride(normal_mode: AttributeMode, texcoord_mode: AttributeMode) -> int:
    stride = POSITION_SIZE
    if normal_mode == AttributeMode.INDIVIDUAL:
        stride += NORMAL_SIZE
    if texcoord_mode == AttributeMode.INDIVIDUAL:
        stride += TEXCOORD_SIZE
    return stride


@dataclass
class RawModel:
    normal_mode: AttributeMode
    texcoord_mode: AttributeMode
    vertex_list: bytes = field(repr=False)
    index_list: bytes = field(repr=False)
    default_normal: tuple[int, int, int] = (0, 0, 0)
    default_texcoord: tuple[int, int] = (0, 0)

    @property
    def vertex_count(self) -> int:
        return len(self.vertex_list) // vertex_stride(self.normal_mode, self.texcoord_mode)

    def bake(self) -> ModelLayout:
        """Build the attribute slot map: position, then normal, then texcoord."""
        attributes: list[tuple[int, Attribute]] = [
            (POSITION_SLOT, VaryingAttribute(dimension=3, data_type=AttributeType.SHORT, offset=0)),
        ]
        stride = POSITION_SIZE

        if self.normal_mode == AttributeMode.COMMON:
            attributes.append((NORMAL_SLOT, ConstantAttribute(tuple(self.default_normal))))
        elif self.normal_mode == AttributeMode.INDIVIDUAL:
            attributes.append((NORMAL_SLOT, VaryingAttribute(dimension=3, data_type=AttributeType.SHORT, offset=stride)))
            stride += NORMAL_SIZE

        if self.texcoord_mode == AttributeMode.COMMON:
            attributes.append((TEXCOORD_SLOT, ConstantAttribute(tuple(self.default_texcoord))))
        elif self.texcoord_mode == AttributeMode.INDIVIDUAL:
            attributes.append((TEXCOORD_SLOT, VaryingAttribute(dimension=2, data_type=AttributeType.SHORT, offset=stride)))
            stride += TEXCOORD_SIZE

        return ModelLayout(
            attributes=tuple(attributes),
            stride=stride,
            vertex_list=self.vertex_list,
            index_list=self.index_list,
        )


def parse_model(data: bytes) -> tuple[RawModel, int]:
    """Parse a model item body.

    Layout: header, vertex stream, optional shared normal (3 x i16),
    optional shared texcoord (2 x i16), optional index list
    (``04 00``, u16 count, u8 indices).

    Returns:
        The model and the number of unread trailing bytes
    """
    reader = Reader(data)
    header = reader.read_record(ModelHeader)
    normal_mode = AttributeMode.from_count(header.normal_count)
    texcoord_mode = AttributeMode.from_count(header.texcoord_count)

    vertex_list = reader.read_bytes(header.vertex_count * vertex_stride(normal_mode, texcoord_mode))

    default_normal = (0, 0, 0)
    if normal_mode == AttributeMode.COMMON:
        default_normal = (reader.read_int16(), reader.read_int16(), reader.read_int16())

    default_texcoord = (0, 0)
    if texcoord_mode == AttributeMode.COMMON:
        default_texcoord = (reader.read_int16(), reader.read_int16())

    index_list = b''
    if header.index_list_count == 1:
        tag = reader.read_bytes(len(INDEX_LIST_TAG))
        if tag != INDEX_LIST_TAG:
            raise MalformedItem(f'Bad index list tag {tag.hex()}')
        index_count = reader.read_uint16()
        index_list = reader.read_bytes(index_count)

    model = RawModel(
        normal_mode=normal_mode,
        texcoord_mode=texcoord_mode,
        vertex_list=vertex_list,
        index_list=index_list,
        default_normal=default_normal,
        default_texcoord=default_texcoord,
    )
    return model, reader.remaining
