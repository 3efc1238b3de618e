"""Face resource container: models, textures and face configurations."""

from citrii.asset.container import Asset
from citrii.asset.model import AttributeMode, ConstantAttribute, FaceConfig, ModelLayout, RawModel, VaryingAttribute
from citrii.asset.texture import DecodedTexture, RawTexture, TextureFormat, WrapMode

__all__ = [
    'Asset',
    'AttributeMode',
    'ConstantAttribute',
    'DecodedTexture',
    'FaceConfig',
    'ModelLayout',
    'RawModel',
    'RawTexture',
    'TextureFormat',
    'VaryingAttribute',
    'WrapMode',
]
