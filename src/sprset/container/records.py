"""Materialized records produced by the container reader."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, NamedTuple, Tuple

from .errors import missing_data, structural_error
from .formats import TextureFormat

__all__ = [
    "ScreenMode",
    "Vec4",
    "TextureKind",
    "MipLevelRecord",
    "TextureRecord",
    "SpriteRecord",
    "ContainerRecord",
]


class ScreenMode(IntEnum):
    """Target resolution a sprite was authored for."""

    QVGA = 0
    VGA = 1
    SVGA = 2
    XGA = 3
    SXGA = 4
    SXGAPLUS = 5
    UXGA = 6
    WVGA = 7
    WSVGA = 8
    WXGA = 9
    WXGA_ = 10
    WUXGA = 11
    WQXGA = 12
    HDTV720 = 13
    HDTV1080 = 14
    WQHD = 15
    HVGA = 16
    QHD = 17
    CUSTOM = 18

    @classmethod
    def fallback(cls) -> "ScreenMode":
        return cls.CUSTOM

    @classmethod
    def parse(cls, raw: int) -> "ScreenMode":
        try:
            return cls(raw)
        except ValueError:
            raise structural_error(
                f"Unknown screen mode code {raw}", {"code": raw}
            ) from None


class Vec4(NamedTuple):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0


class TextureKind(Enum):
    PLANE = "plane"
    CUBE_MAP = "cube_map"


@dataclass(slots=True)
class MipLevelRecord:
    width: int
    height: int
    format: TextureFormat
    index: int
    array_index: int
    data: bytes = b""


@dataclass(slots=True)
class TextureRecord:
    kind: TextureKind
    mip_count: int
    mip_levels: int
    array_size: int
    depth: int
    dimensions: int
    mip_levels_per_face: int
    # chains[array_index][mip] in file order
    chains: List[List[MipLevelRecord]] = field(default_factory=list)

    def base_level(self, array_index: int = 0) -> MipLevelRecord:
        if array_index >= len(self.chains):
            raise missing_data(
                f"Texture has no array slice {array_index}",
                {"array_size": len(self.chains)},
            )
        chain = self.chains[array_index]
        if not chain:
            raise missing_data(
                f"Array slice {array_index} has no mip level 0",
                {"array_index": array_index},
            )
        return chain[0]


@dataclass(slots=True)
class SpriteRecord:
    texture_index: int
    rotate: int
    texel_region: Vec4
    pixel_region: Vec4


@dataclass(slots=True)
class ContainerRecord:
    flags: int
    texture_set_count: int
    sprite_count: int
    textures: List[TextureRecord] = field(default_factory=list)
    sprites: List[SpriteRecord] = field(default_factory=list)
    texture_names: List[str] = field(default_factory=list)
    sprite_names: List[str] = field(default_factory=list)
    sprite_extras: List[Tuple[int, ScreenMode]] = field(default_factory=list)
