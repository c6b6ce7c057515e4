"""Relocatable reader for sprite set containers.

Public functions:
- read_container(stream) -> ContainerRecord

All pointer fields are resolved through :meth:`PointerReader.follow`, which
restores the cursor after parsing the target, so header and table fields are
always read in declaration order regardless of where their payloads live.
Pointer bases:

* header pointers and name pointers are absolute;
* texture pointers are relative to the texture set's magic;
* mip level pointers are relative to their texture entry's magic.
"""

from __future__ import annotations

from typing import BinaryIO, List

from ..logging import get_logger
from .constants import (
    CUBE_FACE_COUNT,
    CUBE_MAP_TEXTURE_MAGIC,
    MAGIC_SIZE,
    MIP_LEVEL_MAGIC,
    PLANE_TEXTURE_MAGIC,
    TEXTURE_SET_MAGIC,
)
from .cursor import PointerReader
from .errors import structural_error
from .formats import parse_texture_format
from .records import (
    ContainerRecord,
    MipLevelRecord,
    ScreenMode,
    SpriteRecord,
    TextureKind,
    TextureRecord,
    Vec4,
)

__all__ = ["read_container"]

_TEXTURE_KINDS = {
    PLANE_TEXTURE_MAGIC: TextureKind.PLANE,
    CUBE_MAP_TEXTURE_MAGIC: TextureKind.CUBE_MAP,
}


def _read_mip_level(r: PointerReader) -> MipLevelRecord:
    r.magic(MIP_LEVEL_MAGIC, "mip level")
    width = r.i32("mip.width")
    height = r.i32("mip.height")
    fmt = parse_texture_format(r.u32("mip.format"))
    index = r.u8("mip.index")
    array_index = r.u8("mip.array_index")
    r.u16("mip.padding")
    data_size = r.u32("mip.data_size")
    data = r.read_exact(data_size, "mip.data")
    return MipLevelRecord(width, height, fmt, index, array_index, data)


def _read_mip_chain(
    r: PointerReader, mip_levels: int, base: int
) -> List[MipLevelRecord]:
    return [
        r.follow(lambda: _read_mip_level(r), base, "mip level pointer")
        for _ in range(mip_levels)
    ]


def _read_texture(r: PointerReader) -> TextureRecord:
    start = r.position()
    tag = r.read_exact(MAGIC_SIZE, "texture magic")
    kind = _TEXTURE_KINDS.get(tag)
    if kind is None:
        raise structural_error(
            f"Bad magic for texture at {start}: {tag!r}", {"offset": start}
        )
    base = r.position() - MAGIC_SIZE
    mip_count = r.u32("texture.mip_count")
    mip_levels = r.u8("texture.mip_levels")
    array_size = r.u8("texture.array_size")
    depth = r.u8("texture.depth")
    dimensions = r.u8("texture.dimensions")
    if kind is TextureKind.CUBE_MAP:
        if array_size == 0:
            raise structural_error(
                f"Cube map at {start} declares zero faces", {"offset": start}
            )
        if array_size != CUBE_FACE_COUNT or mip_levels % array_size:
            get_logger().debug(
                "cube map at %d: mip_levels=%d faces=%d (per-face truncated)",
                start,
                mip_levels,
                array_size,
            )
        per_face = mip_levels // array_size
    else:
        per_face = mip_levels
    chains = [_read_mip_chain(r, per_face, base) for _ in range(array_size)]
    return TextureRecord(
        kind=kind,
        mip_count=mip_count,
        mip_levels=mip_levels,
        array_size=array_size,
        depth=depth,
        dimensions=dimensions,
        mip_levels_per_face=per_face,
        chains=chains,
    )


def _read_texture_set(r: PointerReader) -> List[TextureRecord]:
    r.magic(TEXTURE_SET_MAGIC, "texture set")
    base = r.position() - MAGIC_SIZE
    texture_count = r.u32("texture_set.count")
    r.u32("texture_set.padding")
    get_logger().debug(
        "texture set at %d: %d textures", base, texture_count
    )
    return [
        r.follow(lambda: _read_texture(r), base, "texture pointer")
        for _ in range(texture_count)
    ]


def _read_sprite(r: PointerReader) -> SpriteRecord:
    texture_index = r.i32("sprite.texture_index")
    rotate = r.i32("sprite.rotate")
    texel_region = Vec4(*r.vec4("sprite.texel_region"))
    pixel_region = Vec4(*r.vec4("sprite.pixel_region"))
    return SpriteRecord(texture_index, rotate, texel_region, pixel_region)


def _read_name_array(r: PointerReader, count: int) -> List[str]:
    return [
        r.follow(lambda: r.cstring("name"), 0, "name pointer")
        for _ in range(count)
    ]


def _read_sprite_extra(r: PointerReader):
    reserved = r.u32("sprite_extra.reserved")
    mode = ScreenMode.parse(r.u32("sprite_extra.screen_mode"))
    return reserved, mode


def read_container(stream: BinaryIO) -> ContainerRecord:
    """Parse a whole container starting at stream position 0."""
    r = PointerReader(stream)
    r.seek(0, "header")
    flags = r.u32("header.flags")
    textures = r.follow(lambda: _read_texture_set(r), 0, "texture set")
    texture_set_count = r.u32("header.texture_set_count")
    sprite_count = r.u32("header.sprite_count")
    sprites = r.follow(
        lambda: [_read_sprite(r) for _ in range(sprite_count)],
        0,
        "sprites",
    )
    texture_names = r.follow(
        lambda: _read_name_array(r, texture_set_count), 0, "texture names"
    )
    sprite_names = r.follow(
        lambda: _read_name_array(r, sprite_count), 0, "sprite names"
    )
    sprite_extras = r.follow(
        lambda: [_read_sprite_extra(r) for _ in range(sprite_count)],
        0,
        "sprite extras",
    )
    get_logger().debug(
        "container: flags=%#x textures=%d names=%d sprites=%d",
        flags,
        len(textures),
        texture_set_count,
        sprite_count,
    )
    return ContainerRecord(
        flags=flags,
        texture_set_count=texture_set_count,
        sprite_count=sprite_count,
        textures=textures,
        sprites=sprites,
        texture_names=texture_names,
        sprite_names=sprite_names,
        sprite_extras=sprite_extras,
    )
