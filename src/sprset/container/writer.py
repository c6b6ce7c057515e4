"""Relocatable writer for sprite set containers.

Layout emitted (each pointer is a placeholder patched once its target is
written at the end of the stream):

    header            flags, ->texture set, counts, ->sprites, ->texture
                      names, ->sprite names, ->sprite extras
    texture set       TXP\\x03, count, padding, ->texture[i] (set-relative)
    texture[i]        TXP\\x04, mip counts, layers, depth, ->mip (entry-relative)
    mip level         TXP\\x02, dims, format, index, array index, size, data
    sprites           texture index, rotate, texel region, pixel region
    names             ->string[i] (absolute), nul-terminated UTF-8
    sprite extras     reserved 0, screen mode

Textures and sprites are emitted in ascending name order. The container is
assembled in memory and copied to the destination only once every pointer
has been patched, so failures never leave a partial container behind.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, BinaryIO, List

from ..logging import get_logger
from .bridge import staging_from_image
from .constants import (
    DEFAULT_DEPTH,
    MIP_LEVEL_MAGIC,
    PLANE_TEXTURE_MAGIC,
    TEXTURE_SET_MAGIC,
)
from .cursor import PatchWriter
from .errors import missing_data, name_encoding_error
from .formats import from_dxgi
from .staging import StagingTexture

if TYPE_CHECKING:
    from ..model import SpriteSet

__all__ = ["write_container", "encode_name"]


def encode_name(name: str) -> bytes:
    if "\x00" in name:
        raise name_encoding_error(
            f"Nul in middle of name {name!r}", {"name": name}
        )
    try:
        return name.encode("utf-8") + b"\x00"
    except UnicodeEncodeError as e:
        raise name_encoding_error(
            f"Name {name!r} is not encodable: {e}", {"name": name}
        ) from e


def _write_texture(w: PatchWriter, staging: StagingTexture) -> None:
    base = w.position()
    w.write(PLANE_TEXTURE_MAGIC)
    w.u32(staging.mip_levels)
    w.u8(staging.mip_levels & 0xFF)
    w.u8(staging.array_layers & 0xFF)
    w.u8((staging.depth or DEFAULT_DEPTH) & 0xFF)
    w.u8(0)  # dimensions
    slots = [
        [
            w.placeholder(f"mip[{layer}][{mip}]", base)
            for mip in range(staging.mip_levels)
        ]
        for layer in range(staging.array_layers)
    ]
    fmt = from_dxgi(staging.format)
    for layer, chain in enumerate(slots):
        for mip, slot in enumerate(chain):
            w.patch(slot)
            data = staging.surface(layer, mip)
            w.write(MIP_LEVEL_MAGIC)
            w.i32(max(1, staging.width >> mip))
            w.i32(max(1, staging.height >> mip))
            w.u32(int(fmt))
            w.u8(mip)
            w.u8(layer)
            w.u16(0)
            w.u32(len(data))
            w.write(data)


def _write_names(w: PatchWriter, names: List[str], label: str) -> None:
    encoded = [encode_name(n) for n in names]
    slots = [w.placeholder(f"{label}[{i}]") for i in range(len(names))]
    for slot, raw in zip(slots, encoded):
        w.patch(slot)
        w.write(raw)


def write_container(sprite_set: "SpriteSet", stream: BinaryIO) -> int:
    """Serialize ``sprite_set``; returns the number of bytes written."""
    logger = get_logger()
    textures = sorted(sprite_set.textures.items())
    sprites = sorted(sprite_set.sprites.items())
    texture_index = {name: i for i, (name, _) in enumerate(textures)}

    buf = io.BytesIO()
    w = PatchWriter(buf)
    w.u32(sprite_set.flags & 0xFFFFFFFF)
    texture_set_ptr = w.placeholder("texture set")
    w.u32(len(textures))
    w.u32(len(sprites))
    sprites_ptr = w.placeholder("sprites")
    texture_names_ptr = w.placeholder("texture names")
    sprite_names_ptr = w.placeholder("sprite names")
    sprite_extras_ptr = w.placeholder("sprite extras")

    set_base = w.position()
    w.patch(texture_set_ptr)
    w.write(TEXTURE_SET_MAGIC)
    w.u32(len(textures))
    w.u32(0)  # padding
    slots = [
        w.placeholder(f"texture[{i}]", set_base) for i in range(len(textures))
    ]
    for slot, (name, image) in zip(slots, textures):
        w.patch(slot)
        staging = staging_from_image(image)
        logger.debug(
            "texture %r at %d: %dx%d %s",
            name,
            w.position(),
            staging.width,
            staging.height,
            staging.format.name,
        )
        _write_texture(w, staging)

    w.patch(sprites_ptr)
    for name, sprite in sprites:
        index = texture_index.get(sprite.texture_name)
        if index is None:
            raise missing_data(
                f"Sprite {name!r} references unknown texture "
                f"{sprite.texture_name!r}",
                {"sprite": name, "texture": sprite.texture_name},
            )
        w.i32(index)
        w.i32(sprite.rotate)
        w.vec4(sprite.texel_region)
        w.vec4(sprite.pixel_region)

    w.patch(texture_names_ptr)
    _write_names(w, [name for name, _ in textures], "texture name")
    w.patch(sprite_names_ptr)
    _write_names(w, [name for name, _ in sprites], "sprite name")

    w.patch(sprite_extras_ptr)
    for _, sprite in sprites:
        w.u32(0)  # reserved
        w.u32(int(sprite.screen_mode))

    w.finish()
    data = buf.getvalue()
    logger.debug(
        "container: %d bytes, %d textures, %d sprites",
        len(data),
        len(textures),
        len(sprites),
    )
    stream.write(data)
    return len(data)
