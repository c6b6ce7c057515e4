"""Structural container inspection.

Public functions:
- inspect_container(stream) -> dict
- validate_container(info) -> list[str]

Inspection parses the full pointer structure but never decodes pixels, so it
also works for containers whose formats have no decoder (including the
uncompressed RGBA8 textures this package writes).
"""

from __future__ import annotations

from typing import Any, BinaryIO, Dict, List

from .bridge import DECODABLE_FORMATS
from .reader import read_container
from .records import ContainerRecord, TextureRecord

__all__ = ["inspect_container", "summarize_record", "validate_container"]


def _texture_info(name: str, tex: TextureRecord) -> Dict[str, Any]:
    chains = []
    for chain in tex.chains:
        chains.append(
            [
                {
                    "width": m.width,
                    "height": m.height,
                    "format": m.format.name,
                    "index": m.index,
                    "array_index": m.array_index,
                    "data_size": len(m.data),
                }
                for m in chain
            ]
        )
    base = chains[0][0] if chains and chains[0] else None
    return {
        "name": name,
        "kind": tex.kind.value,
        "mip_count": tex.mip_count,
        "mip_levels": tex.mip_levels,
        "mip_levels_per_face": tex.mip_levels_per_face,
        "array_size": tex.array_size,
        "depth": tex.depth,
        "width": base["width"] if base else None,
        "height": base["height"] if base else None,
        "format": base["format"] if base else None,
        "decodable": bool(base)
        and tex.chains[0][0].format in DECODABLE_FORMATS,
        "chains": chains,
    }


def summarize_record(record: ContainerRecord) -> Dict[str, Any]:
    names = record.texture_names
    textures = [
        _texture_info(names[i] if i < len(names) else "", tex)
        for i, tex in enumerate(record.textures)
    ]
    sprites = []
    for i, spr in enumerate(record.sprites):
        ti = spr.texture_index
        sprites.append(
            {
                "name": (
                    record.sprite_names[i]
                    if i < len(record.sprite_names)
                    else ""
                ),
                "texture_index": ti,
                "texture_name": names[ti] if 0 <= ti < len(names) else None,
                "rotate": spr.rotate,
                "texel_region": list(spr.texel_region),
                "pixel_region": list(spr.pixel_region),
                "screen_mode": (
                    record.sprite_extras[i][1].name
                    if i < len(record.sprite_extras)
                    else None
                ),
            }
        )
    return {
        "flags": record.flags,
        "texture_set_count": record.texture_set_count,
        "sprite_count": record.sprite_count,
        "textures": textures,
        "sprites": sprites,
    }


def inspect_container(stream: BinaryIO) -> Dict[str, Any]:
    return summarize_record(read_container(stream))


def validate_container(info: Dict[str, Any]) -> List[str]:
    issues: List[str] = []
    textures = info["textures"]
    if info["texture_set_count"] != len(textures):
        issues.append(
            f"Texture count mismatch: header={info['texture_set_count']} "
            f"set={len(textures)}"
        )
    for i, t in enumerate(textures):
        if not t["name"]:
            issues.append(f"Texture {i} has no embedded name")
        if t["width"] is None:
            issues.append(f"Texture {i} has no mip level 0")
        elif not t["decodable"]:
            issues.append(f"Texture {i} format {t['format']} is not decodable")
    for i, s in enumerate(info["sprites"]):
        if not s["name"]:
            issues.append(f"Sprite {i} has no embedded name")
        if s["texture_name"] is None or s["texture_index"] >= len(textures):
            issues.append(
                f"Sprite {i} texture index {s['texture_index']} out of range"
            )
    return issues
