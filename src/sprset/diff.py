"""Structured diff of two sprite set containers.

Works on inspection summaries (see ``container.inspector``) so no pixel data
is decoded. Entries are matched by name; containers written by this package
are name-sorted, so index order is not compared.

Result shape::

    {
      "flags": {"left": .., "right": ..} | None,
      "textures": {"added": [...], "removed": [...], "changed": [...]},
      "sprites":  {"added": [...], "removed": [...], "changed": [...]},
      "summary": {"count": N},
    }
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List

from .container.inspector import inspect_container

__all__ = ["diff_summaries", "diff_sprsets"]

_TEXTURE_FIELDS = ("kind", "width", "height", "format", "array_size")
_SPRITE_FIELDS = (
    "texture_name",
    "rotate",
    "texel_region",
    "pixel_region",
    "screen_mode",
)


def _by_name(entries: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return {e["name"]: e for e in entries}


def _diff_entries(
    left: List[Dict[str, Any]],
    right: List[Dict[str, Any]],
    fields: Iterable[str],
) -> Dict[str, Any]:
    lmap, rmap = _by_name(left), _by_name(right)
    changed = []
    for name in sorted(lmap.keys() & rmap.keys()):
        for f in fields:
            lv, rv = lmap[name].get(f), rmap[name].get(f)
            if lv != rv:
                changed.append(
                    {"name": name, "field": f, "left": lv, "right": rv}
                )
    return {
        "added": sorted(rmap.keys() - lmap.keys()),
        "removed": sorted(lmap.keys() - rmap.keys()),
        "changed": changed,
    }


def diff_summaries(
    left: Dict[str, Any], right: Dict[str, Any]
) -> Dict[str, Any]:
    textures = _diff_entries(
        left["textures"], right["textures"], _TEXTURE_FIELDS
    )
    sprites = _diff_entries(left["sprites"], right["sprites"], _SPRITE_FIELDS)
    flags = None
    if left["flags"] != right["flags"]:
        flags = {"left": left["flags"], "right": right["flags"]}
    count = (flags is not None) + sum(
        len(part[k])
        for part in (textures, sprites)
        for k in ("added", "removed", "changed")
    )
    return {
        "flags": flags,
        "textures": textures,
        "sprites": sprites,
        "summary": {"count": count},
    }


def diff_sprsets(left: str | Path, right: str | Path) -> Dict[str, Any]:
    with open(left, "rb") as lf, open(right, "rb") as rf:
        return diff_summaries(inspect_container(lf), inspect_container(rf))
