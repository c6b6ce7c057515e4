"""Auxiliary sprite name database (JSON/YAML).

Containers shipped with stripped names rely on a companion database giving
each set's human readable sprite and texture names keyed by their declared
index. The database is consumed read-only.

Expected document shape::

    sets:
      - id: 3
        name: SPR_GAM_CMN
        filename: spr_gam_cmn.bin
        textures:
          - {id: 10, name: SPRTEX_GAM_CMN_MAIN, index: 0}
        sprites:
          - {id: 11, name: SPR_GAM_CMN_ICON, index: 0}

``sets``, ``textures`` and ``sprites`` may also be mappings keyed by id.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .container.errors import database_error, io_error

__all__ = [
    "SpriteDatabaseEntry",
    "SpriteDatabaseSet",
    "SpriteDatabase",
    "load_database",
    "parse_database",
]


@dataclass(frozen=True, slots=True)
class SpriteDatabaseEntry:
    id: int
    name: str
    index: int


@dataclass(frozen=True, slots=True)
class SpriteDatabaseSet:
    id: int
    name: str
    filename: str
    textures: Dict[int, SpriteDatabaseEntry] = field(default_factory=dict)
    sprites: Dict[int, SpriteDatabaseEntry] = field(default_factory=dict)

    def texture_at(self, index: int) -> Optional[SpriteDatabaseEntry]:
        return next(
            (e for e in self.textures.values() if e.index == index), None
        )

    def sprite_at(self, index: int) -> Optional[SpriteDatabaseEntry]:
        return next(
            (e for e in self.sprites.values() if e.index == index), None
        )


@dataclass(frozen=True, slots=True)
class SpriteDatabase:
    sets: Dict[int, SpriteDatabaseSet] = field(default_factory=dict)

    def find_set(self, filename: str) -> Optional[SpriteDatabaseSet]:
        """Return the set describing the container called ``filename``."""
        name = Path(filename).name
        return next(
            (s for s in self.sets.values() if s.filename == name), None
        )


def _items(raw: Any, path: str) -> List[Dict[str, Any]]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        out = []
        for key, value in raw.items():
            if not isinstance(value, dict):
                raise database_error(f"{path}[{key}] must be an object")
            out.append({"id": key, **value})
        return out
    if isinstance(raw, list):
        for i, value in enumerate(raw):
            if not isinstance(value, dict):
                raise database_error(f"{path}[{i}] must be an object")
        return raw
    raise database_error(f"'{path}' must be a list or mapping")


def _int(entry: Dict[str, Any], key: str, path: str, default=None) -> int:
    value = entry.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise database_error(
            f"{path}.{key} must be an integer", {"value": value}
        ) from None


def _str(entry: Dict[str, Any], key: str, path: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str):
        raise database_error(f"{path}.{key} must be a string")
    return value


def _parse_entries(raw: Any, path: str) -> Dict[int, SpriteDatabaseEntry]:
    entries: Dict[int, SpriteDatabaseEntry] = {}
    for i, e in enumerate(_items(raw, path)):
        p = f"{path}[{i}]"
        entry_id = _int(e, "id", p, default=i)
        entries[entry_id] = SpriteDatabaseEntry(
            id=entry_id, name=_str(e, "name", p), index=_int(e, "index", p)
        )
    return entries


def parse_database(data: Any) -> SpriteDatabase:
    if not isinstance(data, dict):
        raise database_error("Root of sprite database must be an object")
    sets: Dict[int, SpriteDatabaseSet] = {}
    for i, s in enumerate(_items(data.get("sets"), "sets")):
        p = f"sets[{i}]"
        set_id = _int(s, "id", p, default=i)
        sets[set_id] = SpriteDatabaseSet(
            id=set_id,
            name=_str(s, "name", p),
            filename=_str(s, "filename", p),
            textures=_parse_entries(s.get("textures"), p + ".textures"),
            sprites=_parse_entries(s.get("sprites"), p + ".sprites"),
        )
    return SpriteDatabase(sets=sets)


def load_database(path: str | Path) -> SpriteDatabase:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise io_error(f"Cannot read {p}: {e}", {"path": str(p)}) from e
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise database_error(f"Cannot parse {p.name}: {e}") from e
    return parse_database(data)
