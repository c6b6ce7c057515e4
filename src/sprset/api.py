"""High-level API for sprite set containers.

``parse`` and ``serialize`` are the stream-level entry points; the path
helpers mirror them for files and look up the auxiliary database set by the
container's file name. Stream failures surface as :class:`SprIOError`.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from .container.errors import io_error
from .container.inspector import inspect_container, validate_container
from .database import SpriteDatabase, SpriteDatabaseSet
from .logging import get_logger
from .model import SpriteSet
from .reporting import get_reporter, task

__all__ = [
    "parse",
    "serialize",
    "read_sprset",
    "read_from_bytes",
    "save_to_bytes",
    "save_to_file",
    "inspect_sprset",
    "validate_sprset",
    "extract_sprset",
]


def parse(
    stream: BinaryIO, db_set: Optional[SpriteDatabaseSet] = None
) -> SpriteSet:
    with task("sprset.read", "Read sprite set") as final:
        try:
            sprset = SpriteSet.from_reader(stream, db_set)
        except OSError as e:
            raise io_error(f"Failed to read container: {e}") from e
        final.update(textures=len(sprset.textures), sprites=len(sprset.sprites))
    return sprset


def serialize(sprite_set: SpriteSet, stream: BinaryIO) -> int:
    with task("sprset.write", "Write sprite set") as final:
        try:
            written = sprite_set.to_writer(stream)
        except OSError as e:
            raise io_error(f"Failed to write container: {e}") from e
        final.update(
            textures=len(sprite_set.textures),
            sprites=len(sprite_set.sprites),
            bytes=written,
        )
    return written


def read_sprset(
    path: str | Path, database: Optional[SpriteDatabase] = None
) -> SpriteSet:
    p = Path(path)
    db_set = database.find_set(p.name) if database is not None else None
    if database is not None and db_set is None:
        get_logger().warning("No database set for %s", p.name)
    try:
        f = p.open("rb")
    except OSError as e:
        raise io_error(f"Cannot open {p}: {e}", {"path": str(p)}) from e
    with f:
        return parse(f, db_set)


def read_from_bytes(
    data: bytes, db_set: Optional[SpriteDatabaseSet] = None
) -> SpriteSet:
    return parse(io.BytesIO(data), db_set)


def save_to_bytes(sprite_set: SpriteSet) -> bytes:
    buf = io.BytesIO()
    serialize(sprite_set, buf)
    return buf.getvalue()


def save_to_file(sprite_set: SpriteSet, path: str | Path) -> int:
    # serialize fully before touching the destination
    data = save_to_bytes(sprite_set)
    p = Path(path)
    try:
        p.write_bytes(data)
    except OSError as e:
        raise io_error(f"Cannot write {p}: {e}", {"path": str(p)}) from e
    get_logger().info("Wrote %s (%d bytes)", p.name, len(data))
    return len(data)


def inspect_sprset(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    try:
        with p.open("rb") as f:
            info = inspect_container(f)
    except OSError as e:
        raise io_error(f"Cannot read {p}: {e}", {"path": str(p)}) from e
    info["file_size"] = p.stat().st_size
    return info


def validate_sprset(path: str | Path) -> List[str]:
    return validate_container(inspect_sprset(path))


def extract_sprset(
    sprite_set: SpriteSet, out_dir: str | Path, *, sprites: bool = False
) -> List[Path]:
    """Write every texture (and optionally every sprite) as PNG."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    rep = get_reporter()
    written: List[Path] = []
    names = sprite_set.sorted_texture_names()
    with task("sprset.extract.textures", "Textures", total=len(names)):
        for name in names:
            target = out / f"{name}.png"
            sprite_set.textures[name].save(target)
            written.append(target)
            rep.advance("sprset.extract.textures", current_item=name)
    if sprites:
        sprite_dir = out / "sprites"
        sprite_dir.mkdir(exist_ok=True)
        names = sprite_set.sorted_sprite_names()
        with task("sprset.extract.sprites", "Sprites", total=len(names)):
            for name in names:
                image = sprite_set.sprite_image(name)
                if image.width == 0 or image.height == 0:
                    get_logger().warning("Skipping empty sprite %s", name)
                    continue
                target = sprite_dir / f"{name}.png"
                image.save(target)
                written.append(target)
                rep.advance("sprset.extract.sprites", current_item=name)
    return written
