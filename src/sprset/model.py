"""In-memory sprite set model."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional

from PIL import Image, UnidentifiedImageError

from .container.bridge import decode_texture
from .container.errors import io_error, missing_data
from .container.reader import read_container
from .container.records import ScreenMode, Vec4
from .container.writer import write_container
from .database import SpriteDatabaseSet
from .logging import get_logger
from .names import NameResolver

__all__ = ["Sprite", "SpriteSet", "load_sprite_image"]


@dataclass(slots=True)
class Sprite:
    texture_name: str
    # x, y, width, height in texture pixels
    pixel_region: Vec4 = Vec4()
    # normalized UV rectangle, preserved verbatim
    texel_region: Vec4 = Vec4()
    rotate: int = 0
    screen_mode: ScreenMode = field(default_factory=ScreenMode.fallback)

    @property
    def x(self) -> float:
        return self.pixel_region.x

    @property
    def y(self) -> float:
        return self.pixel_region.y

    @property
    def width(self) -> float:
        return self.pixel_region.z

    @property
    def height(self) -> float:
        return self.pixel_region.w

    def __repr__(self) -> str:
        return (
            f"Sprite {self.width}x{self.height} in {self.texture_name} "
            f"at {self.x}x{self.y}"
        )


@dataclass
class SpriteSet:
    name: str = ""
    flags: int = 0
    textures: Dict[str, Image.Image] = field(default_factory=dict)
    sprites: Dict[str, Sprite] = field(default_factory=dict)

    @classmethod
    def from_reader(
        cls, stream: BinaryIO, db_set: Optional[SpriteDatabaseSet] = None
    ) -> "SpriteSet":
        """Parse a container; any failure aborts with no partial result."""
        logger = get_logger()
        record = read_container(stream)
        resolver = NameResolver(db_set)
        tex_count = len(record.textures)

        def texture_name(index: int) -> str:
            if index < 0 or index >= len(record.texture_names):
                raise missing_data(
                    f"No texture name at index {index}",
                    {"names": len(record.texture_names)},
                )
            return resolver.texture_name(record.texture_names[index], index)

        textures: Dict[str, Image.Image] = {}
        for i, tex in enumerate(record.textures):
            name = texture_name(i)
            if name in textures:
                logger.warning("duplicate texture name %r (index %d)", name, i)
            textures[name] = decode_texture(tex)
            # payloads are not retained past decode
            tex.chains.clear()

        sprites: Dict[str, Sprite] = {}
        for i, spr in enumerate(record.sprites):
            if i >= len(record.sprite_names) or i >= len(record.sprite_extras):
                raise missing_data(
                    f"Sprite {i} has no name or extra record",
                    {"sprite_count": record.sprite_count},
                )
            name = resolver.sprite_name(record.sprite_names[i], i)
            if spr.texture_index < 0 or spr.texture_index >= tex_count:
                raise missing_data(
                    f"Sprite {name!r} references texture {spr.texture_index}",
                    {"textures": tex_count},
                )
            if name in sprites:
                logger.warning("duplicate sprite name %r (index %d)", name, i)
            sprites[name] = Sprite(
                texture_name=texture_name(spr.texture_index),
                pixel_region=spr.pixel_region,
                texel_region=spr.texel_region,
                rotate=spr.rotate,
                screen_mode=record.sprite_extras[i][1],
            )

        return cls(
            name=resolver.set_name,
            flags=record.flags,
            textures=textures,
            sprites=sprites,
        )

    def to_writer(self, stream: BinaryIO) -> int:
        return write_container(self, stream)

    def sorted_texture_names(self) -> List[str]:
        return sorted(self.textures)

    def sorted_sprite_names(self) -> List[str]:
        return sorted(self.sprites)

    def replace_texture(self, texture_name: str, path: str | Path) -> None:
        """Replace a texture with any image file Pillow can read."""
        if texture_name not in self.textures:
            raise missing_data(
                f"Failed to find texture with name {texture_name}",
                {"texture": texture_name},
            )
        p = Path(path)
        if not p.is_file():
            raise io_error(f"{p} is not a file", {"path": str(p)})
        try:
            with Image.open(p) as img:
                image = img.convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            raise io_error(
                f"Failed to decode image file at {p}", {"path": str(p)}
            ) from e
        self.textures[texture_name] = image

    def sprite_image(self, sprite_name: str) -> Image.Image:
        sprite = self.sprites.get(sprite_name)
        if sprite is None:
            raise missing_data(
                f"Failed to find sprite with name {sprite_name}",
                {"sprite": sprite_name},
            )
        texture = self.textures.get(sprite.texture_name)
        if texture is None:
            raise missing_data(
                f"Sprite {sprite_name} references missing texture "
                f"{sprite.texture_name}",
                {"sprite": sprite_name},
            )
        return load_sprite_image(texture, sprite)

    def __repr__(self) -> str:
        textures = [
            (name, f"{img.width}x{img.height}")
            for name, img in sorted(self.textures.items())
        ]
        sprites = [(n, repr(s)) for n, s in sorted(self.sprites.items())]
        return f"SpriteSet {self.name!r} {textures} {sprites}"


def load_sprite_image(texture: Image.Image, sprite: Sprite) -> Image.Image:
    """Crop ``sprite``'s pixel region out of ``texture``."""
    x, y = int(sprite.x), int(sprite.y)
    return texture.crop((x, y, x + int(sprite.width), y + int(sprite.height)))
