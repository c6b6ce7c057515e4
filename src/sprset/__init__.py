"""Read, edit and write sprite set containers."""

from .api import (
    extract_sprset,
    inspect_sprset,
    parse,
    read_from_bytes,
    read_sprset,
    save_to_bytes,
    save_to_file,
    serialize,
    validate_sprset,
)
from .container.errors import (
    DatabaseError,
    MissingDataError,
    NameEncodingError,
    SprError,
    SprIOError,
    StructuralError,
    UnsupportedFormatError,
)
from .container.records import ScreenMode, Vec4
from .database import (
    SpriteDatabase,
    SpriteDatabaseSet,
    load_database,
    parse_database,
)
from .diff import diff_sprsets, diff_summaries
from .model import Sprite, SpriteSet, load_sprite_image

__version__ = "0.1.0"

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
    "SprError",
    "SprIOError",
    "StructuralError",
    "MissingDataError",
    "UnsupportedFormatError",
    "NameEncodingError",
    "DatabaseError",
    "ScreenMode",
    "Vec4",
    "SpriteDatabase",
    "SpriteDatabaseSet",
    "load_database",
    "parse_database",
    "diff_sprsets",
    "diff_summaries",
    "Sprite",
    "SpriteSet",
    "load_sprite_image",
]
