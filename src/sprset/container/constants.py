"""Record tags and fixed sizes of the sprite set container."""

from __future__ import annotations

TEXTURE_SET_MAGIC = b"TXP\x03"
PLANE_TEXTURE_MAGIC = b"TXP\x04"
CUBE_MAP_TEXTURE_MAGIC = b"TXP\x05"
MIP_LEVEL_MAGIC = b"TXP\x02"
MAGIC_SIZE = 4

POINTER_SIZE = 4
HEADER_SIZE = 32
TEXTURE_SET_HEADER_SIZE = 12
TEXTURE_ENTRY_HEADER_SIZE = 12
MIP_LEVEL_HEADER_SIZE = 24
SPRITE_RECORD_SIZE = 40
SPRITE_EXTRA_SIZE = 8

CUBE_FACE_COUNT = 6
# Written when the staging texture does not declare a depth.
DEFAULT_DEPTH = 8

__all__ = [
    "TEXTURE_SET_MAGIC",
    "PLANE_TEXTURE_MAGIC",
    "CUBE_MAP_TEXTURE_MAGIC",
    "MIP_LEVEL_MAGIC",
    "MAGIC_SIZE",
    "POINTER_SIZE",
    "HEADER_SIZE",
    "TEXTURE_SET_HEADER_SIZE",
    "TEXTURE_ENTRY_HEADER_SIZE",
    "MIP_LEVEL_HEADER_SIZE",
    "SPRITE_RECORD_SIZE",
    "SPRITE_EXTRA_SIZE",
    "CUBE_FACE_COUNT",
    "DEFAULT_DEPTH",
]
