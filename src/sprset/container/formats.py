"""Texture format table.

Maps the container's 32-bit pixel format codes to DXGI formats used by the
staging texture, and back. The mapping is intentionally lossy: DXT1a folds
into BC1 and DXT3 maps to the sRGB flavour of BC2, so a read/write cycle may
change the stored code.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from .errors import structural_error, unsupported_format

__all__ = [
    "TextureFormat",
    "DxgiFormat",
    "to_dxgi",
    "from_dxgi",
    "parse_texture_format",
    "is_block_compressed",
    "surface_size",
    "mip_chain_size",
]


class TextureFormat(IntEnum):
    A8 = 0
    RGB8 = 1
    RGBA8 = 2
    RGB5 = 3
    RGB5A1 = 4
    RGBA4 = 5
    DXT1 = 6
    DXT1a = 7
    DXT3 = 8
    DXT5 = 9
    ATI1 = 10
    ATI2 = 11
    L8 = 12
    L8A8 = 13
    BC7 = 15
    BC6H = 127
    # -1 stored as an unsigned 32-bit code.
    UNKNOWN = 0xFFFFFFFF


class DxgiFormat(IntEnum):
    UNKNOWN = 0
    R8G8B8A8_UNORM = 28
    R8_UNORM = 61
    A8_UNORM = 65
    BC1_UNORM = 71
    BC2_UNORM = 74
    BC2_UNORM_SRGB = 75
    BC3_UNORM = 77
    BC4_UNORM = 80
    BC5_UNORM = 83
    BC6H_UF16 = 95
    BC7_UNORM = 98
    A8P8 = 114


_TO_DXGI: Dict[TextureFormat, DxgiFormat] = {
    TextureFormat.A8: DxgiFormat.R8_UNORM,
    TextureFormat.RGBA8: DxgiFormat.R8G8B8A8_UNORM,
    TextureFormat.DXT1: DxgiFormat.BC1_UNORM,
    TextureFormat.DXT1a: DxgiFormat.BC1_UNORM,
    TextureFormat.DXT3: DxgiFormat.BC2_UNORM_SRGB,
    TextureFormat.DXT5: DxgiFormat.BC3_UNORM,
    TextureFormat.ATI1: DxgiFormat.BC4_UNORM,
    TextureFormat.ATI2: DxgiFormat.BC5_UNORM,
    TextureFormat.L8: DxgiFormat.A8_UNORM,
    TextureFormat.L8A8: DxgiFormat.A8P8,
    TextureFormat.BC7: DxgiFormat.BC7_UNORM,
    TextureFormat.BC6H: DxgiFormat.BC6H_UF16,
}

_FROM_DXGI: Dict[DxgiFormat, TextureFormat] = {
    DxgiFormat.R8_UNORM: TextureFormat.A8,
    DxgiFormat.R8G8B8A8_UNORM: TextureFormat.RGBA8,
    DxgiFormat.BC1_UNORM: TextureFormat.DXT1,
    DxgiFormat.BC2_UNORM_SRGB: TextureFormat.DXT3,
    DxgiFormat.BC3_UNORM: TextureFormat.DXT5,
    DxgiFormat.BC4_UNORM: TextureFormat.ATI1,
    DxgiFormat.BC5_UNORM: TextureFormat.ATI2,
    DxgiFormat.A8_UNORM: TextureFormat.L8,
    DxgiFormat.A8P8: TextureFormat.L8A8,
    DxgiFormat.BC7_UNORM: TextureFormat.BC7,
}

# Bytes per 4x4 block.
_BLOCK_BYTES: Dict[DxgiFormat, int] = {
    DxgiFormat.BC1_UNORM: 8,
    DxgiFormat.BC2_UNORM: 16,
    DxgiFormat.BC2_UNORM_SRGB: 16,
    DxgiFormat.BC3_UNORM: 16,
    DxgiFormat.BC4_UNORM: 8,
    DxgiFormat.BC5_UNORM: 16,
    DxgiFormat.BC6H_UF16: 16,
    DxgiFormat.BC7_UNORM: 16,
}

_PIXEL_BYTES: Dict[DxgiFormat, int] = {
    DxgiFormat.R8G8B8A8_UNORM: 4,
    DxgiFormat.R8_UNORM: 1,
    DxgiFormat.A8_UNORM: 1,
    DxgiFormat.A8P8: 2,
}


def to_dxgi(fmt: TextureFormat) -> DxgiFormat:
    return _TO_DXGI.get(fmt, DxgiFormat.UNKNOWN)


def from_dxgi(fmt: DxgiFormat) -> TextureFormat:
    return _FROM_DXGI.get(fmt, TextureFormat.UNKNOWN)


def parse_texture_format(raw: int) -> TextureFormat:
    try:
        return TextureFormat(raw)
    except ValueError:
        raise structural_error(
            f"Unknown texture format code {raw}", {"code": raw}
        ) from None


def is_block_compressed(fmt: DxgiFormat) -> bool:
    return fmt in _BLOCK_BYTES


def surface_size(fmt: DxgiFormat, width: int, height: int) -> int:
    """Byte size of one tightly packed surface of ``width`` x ``height``."""
    if fmt in _BLOCK_BYTES:
        blocks_w = max(1, (width + 3) // 4)
        blocks_h = max(1, (height + 3) // 4)
        return blocks_w * blocks_h * _BLOCK_BYTES[fmt]
    if fmt in _PIXEL_BYTES:
        return width * height * _PIXEL_BYTES[fmt]
    raise unsupported_format(fmt.name)


def mip_chain_size(
    fmt: DxgiFormat, width: int, height: int, mip_levels: int
) -> int:
    total = 0
    for level in range(max(1, mip_levels)):
        total += surface_size(
            fmt, max(1, width >> level), max(1, height >> level)
        )
    return total
