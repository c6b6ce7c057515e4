"""Conversion between texture records and decoded RGBA images.

Decoding goes record -> staging texture -> PIL image. Only the BC1, BC3, BC4
and BC5 block formats have a decoder; every other format (including all the
uncompressed ones the format table knows about) raises
:class:`UnsupportedFormatError`. Containers store rows bottom-up, so decoded
images are flipped vertically, and flipped back when encoding.

Encoding never compresses: images are staged as ``R8G8B8A8_UNORM``.
"""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np
import texture2ddecoder
from PIL import Image

from .errors import missing_data, unsupported_format
from .formats import DxgiFormat, TextureFormat, to_dxgi
from .records import TextureKind, TextureRecord
from .staging import StagingTexture

__all__ = [
    "DECODABLE_FORMATS",
    "staging_from_record",
    "decode_staging",
    "decode_texture",
    "staging_from_image",
]

_DECODERS: Dict[DxgiFormat, Callable[[bytes, int, int], bytes]] = {
    DxgiFormat.BC1_UNORM: texture2ddecoder.decode_bc1,
    DxgiFormat.BC3_UNORM: texture2ddecoder.decode_bc3,
    DxgiFormat.BC4_UNORM: texture2ddecoder.decode_bc4,
    DxgiFormat.BC5_UNORM: texture2ddecoder.decode_bc5,
}

DECODABLE_FORMATS = frozenset(
    fmt for fmt in TextureFormat if to_dxgi(fmt) in _DECODERS
)


def staging_from_record(texture: TextureRecord) -> StagingTexture:
    """Stage mip level 0 of every array slice (or face) of ``texture``."""
    base = texture.base_level(0)
    dxgi = to_dxgi(base.format)
    if dxgi is DxgiFormat.UNKNOWN:
        raise unsupported_format(base.format.name)
    staging = StagingTexture.new(
        dxgi,
        base.width,
        base.height,
        depth=texture.depth,
        mip_levels=texture.mip_levels_per_face,
        array_layers=texture.array_size,
        is_cubemap=texture.kind is TextureKind.CUBE_MAP,
    )
    for layer in range(len(texture.chains)):
        staging.set_data(layer, texture.base_level(layer).data)
    return staging


def decode_staging(staging: StagingTexture, layer: int = 0) -> Image.Image:
    """Decompress mip 0 of ``layer`` to a top-down RGBA image."""
    decoder = _DECODERS.get(staging.format)
    if decoder is None:
        raise unsupported_format(staging.format.name)
    width, height = staging.width, staging.height
    raw = decoder(staging.surface(layer, 0), width, height)
    if len(raw) != width * height * 4:
        raise missing_data(
            f"Decoder returned {len(raw)} bytes for {width}x{height}",
            {"format": staging.format.name},
        )
    # texture2ddecoder emits BGRA
    bgra = np.frombuffer(raw, dtype=np.uint8).reshape((height, width, 4))
    rgba = np.flipud(bgra[:, :, [2, 1, 0, 3]])
    return Image.fromarray(np.ascontiguousarray(rgba))


def decode_texture(texture: TextureRecord) -> Image.Image:
    return decode_staging(staging_from_record(texture))


def staging_from_image(image: Image.Image) -> StagingTexture:
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    flipped = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    staging = StagingTexture.new(
        DxgiFormat.R8G8B8A8_UNORM, image.width, image.height
    )
    staging.set_data(0, flipped.tobytes())
    return staging
