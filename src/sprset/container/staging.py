"""DDS-style staging texture.

Holds GPU-layout pixel data between the container records and the public
image representation: a DXGI format, dimensions, and one byte buffer per
array layer (face for cube maps) sized for the layer's whole mip chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import missing_data
from .formats import DxgiFormat, mip_chain_size, surface_size

__all__ = ["StagingTexture"]


@dataclass(slots=True)
class StagingTexture:
    format: DxgiFormat
    width: int
    height: int
    depth: Optional[int] = None
    mip_levels: int = 1
    array_layers: int = 1
    is_cubemap: bool = False
    layers: List[bytearray] = field(default_factory=list)

    @classmethod
    def new(
        cls,
        fmt: DxgiFormat,
        width: int,
        height: int,
        *,
        depth: Optional[int] = None,
        mip_levels: int = 1,
        array_layers: int = 1,
        is_cubemap: bool = False,
    ) -> "StagingTexture":
        if width <= 0 or height <= 0:
            raise missing_data(
                f"Invalid texture dimensions {width}x{height}",
                {"width": width, "height": height},
            )
        mip_levels = max(1, mip_levels)
        array_layers = max(1, array_layers)
        layer_size = mip_chain_size(fmt, width, height, mip_levels)
        return cls(
            format=fmt,
            width=width,
            height=height,
            depth=depth,
            mip_levels=mip_levels,
            array_layers=array_layers,
            is_cubemap=is_cubemap,
            layers=[bytearray(layer_size) for _ in range(array_layers)],
        )

    def _layer(self, layer: int) -> bytearray:
        if layer < 0 or layer >= len(self.layers):
            raise missing_data(
                f"Staging texture has no layer {layer}",
                {"layers": len(self.layers)},
            )
        return self.layers[layer]

    def get_data(self, layer: int = 0) -> bytes:
        return bytes(self._layer(layer))

    def set_data(self, layer: int, payload: bytes) -> None:
        """Copy ``payload`` into the start of ``layer``."""
        dest = self._layer(layer)
        if len(payload) > len(dest):
            raise missing_data(
                f"Payload of {len(payload)} bytes exceeds layer size {len(dest)}",
                {"layer": layer},
            )
        dest[: len(payload)] = payload

    def surface(self, layer: int = 0, mip: int = 0) -> bytes:
        """Bytes of one mip level of one layer."""
        if mip < 0 or mip >= self.mip_levels:
            raise missing_data(
                f"Staging texture has no mip level {mip}",
                {"mip_levels": self.mip_levels},
            )
        data = self._layer(layer)
        offset = 0
        if mip:
            offset = mip_chain_size(self.format, self.width, self.height, mip)
        size = surface_size(
            self.format, max(1, self.width >> mip), max(1, self.height >> mip)
        )
        return bytes(data[offset : offset + size])
