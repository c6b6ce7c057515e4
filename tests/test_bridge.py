import io

import pytest
from PIL import Image

from container_builder import (
    BLUE_565,
    FMT_DXT1,
    FMT_RGBA8,
    MipDef,
    RED_565,
    TextureDef,
    bc1_block,
    bc1_texture,
    build_container,
    dxt5_texture,
)
from sprset.container.bridge import (
    decode_staging,
    decode_texture,
    staging_from_image,
    staging_from_record,
)
from sprset.container.errors import MissingDataError, UnsupportedFormatError
from sprset.container.formats import DxgiFormat
from sprset.container.reader import read_container


def _texture(tex: TextureDef):
    data = build_container(textures=[tex], texture_names=["T"])
    return read_container(io.BytesIO(data)).textures[0]


def test_decode_solid_red_bc1():
    image = decode_texture(_texture(bc1_texture(4, 4, RED_565)))
    assert image.size == (4, 4)
    assert image.mode == "RGBA"
    assert len(image.tobytes()) == 4 * 4 * 4
    assert image.tobytes() == bytes([255, 0, 0, 255]) * 16


def test_decode_flips_rows():
    # first stored block row is the bottom of the image
    data = bc1_block(RED_565) + bc1_block(BLUE_565)
    tex = TextureDef(chains=[[MipDef(4, 8, FMT_DXT1, data)]])
    image = decode_texture(_texture(tex))
    assert image.size == (4, 8)
    assert image.getpixel((0, 0)) == (0, 0, 255, 255)
    assert image.getpixel((3, 7)) == (255, 0, 0, 255)


def test_decode_dxt5():
    image = decode_texture(_texture(dxt5_texture(64, 64)))
    assert image.size == (64, 64)
    assert image.getpixel((10, 10)) == (0, 255, 0, 255)


def test_rgba8_is_not_decodable():
    tex = TextureDef(chains=[[MipDef(2, 2, FMT_RGBA8, b"\xff" * 16)]])
    with pytest.raises(UnsupportedFormatError) as ei:
        decode_texture(_texture(tex))
    assert isinstance(ei.value, MissingDataError)
    assert ei.value.context["format"] == "R8G8B8A8_UNORM"


def test_unmapped_format_is_unsupported():
    # RGB5 has no staging format at all
    tex = TextureDef(chains=[[MipDef(2, 2, 3, b"\x00" * 8)]])
    with pytest.raises(UnsupportedFormatError):
        staging_from_record(_texture(tex))


def test_zero_dimensions_are_missing_data():
    tex = TextureDef(chains=[[MipDef(0, 4, FMT_DXT1, b"")]])
    with pytest.raises(MissingDataError):
        staging_from_record(_texture(tex))


def test_oversized_payload_is_missing_data():
    tex = TextureDef(chains=[[MipDef(4, 4, FMT_DXT1, b"\x00" * 16)]])
    with pytest.raises(MissingDataError):
        staging_from_record(_texture(tex))


def test_staging_from_record_copies_payload():
    tex = bc1_texture(4, 4)
    staging = staging_from_record(_texture(tex))
    assert staging.format is DxgiFormat.BC1_UNORM
    assert staging.get_data(0) == tex.chains[0][0].data
    assert decode_staging(staging).size == (4, 4)


def test_staging_from_image_is_bottom_up_rgba8():
    image = Image.new("RGB", (2, 2), (0, 0, 0))
    image.putpixel((0, 0), (10, 20, 30))
    staging = staging_from_image(image)
    assert staging.format is DxgiFormat.R8G8B8A8_UNORM
    assert (staging.width, staging.height) == (2, 2)
    assert staging.mip_levels == 1
    assert staging.array_layers == 1
    data = staging.get_data(0)
    assert len(data) == 16
    # top-left pixel lands in the last stored row
    assert data[8:12] == bytes([10, 20, 30, 255])
    assert data[0:4] == bytes([0, 0, 0, 255])
