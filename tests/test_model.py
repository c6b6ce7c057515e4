import io

import pytest
from PIL import Image

from container_builder import (
    DB_DOC,
    FMT_DXT1,
    MipDef,
    SpriteDef,
    TextureDef,
    bc1_texture,
    build_container,
    dxt5_texture,
    simple_container,
    solid_bc1,
)
from sprset.api import parse
from sprset.container.errors import MissingDataError, SprIOError
from sprset.container.records import ScreenMode, Vec4
from sprset.database import parse_database
from sprset.model import Sprite, SpriteSet, load_sprite_image


def _db_set():
    return parse_database(DB_DOC).find_set("spr_gam_cmn.bin")


def test_parse_simple():
    sprset = parse(io.BytesIO(simple_container()))
    assert sprset.name == ""
    assert sprset.flags == 0x1234
    assert list(sprset.textures) == ["MAIN"]
    icon = sprset.sprites["ICON"]
    assert icon.texture_name == "MAIN"
    assert icon.screen_mode is ScreenMode.HDTV1080
    assert (icon.x, icon.y, icon.width, icon.height) == (0.0, 0.0, 4.0, 4.0)
    assert sprset.textures["MAIN"].getpixel((0, 0)) == (255, 0, 0, 255)


def test_parse_dxt5_sprite_sheet():
    data = build_container(
        textures=[dxt5_texture(64, 64)],
        sprites=[SpriteDef(0, pixel_region=(0.0, 0.0, 64.0, 64.0))],
        texture_names=["SHEET"],
        sprite_names=["FULL"],
    )
    sprset = parse(io.BytesIO(data))
    assert sprset.textures["SHEET"].size == (64, 64)
    full = sprset.sprites["FULL"]
    assert full.pixel_region.z == 64.0
    assert sprset.sprite_image("FULL").size == (64, 64)


def test_parse_with_database_names():
    data = simple_container(texture_names=[""], sprite_names=[""])
    sprset = parse(io.BytesIO(data), _db_set())
    assert sprset.name == "SPR_GAM_CMN"
    assert list(sprset.textures) == ["MAIN"]
    assert sprset.sprites["ICON"].texture_name == "MAIN"


def test_parse_empty_names_without_database():
    data = simple_container(sprite_names=[""])
    with pytest.raises(MissingDataError):
        parse(io.BytesIO(data))


def test_sprite_texture_index_out_of_range():
    data = simple_container(
        sprites=[SpriteDef(texture_index=3, pixel_region=(0, 0, 1, 1))]
    )
    with pytest.raises(MissingDataError):
        parse(io.BytesIO(data))


def test_more_textures_than_names():
    data = build_container(
        textures=[bc1_texture(), bc1_texture()], texture_names=["ONLY"]
    )
    with pytest.raises(MissingDataError):
        parse(io.BytesIO(data))


def test_sprite_image_crops_pixel_region():
    texture = Image.new("RGBA", (8, 8), (0, 0, 0, 255))
    texture.putpixel((2, 3), (9, 9, 9, 255))
    sprite = Sprite("T", pixel_region=Vec4(2, 3, 4, 2))
    crop = load_sprite_image(texture, sprite)
    assert crop.size == (4, 2)
    assert crop.getpixel((0, 0)) == (9, 9, 9, 255)


def test_sprite_image_unknown_sprite():
    with pytest.raises(MissingDataError):
        SpriteSet().sprite_image("nope")


def test_replace_texture(tmp_path):
    sprset = parse(io.BytesIO(simple_container()))
    png = tmp_path / "new.png"
    Image.new("RGB", (16, 8), (1, 2, 3)).save(png)
    sprset.replace_texture("MAIN", png)
    image = sprset.textures["MAIN"]
    assert image.mode == "RGBA"
    assert image.size == (16, 8)
    assert image.getpixel((0, 0)) == (1, 2, 3, 255)


def test_replace_texture_errors(tmp_path):
    sprset = parse(io.BytesIO(simple_container()))
    png = tmp_path / "new.png"
    Image.new("RGBA", (2, 2)).save(png)
    with pytest.raises(MissingDataError):
        sprset.replace_texture("OTHER", png)
    with pytest.raises(SprIOError):
        sprset.replace_texture("MAIN", tmp_path / "missing.png")
    junk = tmp_path / "junk.png"
    junk.write_bytes(b"not an image")
    with pytest.raises(SprIOError):
        sprset.replace_texture("MAIN", junk)
    # failed replacements keep the decoded texture
    assert sprset.textures["MAIN"].size == (4, 4)


def test_sorted_names_and_repr():
    sprset = SpriteSet(
        name="S",
        textures={"b": Image.new("RGBA", (2, 1)), "a": Image.new("RGBA", (1, 1))},
        sprites={"z": Sprite("a"), "y": Sprite("b")},
    )
    assert sprset.sorted_texture_names() == ["a", "b"]
    assert sprset.sorted_sprite_names() == ["y", "z"]
    assert "('b', '2x1')" in repr(sprset)
    assert repr(Sprite("a", Vec4(1, 2, 3, 4))) == "Sprite 3x4 in a at 1x2"


def test_parse_cube_map_with_two_mips_per_face():
    faces = [
        [
            MipDef(8, 8, FMT_DXT1, solid_bc1(8, 8)),
            MipDef(4, 4, FMT_DXT1, solid_bc1(4, 4)),
        ]
        for _ in range(6)
    ]
    data = build_container(
        textures=[TextureDef(chains=faces, cube=True, mip_levels=12)],
        sprites=[SpriteDef(0, pixel_region=(0.0, 0.0, 8.0, 8.0))],
        texture_names=["SKY"],
        sprite_names=["SKY_FULL"],
    )
    sprset = parse(io.BytesIO(data))
    sky = sprset.textures["SKY"]
    assert sky.size == (8, 8)
    assert sky.tobytes() == bytes([255, 0, 0, 255]) * 64
    assert sprset.sprite_image("SKY_FULL").size == (8, 8)


def test_surplus_texture_names_are_ignored():
    data = simple_container(texture_names=["MAIN", "EXTRA"])
    sprset = parse(io.BytesIO(data))
    assert list(sprset.textures) == ["MAIN"]
    assert sprset.sprites["ICON"].texture_name == "MAIN"
