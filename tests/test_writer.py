import io
import struct

import pytest
from PIL import Image

from container_builder import header
from sprset.container.constants import (
    HEADER_SIZE,
    MIP_LEVEL_HEADER_SIZE,
    POINTER_SIZE,
    SPRITE_EXTRA_SIZE,
    SPRITE_RECORD_SIZE,
    TEXTURE_ENTRY_HEADER_SIZE,
    TEXTURE_SET_HEADER_SIZE,
)
from sprset.container.errors import MissingDataError, NameEncodingError
from sprset.container.formats import TextureFormat
from sprset.container.inspector import inspect_container
from sprset.container.reader import read_container
from sprset.container.records import ScreenMode, TextureKind, Vec4
from sprset.model import Sprite, SpriteSet


def _sprite_set() -> SpriteSet:
    return SpriteSet(
        name="SPR_TEST",
        flags=0x55,
        textures={
            "B": Image.new("RGBA", (4, 2), (0, 0, 255, 255)),
            "A": Image.new("RGBA", (8, 8), (255, 0, 0, 128)),
        },
        sprites={
            "s2": Sprite(
                "B",
                pixel_region=Vec4(0, 0, 4, 2),
                texel_region=Vec4(0, 0, 1, 1),
                rotate=1,
                screen_mode=ScreenMode.WVGA,
            ),
            "s1": Sprite("A", pixel_region=Vec4(2, 2, 4, 4)),
        },
    )


def _write(sprset: SpriteSet) -> bytes:
    buf = io.BytesIO()
    written = sprset.to_writer(buf)
    data = buf.getvalue()
    assert written == len(data)
    return data


def test_entries_are_sorted_by_name():
    data = _write(_sprite_set())
    record = read_container(io.BytesIO(data))
    assert record.flags == 0x55
    assert record.texture_names == ["A", "B"]
    assert record.sprite_names == ["s1", "s2"]
    assert [s.texture_index for s in record.sprites] == [0, 1]
    s2 = record.sprites[1]
    assert s2.rotate == 1
    assert s2.pixel_region == Vec4(0, 0, 4, 2)
    assert record.sprite_extras[0] == (0, ScreenMode.CUSTOM)
    assert record.sprite_extras[1] == (0, ScreenMode.WVGA)


def test_textures_written_as_rgba8_planes():
    data = _write(_sprite_set())
    record = read_container(io.BytesIO(data))
    a, b = record.textures
    for tex in (a, b):
        assert tex.kind is TextureKind.PLANE
        assert (tex.mip_count, tex.mip_levels, tex.array_size) == (1, 1, 1)
        assert tex.depth == 8
    mip = a.base_level()
    assert mip.format is TextureFormat.RGBA8
    assert (mip.width, mip.height) == (8, 8)
    assert len(mip.data) == 8 * 8 * 4
    assert mip.data[:4] == bytes([255, 0, 0, 128])
    assert len(b.base_level().data) == 4 * 2 * 4


def test_all_pointers_are_patched():
    data = _write(_sprite_set())
    flags, tex_set, tex_count, spr_count, *pointers = header(data)
    assert tex_set == 32
    assert (tex_count, spr_count) == (2, 2)
    assert all(p > tex_set for p in pointers)
    # texture pointers are set-relative and land on entry magics
    for i in range(tex_count):
        rel = struct.unpack_from("<I", data, tex_set + 12 + 4 * i)[0]
        assert data[tex_set + rel : tex_set + rel + 4] == b"TXP\x04"
    # name pointers are absolute
    names_ptr = pointers[1]
    first = struct.unpack_from("<I", data, names_ptr)[0]
    assert data[first : first + 2] == b"A\x00"


def test_empty_sprite_set():
    data = _write(SpriteSet())
    info = inspect_container(io.BytesIO(data))
    assert info["textures"] == []
    assert info["sprites"] == []


def test_nul_in_name_fails():
    sprset = SpriteSet(textures={"bad\x00name": Image.new("RGBA", (1, 1))})
    buf = io.BytesIO()
    with pytest.raises(NameEncodingError):
        sprset.to_writer(buf)
    assert buf.getvalue() == b""


def test_unencodable_name_fails():
    sprset = SpriteSet(
        textures={"T": Image.new("RGBA", (1, 1))},
        sprites={"\ud800": Sprite("T")},
    )
    with pytest.raises(NameEncodingError):
        sprset.to_writer(io.BytesIO())


def test_missing_texture_reference_fails():
    sprset = SpriteSet(
        textures={"T": Image.new("RGBA", (1, 1))},
        sprites={"s": Sprite("GONE")},
    )
    buf = io.BytesIO()
    with pytest.raises(MissingDataError):
        sprset.to_writer(buf)
    assert buf.getvalue() == b""


def test_layout_uses_fixed_record_sizes():
    data = _write(_sprite_set())
    _, tex_set, tex_count, spr_count, sprites, tex_names, _, extras = header(
        data
    )
    assert tex_set == HEADER_SIZE
    assert tex_names - sprites == SPRITE_RECORD_SIZE * spr_count
    assert len(data) - extras == SPRITE_EXTRA_SIZE * spr_count

    table = tex_set + TEXTURE_SET_HEADER_SIZE
    entry = tex_set + struct.unpack_from("<I", data, table)[0]
    second = tex_set + struct.unpack_from("<I", data, table + POINTER_SIZE)[0]
    mip_rel = struct.unpack_from("<I", data, entry + TEXTURE_ENTRY_HEADER_SIZE)[0]
    assert mip_rel == TEXTURE_ENTRY_HEADER_SIZE + POINTER_SIZE
    mip = entry + mip_rel
    assert data[mip : mip + 4] == b"TXP\x02"
    payload = struct.unpack_from("<I", data, mip + MIP_LEVEL_HEADER_SIZE - 4)[0]
    # texture "A" is 8x8 RGBA8 and the next entry follows its payload
    assert payload == 8 * 8 * 4
    assert second == mip + MIP_LEVEL_HEADER_SIZE + payload
