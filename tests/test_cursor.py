import io
import struct

import pytest

from sprset.container.cursor import PatchWriter, PointerReader
from sprset.container.errors import E_INTERNAL, SprError, StructuralError


def test_follow_restores_sibling_cursor():
    # pointer at 0 -> string at 8, sibling u32 at 4
    data = struct.pack("<II", 8, 0xCAFE) + b"abc\x00"
    r = PointerReader(io.BytesIO(data))
    assert r.follow(lambda: r.cstring(), 0, "name") == "abc"
    assert r.position() == 4
    assert r.u32() == 0xCAFE


def test_follow_applies_base():
    data = b"XXXX" + struct.pack("<I", 8) + b"...." + b"hi\x00"
    r = PointerReader(io.BytesIO(data))
    r.seek(4)
    assert r.follow(lambda: r.cstring(), 4, "name") == "hi"


def test_pointer_past_end_is_structural():
    r = PointerReader(io.BytesIO(struct.pack("<I", 100)))
    with pytest.raises(StructuralError):
        r.follow(lambda: r.u8(), 0, "bad")


def test_short_read_is_structural():
    r = PointerReader(io.BytesIO(b"\x01\x02"))
    with pytest.raises(StructuralError) as ei:
        r.u32("field")
    assert ei.value.code == "E_STRUCT"


def test_unterminated_string():
    r = PointerReader(io.BytesIO(b"abc"))
    with pytest.raises(StructuralError):
        r.cstring()


def test_invalid_utf8_string():
    r = PointerReader(io.BytesIO(b"\xff\xfe\x00"))
    with pytest.raises(StructuralError):
        r.cstring()


def test_magic_mismatch():
    r = PointerReader(io.BytesIO(b"TXP\x09"))
    with pytest.raises(StructuralError):
        r.magic(b"TXP\x03", "texture set")


def test_patch_writes_relative_offset():
    buf = io.BytesIO()
    w = PatchWriter(buf)
    w.write(b"HEAD")
    fix = w.placeholder("target", base=4)
    w.u32(7)
    assert w.patch(fix) == 8
    w.write(b"!")
    values = w.finish()
    assert values == {4: 8}
    data = buf.getvalue()
    assert struct.unpack_from("<I", data, 4)[0] == 8
    assert data[-1:] == b"!"


def test_unpatched_placeholder_fails_finish():
    w = PatchWriter(io.BytesIO())
    w.placeholder("dangling")
    with pytest.raises(SprError) as ei:
        w.finish()
    assert ei.value.code == E_INTERNAL
    assert "dangling" in ei.value.message


def test_double_patch_fails():
    w = PatchWriter(io.BytesIO())
    fix = w.placeholder("once")
    w.patch(fix)
    with pytest.raises(SprError) as ei:
        w.patch(fix)
    assert ei.value.code == E_INTERNAL
