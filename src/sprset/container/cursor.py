"""Stream cursors for file-relative pointers.

``PointerReader`` resolves a pointer field by reading its 32-bit offset,
seeking to ``base + offset``, parsing the target and returning to the
sibling cursor, so the next field is always read 4 bytes after the pointer.

``PatchWriter`` is the write-side counterpart: pointer fields are emitted as
zero placeholders and patched once the target's position is known. Every
placeholder must be patched exactly once before :meth:`PatchWriter.finish`.
"""

from __future__ import annotations

import io
import struct
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, Iterator, Tuple, TypeVar

from .errors import internal_error, structural_error

__all__ = ["PointerReader", "PatchWriter", "Fixup"]

T = TypeVar("T")

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")
_VEC4 = struct.Struct("<4f")


class PointerReader:
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        cur = stream.tell()
        self.size = stream.seek(0, io.SEEK_END)
        stream.seek(cur)

    def position(self) -> int:
        return self.stream.tell()

    def seek(self, offset: int, label: str = "") -> None:
        if offset < 0 or offset > self.size:
            raise structural_error(
                f"Seek out of range for {label or 'field'}: {offset}>{self.size}",
                {"offset": offset, "size": self.size},
            )
        self.stream.seek(offset)

    @contextmanager
    def at(self, offset: int, label: str = "") -> Iterator[None]:
        """Temporarily move the cursor to ``offset``."""
        cur = self.stream.tell()
        self.seek(offset, label)
        try:
            yield
        finally:
            self.stream.seek(cur)

    def read_exact(self, size: int, label: str) -> bytes:
        pos = self.stream.tell()
        data = self.stream.read(size)
        if len(data) != size:
            raise structural_error(
                f"Unexpected end of stream reading {label}: {pos}+{size}>{self.size}",
                {"offset": pos, "size": size},
            )
        return data

    def u8(self, label: str = "u8") -> int:
        return _U8.unpack(self.read_exact(1, label))[0]

    def u16(self, label: str = "u16") -> int:
        return _U16.unpack(self.read_exact(2, label))[0]

    def u32(self, label: str = "u32") -> int:
        return _U32.unpack(self.read_exact(4, label))[0]

    def i32(self, label: str = "i32") -> int:
        return _I32.unpack(self.read_exact(4, label))[0]

    def vec4(self, label: str = "vec4") -> Tuple[float, float, float, float]:
        return _VEC4.unpack(self.read_exact(16, label))

    def magic(self, expected: bytes, label: str) -> None:
        pos = self.stream.tell()
        got = self.read_exact(len(expected), label)
        if got != expected:
            raise structural_error(
                f"Bad magic for {label} at {pos}: {got!r} != {expected!r}",
                {"offset": pos},
            )

    def cstring(self, label: str = "string") -> str:
        """Read a nul-terminated UTF-8 string (terminator consumed)."""
        start = self.stream.tell()
        buf = bytearray()
        while True:
            c = self.stream.read(1)
            if not c:
                raise structural_error(
                    f"Unterminated {label} starting at {start}",
                    {"offset": start},
                )
            if c == b"\x00":
                break
            buf += c
        try:
            return buf.decode("utf-8")
        except UnicodeDecodeError as e:
            raise structural_error(
                f"Malformed text in {label} at {start}: {e}",
                {"offset": start},
            ) from e

    def follow(
        self, parse: Callable[[], T], base: int = 0, label: str = "pointer"
    ) -> T:
        """Resolve a pointer field at the cursor and parse its target."""
        offset = self.u32(label)
        with self.at(base + offset, label):
            return parse()


@dataclass(slots=True)
class Fixup:
    position: int
    label: str
    base: int = 0


class PatchWriter:
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self._pending: Dict[int, Fixup] = {}
        self._patched: Dict[int, int] = {}

    def position(self) -> int:
        return self.stream.tell()

    def write(self, data: bytes) -> None:
        self.stream.write(data)

    def u8(self, value: int) -> None:
        self.stream.write(_U8.pack(value))

    def u16(self, value: int) -> None:
        self.stream.write(_U16.pack(value))

    def u32(self, value: int) -> None:
        self.stream.write(_U32.pack(value))

    def i32(self, value: int) -> None:
        self.stream.write(_I32.pack(value))

    def vec4(self, value) -> None:
        self.stream.write(_VEC4.pack(*value))

    def placeholder(self, label: str, base: int = 0) -> Fixup:
        """Emit a zero pointer to be patched relative to ``base``."""
        fix = Fixup(self.stream.tell(), label, base)
        self._pending[fix.position] = fix
        self.u32(0)
        return fix

    def patch(self, fix: Fixup, target: int | None = None) -> int:
        """Point ``fix`` at ``target`` (default: the current position)."""
        if fix.position in self._patched:
            raise internal_error(
                f"Pointer {fix.label} patched twice", {"offset": fix.position}
            )
        if self._pending.pop(fix.position, None) is None:
            raise internal_error(
                f"Unknown pointer {fix.label}", {"offset": fix.position}
            )
        end = self.stream.tell()
        if target is None:
            target = end
        value = target - fix.base
        if value < 0 or value > 0xFFFFFFFF:
            raise internal_error(
                f"Pointer {fix.label} out of range: {value}",
                {"offset": fix.position},
            )
        self.stream.seek(fix.position)
        self.u32(value)
        self.stream.seek(end)
        self._patched[fix.position] = value
        return value

    def finish(self) -> Dict[int, int]:
        """Check every placeholder was patched; return offset -> value."""
        if self._pending:
            labels = sorted(f.label for f in self._pending.values())
            raise internal_error(
                f"Unpatched pointers: {', '.join(labels)}",
                {"count": len(labels)},
            )
        return dict(self._patched)
