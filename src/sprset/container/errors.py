"""Error definitions for sprite set containers."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_IO = "E_IO"
E_STRUCT = "E_STRUCT"
E_MISSING_DATA = "E_MISSING_DATA"
E_UNSUPPORTED_FORMAT = "E_UNSUPPORTED_FORMAT"
E_NAME_ENCODING = "E_NAME_ENCODING"
E_DB = "E_DB"
E_INTERNAL = "E_INTERNAL"


@dataclass
class SprError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class SprIOError(SprError):
    pass


class StructuralError(SprError):
    """The byte stream does not follow the container layout."""


class MissingDataError(SprError):
    """Well-formed bytes that violate a content invariant."""


class UnsupportedFormatError(MissingDataError):
    pass


class NameEncodingError(SprError):
    pass


class DatabaseError(SprError):
    pass


def io_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> SprIOError:
    return SprIOError(code=E_IO, message=message, context=context)


def structural_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> StructuralError:
    return StructuralError(code=E_STRUCT, message=message, context=context)


def missing_data(
    message: str, context: Optional[Dict[str, Any]] = None
) -> MissingDataError:
    return MissingDataError(
        code=E_MISSING_DATA, message=message, context=context
    )


def unsupported_format(
    format_name: str, context: Optional[Dict[str, Any]] = None
) -> UnsupportedFormatError:
    ctx = {"format": format_name}
    ctx.update(context or {})
    return UnsupportedFormatError(
        code=E_UNSUPPORTED_FORMAT,
        message=f"No decoder wired for pixel format {format_name}",
        context=ctx,
    )


def name_encoding_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> NameEncodingError:
    return NameEncodingError(
        code=E_NAME_ENCODING, message=message, context=context
    )


def database_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> DatabaseError:
    return DatabaseError(code=E_DB, message=message, context=context)


def internal_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> SprError:
    return SprError(code=E_INTERNAL, message=message, context=context)


__all__ = [
    "SprError",
    "SprIOError",
    "StructuralError",
    "MissingDataError",
    "UnsupportedFormatError",
    "NameEncodingError",
    "DatabaseError",
    "io_error",
    "structural_error",
    "missing_data",
    "unsupported_format",
    "name_encoding_error",
    "database_error",
    "internal_error",
    "E_IO",
    "E_STRUCT",
    "E_MISSING_DATA",
    "E_UNSUPPORTED_FORMAT",
    "E_NAME_ENCODING",
    "E_DB",
    "E_INTERNAL",
]
