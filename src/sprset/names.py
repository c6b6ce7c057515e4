"""Resolution of stripped texture and sprite names."""

from __future__ import annotations

from typing import Optional

from .container.errors import missing_data
from .database import SpriteDatabaseEntry, SpriteDatabaseSet
from .logging import get_logger

__all__ = ["NameResolver"]


class NameResolver:
    """Fill empty embedded names from a database set.

    Database names carry the set name as a prefix (``SPR_FOO_ICON`` in set
    ``SPR_FOO``); texture names use ``SPRTEX`` in place of ``SPR``. Every
    occurrence of that prefix is removed from the stored name.
    """

    def __init__(self, db_set: Optional[SpriteDatabaseSet] = None):
        self.db_set = db_set
        if db_set is not None:
            self.sprite_prefix = f"{db_set.name}_"
            self.texture_prefix = self.sprite_prefix.replace("SPR", "SPRTEX")
        else:
            self.sprite_prefix = ""
            self.texture_prefix = ""

    @property
    def set_name(self) -> str:
        return self.db_set.name if self.db_set is not None else ""

    def _resolve(
        self,
        kind: str,
        index: int,
        entry: Optional[SpriteDatabaseEntry],
        prefix: str,
    ) -> str:
        if self.db_set is None:
            raise missing_data(
                f"{kind} {index} has no embedded name and no database set",
                {"index": index},
            )
        if entry is None:
            raise missing_data(
                f"{kind} {index} not found in database set {self.db_set.name}",
                {"index": index, "set": self.db_set.name},
            )
        name = entry.name.replace(prefix, "")
        get_logger().debug("resolved %s %d -> %s", kind, index, name)
        return name

    def texture_name(self, embedded: str, index: int) -> str:
        if embedded:
            return embedded
        entry = self.db_set.texture_at(index) if self.db_set else None
        return self._resolve("texture", index, entry, self.texture_prefix)

    def sprite_name(self, embedded: str, index: int) -> str:
        if embedded:
            return embedded
        entry = self.db_set.sprite_at(index) if self.db_set else None
        return self._resolve("sprite", index, entry, self.sprite_prefix)
