"""UUID remapping for session import.

Imported records get fresh identifiers so they cannot collide with sessions
already on disk. The same original UUID always maps to the same new UUID
within one remapper, which keeps parentUuid links intact.
"""

import dataclasses
import uuid
from typing import Optional

from .core import Record


class UUIDRemapper:
    """Maps original UUIDs to new UUIDs, consistently, for one import."""

    def __init__(self):
        self._map: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._map)

    def remap(self, original: Optional[str]) -> Optional[str]:
        """Return the new UUID for original, generating it on first sight."""
        if original is None:
            return None

        new = self._map.get(original)
        if new is None:
            new = str(uuid.uuid4())
            self._map[original] = new
        return new

    def remap_message(self, record: Record) -> Record:
        """Return a copy of record with uuid, sessionId and parentUuid remapped."""
        return dataclasses.replace(
            record,
            uuid=self.remap(record.uuid),
            session_id=self.remap(record.session_id),
            parent_uuid=self.remap(record.parent_uuid),
        )


def remap_session(records: list[Record]) -> list[Record]:
    """Remap every record of a session through one shared remapper."""
    remapper = UUIDRemapper()
    return [remapper.remap_message(record) for record in records]
