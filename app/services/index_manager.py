"""
Ordered id index for one entity type.

The index is a single JSON list stored under ``index:<name>``. It keeps
insertion order and never holds an id twice. Listing is paginated with an
opaque cursor that encodes the resume offset.
"""
import base64
import binascii
from dataclasses import dataclass
from typing import Iterable, List, Optional

from app.core.errors import InvalidArgument
from app.services.record_store import LockTable
from app.services.storage import KeyValueStorage


@dataclass
class IdPage:
    ids: List[str]
    next: Optional[str] = None


def encode_cursor(offset: int) -> str:
    return base64.urlsafe_b64encode(f"o:{offset}".encode()).decode().rstrip("=")


def decode_cursor(cursor: Optional[str]) -> int:
    if not cursor:
        return 0
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        raw = base64.urlsafe_b64decode(padded.encode()).decode()
        prefix, _, offset = raw.partition(":")
        if prefix != "o":
            raise ValueError(raw)
        value = int(offset)
    except (ValueError, UnicodeDecodeError, binascii.Error):
        raise InvalidArgument(f"malformed cursor '{cursor}'")
    if value < 0:
        raise InvalidArgument(f"malformed cursor '{cursor}'")
    return value


class IndexManager:
    def __init__(self, storage: KeyValueStorage, index_name: str, locks: LockTable):
        self.storage = storage
        self.index_name = index_name
        self.locks = locks

    @property
    def key(self) -> str:
        return f"index:{self.index_name}"

    async def _load(self) -> List[str]:
        return list(await self.storage.get(self.key) or [])

    async def list_ids(self, cursor: Optional[str] = None, limit: int = 10) -> IdPage:
        limit = max(1, int(limit))
        start = decode_cursor(cursor)
        ids = await self._load()
        end = start + limit
        page = ids[start:end]
        return IdPage(ids=page, next=encode_cursor(end) if end < len(ids) else None)

    async def add(self, entity_id: str) -> bool:
        """Appends the id. Returns False (no-op) if it is already indexed."""
        return bool(await self.add_many([entity_id]))

    async def add_many(self, entity_ids: Iterable[str]) -> List[str]:
        async with self.locks.lock(self.key):
            ids = await self._load()
            present = set(ids)
            added = []
            for entity_id in entity_ids:
                if entity_id in present:
                    continue
                present.add(entity_id)
                ids.append(entity_id)
                added.append(entity_id)
            if added:
                await self.storage.put(self.key, ids)
            return added

    async def remove(self, entity_id: str) -> bool:
        async with self.locks.lock(self.key):
            ids = await self._load()
            if entity_id not in ids:
                return False
            ids.remove(entity_id)
            await self.storage.put(self.key, ids)
            return True

    async def size(self) -> int:
        return len(await self._load())
