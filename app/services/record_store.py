"""
Per-id record storage for one entity type.

Every record lives under its own storage key (``<entity>:<id>``). Reads and
writes touch exactly one key. Read-modify-write cycles on the same key are
serialized through a ``LockTable`` shared by all stores that use the same
storage handle; different keys never wait on each other.
"""
import asyncio
import copy
import weakref
from typing import Any, Callable, Dict

from app.core.errors import NotFound, Conflict, InvalidArgument
from app.services.storage import KeyValueStorage


class LockTable:
    """One asyncio.Lock per key, created on demand and dropped once unused."""

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


class RecordStore:
    def __init__(self, storage: KeyValueStorage, entity_name: str, initial_state: Dict[str, Any], locks: LockTable):
        self.storage = storage
        self.entity_name = entity_name
        self.initial_state = initial_state
        self.locks = locks

    def key(self, entity_id: str) -> str:
        if not entity_id:
            raise InvalidArgument(f"{self.entity_name} id must not be empty")
        return f"{self.entity_name}:{entity_id}"

    def default_state(self, entity_id: str) -> Dict[str, Any]:
        state = copy.deepcopy(self.initial_state)
        state["id"] = entity_id
        return state

    async def get(self, entity_id: str) -> Dict[str, Any]:
        value = await self.storage.get(self.key(entity_id))
        if value is None:
            raise NotFound(f"{self.entity_name} '{entity_id}' not found")
        return value

    async def get_or_default(self, entity_id: str) -> Dict[str, Any]:
        value = await self.storage.get(self.key(entity_id))
        return value if value is not None else self.default_state(entity_id)

    async def exists(self, entity_id: str) -> bool:
        return await self.storage.get(self.key(entity_id)) is not None

    async def put(self, entity_id: str, value: Dict[str, Any]) -> None:
        await self.storage.put(self.key(entity_id), value)

    async def insert(self, entity_id: str, value: Dict[str, Any]) -> Dict[str, Any]:
        """Put-if-absent. Raises Conflict and leaves the stored record alone if the id is taken."""
        key = self.key(entity_id)
        async with self.locks.lock(key):
            if await self.storage.get(key) is not None:
                raise Conflict(f"{self.entity_name} '{entity_id}' already exists")
            await self.storage.put(key, value)
        return value

    async def mutate(self, entity_id: str, fn: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Dict[str, Any]:
        """Atomic read-modify-write. Starts from the initial state when the record is absent."""
        key = self.key(entity_id)
        async with self.locks.lock(key):
            current = await self.storage.get(key)
            if current is None:
                current = self.default_state(entity_id)
            updated = fn(current)
            await self.storage.put(key, updated)
            return updated

    async def update(self, entity_id: str, fn: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Dict[str, Any]:
        """Like mutate, but the record must already exist."""
        key = self.key(entity_id)
        async with self.locks.lock(key):
            current = await self.storage.get(key)
            if current is None:
                raise NotFound(f"{self.entity_name} '{entity_id}' not found")
            updated = fn(current)
            await self.storage.put(key, updated)
            return updated

    async def delete(self, entity_id: str) -> bool:
        key = self.key(entity_id)
        async with self.locks.lock(key):
            return await self.storage.delete(key)
