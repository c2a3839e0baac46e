"""
Key/value storage capability used by the entity store.

The store only needs four primitives: get, put, delete and list-keys by
prefix. Values are JSON-compatible (dicts, lists, scalars). Two backends
are provided: an in-process dict (default, used by the tests) and a
Supabase table with ``key text primary key, value jsonb`` columns.
"""
import asyncio
import copy
from typing import Any, Dict, List, Optional

from supabase import create_async_client, AsyncClient

from app.core.config import Settings, settings as default_settings
from app.core.errors import StorageError, InvalidArgument
from app.core.logger import logger


class KeyValueStorage:
    """Interface of the storage handle threaded through every entity store."""

    async def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    async def put(self, key: str, value: Any) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> bool:
        raise NotImplementedError

    async def list_keys(self, prefix: str) -> List[str]:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self):
        self._data: Dict[str, Any] = {}

    async def get(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def list_keys(self, prefix: str) -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


class SupabaseStorage(KeyValueStorage):
    def __init__(self, url: str, key: str, table: str = "kv_store", client: AsyncClient = None):
        self._url = url
        self._key = key
        self._table = table
        self._client = client
        self._client_lock = asyncio.Lock()

    async def get_client(self) -> AsyncClient:
        if self._client:
            return self._client
        async with self._client_lock:
            if not self._client:
                if not self._url or not self._key:
                    logger.error("❌ Supabase credentials missing (SUPABASE_URL / SUPABASE_KEY)")
                    raise StorageError("Supabase credentials missing")
                try:
                    self._client = await create_async_client(self._url, self._key)
                    logger.info("✅ Supabase Async client initialized")
                except Exception as e:
                    logger.error(f"❌ Failed to initialize Supabase Async: {e}")
                    raise StorageError(f"Failed to initialize Supabase: {e}") from e
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        client = await self.get_client()
        try:
            response = await client.table(self._table).select("value").eq("key", key).limit(1).execute()
        except Exception as e:
            logger.error(f"❌ DB Error (get {key}): {e}")
            raise StorageError(f"get failed for {key}") from e
        if response.data:
            return response.data[0]["value"]
        return None

    async def put(self, key: str, value: Any) -> None:
        client = await self.get_client()
        try:
            await client.table(self._table).upsert({"key": key, "value": value}).execute()
        except Exception as e:
            logger.error(f"❌ DB Error (put {key}): {e}")
            raise StorageError(f"put failed for {key}") from e

    async def delete(self, key: str) -> bool:
        client = await self.get_client()
        try:
            response = await client.table(self._table).delete().eq("key", key).execute()
        except Exception as e:
            logger.error(f"❌ DB Error (delete {key}): {e}")
            raise StorageError(f"delete failed for {key}") from e
        return bool(response.data)

    async def list_keys(self, prefix: str) -> List[str]:
        client = await self.get_client()
        try:
            response = await client.table(self._table)\
                .select("key")\
                .like("key", f"{prefix}%")\
                .order("key", desc=False)\
                .execute()
        except Exception as e:
            logger.error(f"❌ DB Error (list_keys {prefix}): {e}")
            raise StorageError(f"list_keys failed for {prefix}") from e
        return [row["key"] for row in response.data or []]


def build_storage(settings: Settings = default_settings) -> KeyValueStorage:
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        logger.info("🗄️ Using in-memory storage")
        return MemoryStorage()
    if backend == "supabase":
        logger.info(f"🗄️ Using Supabase storage (table '{settings.SUPABASE_TABLE}')")
        return SupabaseStorage(settings.SUPABASE_URL, settings.SUPABASE_KEY, settings.SUPABASE_TABLE)
    raise InvalidArgument(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}'")
