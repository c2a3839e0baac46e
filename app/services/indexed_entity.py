"""
Indexed entity façade.

``indexed_entity()`` composes a RecordStore (point access) and an
IndexManager (enumeration) for one ``EntityDefinition`` and keeps them in
sync on create and delete. Entity types are plain definitions, not
subclasses: the same façade serves users, hosts, bookings and chat boards.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import ValidationError

from app.core.errors import Conflict, InvalidArgument, NotFound
from app.core.logger import logger
from app.models.entities import Page, Record
from app.services.index_manager import IndexManager
from app.services.record_store import LockTable, RecordStore
from app.services.storage import KeyValueStorage

E = TypeVar("E", bound=Record)


@dataclass
class EntityDefinition(Generic[E]):
    entity_name: str
    index_name: str
    model: Type[E]
    initial_state: Dict[str, Any]
    seed_data: List[Dict[str, Any]] = field(default_factory=list)


class IndexedEntity(Generic[E]):
    def __init__(self, definition: EntityDefinition[E], records: RecordStore, index: IndexManager, locks: LockTable):
        self.definition = definition
        self.records = records
        self.index = index
        self.locks = locks

    @property
    def name(self) -> str:
        return self.definition.entity_name

    @property
    def seed_marker_key(self) -> str:
        return f"seeded:{self.definition.entity_name}"

    def validate(self, value: Union[E, Dict[str, Any]]) -> E:
        try:
            if isinstance(value, self.definition.model):
                return self.definition.model.model_validate(value.to_record())
            return self.definition.model.model_validate(value)
        except ValidationError as e:
            raise InvalidArgument(f"invalid {self.name}: {e.errors()[0].get('msg', e)}") from e

    def _load(self, data: Dict[str, Any]) -> E:
        # Stored states and initial states go through the same model rules
        try:
            return self.definition.model.model_validate(data)
        except ValidationError as e:
            raise InvalidArgument(f"invalid {self.name} state '{data.get('id')}': {e.errors()[0].get('msg', e)}") from e

    async def create(self, value: Union[E, Dict[str, Any]]) -> E:
        entity = self.validate(value)
        if not entity.id:
            raise InvalidArgument(f"{self.name} id is required")
        # Index first: a dangling index id is skipped by list() and healed by a retry
        await self.index.add(entity.id)
        await self.records.insert(entity.id, entity.to_record())
        logger.debug(f"🆕 {self.name} '{entity.id}' created")
        return entity

    async def get(self, entity_id: str) -> E:
        return self._load(await self.records.get(entity_id))

    async def exists(self, entity_id: str) -> bool:
        return await self.records.exists(entity_id)

    async def get_state(self, entity_id: str) -> E:
        """Current state, or the initial state if nothing was stored yet."""
        return self._load(await self.records.get_or_default(entity_id))

    async def mutate(self, entity_id: str, fn: Callable[[E], E]) -> E:
        updated = await self.records.mutate(entity_id, lambda data: self._apply(fn, data))
        return self._load(updated)

    async def update(self, entity_id: str, fn: Callable[[E], E]) -> E:
        """Mutate a record that must already exist (NotFound otherwise)."""
        updated = await self.records.update(entity_id, lambda data: self._apply(fn, data))
        return self._load(updated)

    def _apply(self, fn: Callable[[E], E], data: Dict[str, Any]) -> Dict[str, Any]:
        result = fn(self._load(data))
        entity = self.validate(result)
        if entity.id != data.get("id"):
            raise InvalidArgument(f"{self.name} id cannot be changed by an update")
        return entity.to_record()

    async def delete(self, entity_id: str) -> bool:
        removed = await self.records.delete(entity_id)
        await self.index.remove(entity_id)
        return removed

    async def list(self, cursor: Optional[str] = None, limit: int = 10) -> Page[E]:
        id_page = await self.index.list_ids(cursor, limit)
        items = []
        for entity_id in id_page.ids:
            try:
                items.append(await self.get(entity_id))
            except NotFound:
                logger.warning(f"⚠️ Index '{self.index.index_name}' references missing {self.name} '{entity_id}', skipping")
            except InvalidArgument as e:
                logger.warning(f"⚠️ Skipping unreadable {self.name} '{entity_id}': {e.message}")
        return Page[self.definition.model](items=items, next=id_page.next)

    async def list_all(self, page_size: int = 100) -> List[E]:
        items, cursor = [], None
        while True:
            page = await self.list(cursor, page_size)
            items.extend(page.items)
            if page.next is None:
                return items
            cursor = page.next

    async def is_seeded(self) -> bool:
        return bool(await self.records.storage.get(self.seed_marker_key))

    async def ensure_seed(self) -> int:
        """
        Populates the store from seed_data once. Safe to call repeatedly and concurrently.
        Returns: number of records created by this call.
        """
        if await self.is_seeded():
            return 0

        async with self.locks.lock(f"seed:{self.name}"):
            if await self.is_seeded():
                return 0

            # Validate the whole dataset before writing any of it
            entities = [self.validate(copy.deepcopy(raw)) for raw in self.definition.seed_data]
            created = 0
            for entity in entities:
                try:
                    await self.create(entity)
                    created += 1
                except Conflict:
                    # Left over from a partial earlier seed, create() has re-indexed it
                    logger.debug(f"Seed {self.name} '{entity.id}' already present")

            await self.records.storage.put(self.seed_marker_key, True)
            logger.info(f"🌱 Seeded {created} {self.definition.index_name} ({await self.index.size()} indexed)")
            return created


def indexed_entity(storage: KeyValueStorage, definition: EntityDefinition[E], locks: Optional[LockTable] = None) -> IndexedEntity[E]:
    locks = locks if locks is not None else LockTable()
    records = RecordStore(storage, definition.entity_name, definition.initial_state, locks)
    index = IndexManager(storage, definition.index_name, locks)
    return IndexedEntity(definition, records, index, locks)
