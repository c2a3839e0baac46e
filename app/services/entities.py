"""
DogRoom entity types: users, chat boards, hosts and bookings.
"""
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from app.core.errors import InvalidArgument
from app.core.logger import logger
from app.core.seed_loader import build_chat_board_seed, get_seed_records
from app.models.entities import Booking, ChatBoardState, ChatMessage, Host, User
from app.services.indexed_entity import EntityDefinition, IndexedEntity, indexed_entity
from app.services.record_store import LockTable
from app.services.storage import KeyValueStorage

IdFactory = Callable[[], str]
Clock = Callable[[], int]

def new_id() -> str:
    return str(uuid.uuid4())

def now_ms() -> int:
    return int(time.time() * 1000)

USER_INITIAL_STATE: Dict[str, Any] = {"id": "", "name": ""}

CHAT_INITIAL_STATE: Dict[str, Any] = {"id": "", "title": "", "messages": []}

HOST_INITIAL_STATE: Dict[str, Any] = {
    "id": "",
    "name": "",
    "bio": "",
    "rating": 0,
    "reviewsCount": 0,
    "tags": [],
    "pricePerNight": 0,
    "location": {"city": "", "x": 0, "y": 0},
    "availability": [],
    "verified": False,
    "houseRules": [],
    "gallery": [],
    "allowedPetSizes": [],
}

BOOKING_INITIAL_STATE: Dict[str, Any] = {
    "id": "",
    "hostId": "",
    "userId": "",
    "from": 0,
    "to": 0,
    "status": "pending",
    "createdAt": 0,
}

def user_definition(seed_data: Optional[List[Dict[str, Any]]] = None) -> EntityDefinition[User]:
    return EntityDefinition("user", "users", User, USER_INITIAL_STATE, seed_data or [])

def chat_board_definition(seed_data: Optional[List[Dict[str, Any]]] = None) -> EntityDefinition[ChatBoardState]:
    return EntityDefinition("chat", "chats", ChatBoardState, CHAT_INITIAL_STATE, seed_data or [])

def host_definition(seed_data: Optional[List[Dict[str, Any]]] = None) -> EntityDefinition[Host]:
    return EntityDefinition("host", "hosts", Host, HOST_INITIAL_STATE, seed_data or [])

def booking_definition(seed_data: Optional[List[Dict[str, Any]]] = None) -> EntityDefinition[Booking]:
    return EntityDefinition("booking", "bookings", Booking, BOOKING_INITIAL_STATE, seed_data or [])


class Users:
    def __init__(self, entity: IndexedEntity[User], id_factory: IdFactory = new_id):
        self.entity = entity
        self.id_factory = id_factory

    async def create_user(self, name: str) -> User:
        name = (name or "").strip()
        if not name:
            raise InvalidArgument("name required")
        return await self.entity.create(User(id=self.id_factory(), name=name))


class ChatBoards:
    """Each board keeps its own message list inside its record."""

    def __init__(self, entity: IndexedEntity[ChatBoardState], id_factory: IdFactory = new_id, clock: Clock = now_ms):
        self.entity = entity
        self.id_factory = id_factory
        self.clock = clock

    async def create_board(self, title: str) -> ChatBoardState:
        title = (title or "").strip()
        if not title:
            raise InvalidArgument("title required")
        return await self.entity.create(ChatBoardState(id=self.id_factory(), title=title, messages=[]))

    async def list_messages(self, chat_id: str) -> List[ChatMessage]:
        board = await self.entity.get(chat_id)
        return board.messages

    async def send_message(self, chat_id: str, user_id: str, text: str) -> ChatMessage:
        text = (text or "").strip()
        if not user_id or not text:
            raise InvalidArgument("userId and text required")
        msg = ChatMessage(id=self.id_factory(), chat_id=chat_id, user_id=user_id, text=text, ts=self.clock())

        def append(board: ChatBoardState) -> ChatBoardState:
            return board.model_copy(update={"messages": [*board.messages, msg]})

        await self.entity.update(chat_id, append)
        logger.debug(f"💬 Message {msg.id} posted to chat {chat_id}")
        return msg


@dataclass
class Entities:
    users: IndexedEntity[User]
    chats: IndexedEntity[ChatBoardState]
    hosts: IndexedEntity[Host]
    bookings: IndexedEntity[Booking]
    locks: LockTable

    def all(self) -> List[IndexedEntity]:
        return [self.users, self.chats, self.hosts, self.bookings]

    async def ensure_seed(self) -> None:
        for entity in self.all():
            await entity.ensure_seed()


def build_entities(storage: KeyValueStorage, seed: Optional[Dict[str, Any]] = None, locks: Optional[LockTable] = None) -> Entities:
    """Builds the four entity façades over one storage handle and one lock table."""
    seed = seed or {}
    locks = locks if locks is not None else LockTable()
    return Entities(
        users=indexed_entity(storage, user_definition(get_seed_records(seed, "users")), locks),
        chats=indexed_entity(storage, chat_board_definition(build_chat_board_seed(seed)), locks),
        hosts=indexed_entity(storage, host_definition(get_seed_records(seed, "hosts")), locks),
        bookings=indexed_entity(storage, booking_definition(get_seed_records(seed, "bookings")), locks),
        locks=locks,
    )
