from dataclasses import dataclass
from typing import Any, Dict, Optional

from app.services.booking_service import BookingService
from app.services.entities import ChatBoards, Clock, Entities, IdFactory, Users, build_entities, new_id, now_ms
from app.services.host_service import HostService
from app.services.storage import KeyValueStorage


@dataclass
class Marketplace:
    """Everything the HTTP layer needs, built once per process over one storage handle."""
    entities: Entities
    users: Users
    chats: ChatBoards
    bookings: BookingService
    hosts: HostService


def build_marketplace(storage: KeyValueStorage, seed: Optional[Dict[str, Any]] = None, id_factory: IdFactory = new_id, clock: Clock = now_ms) -> Marketplace:
    entities = build_entities(storage, seed)
    return Marketplace(
        entities=entities,
        users=Users(entities.users, id_factory),
        chats=ChatBoards(entities.chats, id_factory, clock),
        bookings=BookingService(entities.bookings, entities.hosts, id_factory, clock),
        hosts=HostService(entities.hosts, entities.bookings),
    )
