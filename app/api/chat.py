from typing import Optional

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.models.api_models import CreateChatRequest, CreateUserRequest, SendMessageRequest, ok
from app.services.marketplace import Marketplace
from app.api.deps import ensure_seeded, get_marketplace

users_router = APIRouter(dependencies=[Depends(ensure_seeded("users"))])
chats_router = APIRouter(dependencies=[Depends(ensure_seeded("chats"))])

# --- Users ---

@users_router.get("/users")
async def list_users(cursor: Optional[str] = None, limit: Optional[int] = None, marketplace: Marketplace = Depends(get_marketplace)):
    return ok(await marketplace.entities.users.list(cursor, limit if limit is not None else settings.DEFAULT_PAGE_LIMIT))

@users_router.post("/users")
async def create_user(req: CreateUserRequest, marketplace: Marketplace = Depends(get_marketplace)):
    return ok(await marketplace.users.create_user(req.name))

# --- Chats ---

@chats_router.get("/chats")
async def list_chats(cursor: Optional[str] = None, limit: Optional[int] = None, marketplace: Marketplace = Depends(get_marketplace)):
    return ok(await marketplace.entities.chats.list(cursor, limit if limit is not None else settings.DEFAULT_PAGE_LIMIT))

@chats_router.post("/chats")
async def create_chat(req: CreateChatRequest, marketplace: Marketplace = Depends(get_marketplace)):
    board = await marketplace.chats.create_board(req.title)
    return ok({"id": board.id, "title": board.title})

# --- Messages ---

@chats_router.get("/chats/{chat_id}/messages")
async def list_messages(chat_id: str, marketplace: Marketplace = Depends(get_marketplace)):
    return ok(await marketplace.chats.list_messages(chat_id))

@chats_router.post("/chats/{chat_id}/messages")
async def send_message(chat_id: str, req: SendMessageRequest, marketplace: Marketplace = Depends(get_marketplace)):
    return ok(await marketplace.chats.send_message(chat_id, req.user_id, req.text))
