from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.config import settings
from app.core.errors import InvalidArgument
from app.models.api_models import CreateBookingRequest, SearchRequest, ok
from app.services.marketplace import Marketplace
from app.api.deps import ensure_seeded, get_marketplace

hosts_router = APIRouter(dependencies=[Depends(ensure_seeded("hosts"))])
search_router = APIRouter(dependencies=[Depends(ensure_seeded("hosts", "bookings"))])
bookings_router = APIRouter(dependencies=[Depends(ensure_seeded("hosts", "bookings"))])

# --- Hosts ---

@hosts_router.get("/hosts")
async def list_hosts(cursor: Optional[str] = None, limit: Optional[int] = Query(default=None), marketplace: Marketplace = Depends(get_marketplace)):
    page = await marketplace.entities.hosts.list(cursor, limit if limit is not None else settings.DEFAULT_PAGE_LIMIT)
    return ok(page)

@hosts_router.get("/hosts/{host_id}")
async def get_host(host_id: str, marketplace: Marketplace = Depends(get_marketplace)):
    return ok(await marketplace.entities.hosts.get(host_id))

@search_router.post("/search")
async def search_hosts(req: SearchRequest, marketplace: Marketplace = Depends(get_marketplace)):
    previews = await marketplace.hosts.search(req.pet_size, req.from_, req.to)
    return ok({"items": previews, "next": None})

# --- Bookings ---

@bookings_router.get("/bookings")
async def list_bookings(userId: Optional[str] = None, marketplace: Marketplace = Depends(get_marketplace)):
    items = await marketplace.bookings.list_user_bookings(userId or "")
    return ok({"items": items, "next": None})

@bookings_router.post("/bookings")
async def create_booking(req: CreateBookingRequest, marketplace: Marketplace = Depends(get_marketplace)):
    if req.from_ is None or req.to is None:
        raise InvalidArgument("hostId, userId, and a valid date range are required")
    booking = await marketplace.bookings.create_booking(req.host_id or "", req.user_id or "", req.from_, req.to)
    return ok(booking)

@bookings_router.delete("/bookings/{booking_id}")
async def cancel_booking(booking_id: str, marketplace: Marketplace = Depends(get_marketplace)):
    await marketplace.bookings.cancel_booking(booking_id)
    return ok({"id": booking_id, "deleted": True})

@bookings_router.post("/bookings/{booking_id}/confirm")
async def confirm_booking(booking_id: str, marketplace: Marketplace = Depends(get_marketplace)):
    return ok(await marketplace.bookings.confirm_booking(booking_id))

@bookings_router.post("/bookings/{booking_id}/reject")
async def reject_booking(booking_id: str, marketplace: Marketplace = Depends(get_marketplace)):
    return ok(await marketplace.bookings.reject_booking(booking_id))
