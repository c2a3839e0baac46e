from typing import List, Optional

from app.core.config import settings
from app.core.logger import logger
from app.models.entities import Booking, Host, HostPreview
from app.services.booking_conflicts import conflicting_bookings, validate_interval
from app.services.indexed_entity import IndexedEntity


class HostService:
    def __init__(self, hosts: IndexedEntity[Host], bookings: IndexedEntity[Booking]):
        self.hosts = hosts
        self.bookings = bookings

    async def search(self, pet_size: Optional[str] = None, start: Optional[int] = None, end: Optional[int] = None, limit: int = None) -> List[HostPreview]:
        """
        Hosts accepting the pet size (and free for [start, end) when both are given),
        best score first. Score = rating * 100 + reviewsCount.
        """
        limit = max(1, limit or settings.SEARCH_RESULT_LIMIT)
        check_dates = start is not None and end is not None
        if check_dates:
            validate_interval(start, end)

        hosts = await self.hosts.list_all()
        bookings = await self.bookings.list_all() if check_dates else []

        matches = []
        for host in hosts:
            if pet_size and pet_size not in host.allowed_pet_sizes:
                continue
            if check_dates and conflicting_bookings(host.id, start, end, bookings):
                continue
            matches.append(HostPreview.from_host(host))

        matches.sort(key=lambda p: p.score or 0, reverse=True)
        logger.info(f"🔍 Host search (petSize={pet_size}): {len(matches)} of {len(hosts)} hosts match")
        return matches[:limit]
