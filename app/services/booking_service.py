from typing import List

from app.core.errors import Conflict, InvalidArgument, NotFound
from app.core.logger import logger
from app.models.entities import Booking, BookingWithHost, Host
from app.services.booking_conflicts import conflicting_bookings, ensure_transition, validate_interval
from app.services.entities import Clock, IdFactory, new_id, now_ms
from app.services.indexed_entity import IndexedEntity


class BookingService:
    def __init__(self, bookings: IndexedEntity[Booking], hosts: IndexedEntity[Host], id_factory: IdFactory = new_id, clock: Clock = now_ms):
        self.bookings = bookings
        self.hosts = hosts
        self.id_factory = id_factory
        self.clock = clock

    def _host_lock(self, host_id: str):
        return self.bookings.locks.lock(f"booking-host:{host_id}")

    async def host_bookings(self, host_id: str) -> List[Booking]:
        return [b for b in await self.bookings.list_all() if b.host_id == host_id]

    async def check_conflict(self, host_id: str, start: int, end: int) -> bool:
        """
        Checks the proposed stay against every active booking of the host.
        Returns: True when [start, end) overlaps an existing pending/confirmed booking.
        """
        validate_interval(start, end)
        clashes = conflicting_bookings(host_id, start, end, await self.host_bookings(host_id))
        if clashes:
            logger.info(f"📅 Host {host_id}: [{start}, {end}) overlaps {[b.id for b in clashes]}")
        return bool(clashes)

    async def create_booking(self, host_id: str, user_id: str, start: int, end: int) -> Booking:
        """
        Book a stay (Async).
        The conflict check and the insert run under one lock per host, so two
        overlapping requests for the same host cannot both succeed.
        """
        if not host_id or not user_id:
            raise InvalidArgument("hostId, userId, and a valid date range are required")
        validate_interval(start, end)

        if not await self.hosts.exists(host_id):
            raise NotFound("host not found")

        logger.info(f"📥 Booking Request - Host: {host_id}, User: {user_id}, [{start}, {end})")

        async with self._host_lock(host_id):
            if await self.check_conflict(host_id, start, end):
                raise Conflict("Dates are not available. Please select a different range.")

            booking = Booking(
                id=self.id_factory(),
                host_id=host_id,
                user_id=user_id,
                from_=start,
                to=end,
                status="pending",
                created_at=self.clock(),
            )
            booking = await self.bookings.create(booking)

        logger.info(f"✅ Booking {booking.id} created for host {host_id}")
        return booking

    async def _set_status(self, booking_id: str, status: str) -> Booking:
        def apply(booking: Booking) -> Booking:
            ensure_transition(booking.status, status)
            return booking.model_copy(update={"status": status})

        booking = await self.bookings.update(booking_id, apply)
        logger.info(f"🔄 Booking {booking_id} is now {booking.status}")
        return booking

    async def cancel_booking(self, booking_id: str) -> Booking:
        """Cancels a booking. Cancelling an already cancelled booking is a no-op."""
        return await self._set_status(booking_id, "cancelled")

    async def confirm_booking(self, booking_id: str) -> Booking:
        return await self._set_status(booking_id, "confirmed")

    async def reject_booking(self, booking_id: str) -> Booking:
        return await self._set_status(booking_id, "rejected")

    async def list_user_bookings(self, user_id: str) -> List[BookingWithHost]:
        if not user_id:
            raise InvalidArgument("userId is required")
        user_bookings = [b for b in await self.bookings.list_all() if b.user_id == user_id]

        hosts_by_id = {}
        for host_id in dict.fromkeys(b.host_id for b in user_bookings):
            try:
                hosts_by_id[host_id] = await self.hosts.get(host_id)
            except NotFound:
                logger.warning(f"⚠️ Booking references missing host '{host_id}'")

        return [
            BookingWithHost(**b.model_dump(), host=hosts_by_id.get(b.host_id))
            for b in user_bookings
        ]
