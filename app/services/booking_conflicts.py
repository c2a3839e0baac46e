"""
Booking interval rules and status transitions.

Intervals are half-open, ``[from, to)``: a stay ending at 12:00 does not
collide with one starting at 12:00.
"""
from typing import Dict, FrozenSet, Iterable

from app.core.errors import Conflict, InvalidArgument
from app.models.entities import Booking

# Statuses that no longer hold the host's time
INACTIVE_STATUSES: FrozenSet[str] = frozenset({"cancelled", "rejected"})

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"confirmed", "cancelled", "rejected"}),
    "confirmed": frozenset({"cancelled"}),
    "cancelled": frozenset(),
    "rejected": frozenset(),
}

def intervals_overlap(a_from: int, a_to: int, b_from: int, b_to: int) -> bool:
    return a_from < b_to and b_from < a_to

def validate_interval(start, end) -> None:
    if isinstance(start, bool) or isinstance(end, bool) or not isinstance(start, int) or not isinstance(end, int):
        raise InvalidArgument("from and to must be epoch milliseconds")
    if start >= end:
        raise InvalidArgument("a valid date range is required (from < to)")

def blocks_host(booking: Booking) -> bool:
    return booking.status not in INACTIVE_STATUSES

def conflicting_bookings(host_id: str, start: int, end: int, bookings: Iterable[Booking]) -> list:
    return [
        b for b in bookings
        if b.host_id == host_id and blocks_host(b) and intervals_overlap(start, end, b.from_, b.to)
    ]

def has_conflict(host_id: str, start: int, end: int, bookings: Iterable[Booking]) -> bool:
    """True if [start, end) overlaps any active booking of the host."""
    validate_interval(start, end)
    return bool(conflicting_bookings(host_id, start, end, bookings))

def can_transition(current: str, target: str) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS.get(current, frozenset())

def ensure_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise Conflict(f"cannot change booking status from {current} to {target}")
