import pytest

from app.core.errors import Conflict, InvalidArgument
from app.models.entities import Booking
from app.services.booking_conflicts import (
    can_transition,
    ensure_transition,
    has_conflict,
    intervals_overlap,
    validate_interval,
)


def booking(start, end, status="confirmed", host_id="h1", booking_id="b"):
    return Booking(id=booking_id, host_id=host_id, user_id="u1", from_=start, to=end, status=status)


@pytest.mark.parametrize("existing, expected", [
    ((15, 25), True),   # overlaps the tail
    ((20, 30), False),  # touches the end, half-open
    ((5, 10), False),   # touches the start
    ((5, 11), True),
    ((12, 18), True),   # contained
    ((0, 100), True),   # contains
    ((30, 40), False),
])
def test_overlap_against_10_20(existing, expected):
    assert has_conflict("h1", 10, 20, [booking(*existing)]) is expected


def test_overlap_is_symmetric():
    assert intervals_overlap(10, 20, 15, 25) == intervals_overlap(15, 25, 10, 20)


def test_cancelled_booking_does_not_block():
    assert has_conflict("h1", 10, 20, [booking(10, 20, status="cancelled")]) is False


def test_rejected_booking_does_not_block():
    assert has_conflict("h1", 10, 20, [booking(10, 20, status="rejected")]) is False


def test_pending_booking_blocks():
    assert has_conflict("h1", 10, 20, [booking(12, 14, status="pending")]) is True


def test_other_hosts_are_ignored():
    assert has_conflict("h1", 10, 20, [booking(10, 20, host_id="h2")]) is False


def test_no_bookings_no_conflict():
    assert has_conflict("h1", 10, 20, []) is False


@pytest.mark.parametrize("start, end", [(100, 50), (10, 10), ("1", 2), (None, 5), (1.5, 3), (True, 5)])
def test_invalid_interval(start, end):
    with pytest.raises(InvalidArgument):
        validate_interval(start, end)


def test_inverted_interval_fails_before_checking_bookings():
    with pytest.raises(InvalidArgument):
        has_conflict("h1", 100, 50, [booking(0, 1000)])


def test_status_transitions():
    assert can_transition("pending", "confirmed")
    assert can_transition("pending", "cancelled")
    assert can_transition("pending", "rejected")
    assert can_transition("confirmed", "cancelled")
    assert can_transition("cancelled", "cancelled")

    assert not can_transition("cancelled", "pending")
    assert not can_transition("cancelled", "confirmed")
    assert not can_transition("rejected", "confirmed")
    assert not can_transition("confirmed", "pending")

    with pytest.raises(Conflict):
        ensure_transition("cancelled", "confirmed")
