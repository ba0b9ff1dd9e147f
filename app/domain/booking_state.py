"""Direct booking status machine."""

from app.core.exceptions import InvalidBookingStatus

BOOKING_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"cancelled"},
    "cancelled": set(),
}


def assert_booking_transition(current: str, target: str) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidBookingStatus(
            f"Invalid booking transition: {current} → {target}"
        )
