"""Booking status state machine. Validates only; never writes."""

from app.core.exceptions import InvalidTransitionError
from app.models.booking import BookingStatus

BOOKING_TRANSITIONS: dict[str, frozenset[str]] = {
    BookingStatus.PENDING.value: frozenset(
        {BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value}
    ),
    BookingStatus.CONFIRMED.value: frozenset(
        {BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value}
    ),
    BookingStatus.CANCELLED.value: frozenset(),
    BookingStatus.COMPLETED.value: frozenset(),
}


def _value(status) -> str:
    return status.value if isinstance(status, BookingStatus) else str(status)


def allowed_transitions(current) -> frozenset[str]:
    return BOOKING_TRANSITIONS.get(_value(current), frozenset())


def is_terminal(current) -> bool:
    return not allowed_transitions(current)


def validate_transition(current, target) -> None:
    current, target = _value(current), _value(target)
    if target not in allowed_transitions(current):
        raise InvalidTransitionError(f"Cannot change booking status from {current} to {target}")
