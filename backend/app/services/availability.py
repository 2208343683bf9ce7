"""
Date-range conflict rule for room bookings.

Ranges are half-open, [start, end): the guest leaves on `end`, so a booking
ending on the 15th and another starting on the 15th share no night.
Two ranges overlap iff each one starts before the other ends.
"""

from datetime import date
from typing import Iterable, Protocol


class DateRanged(Protocol):
    check_in: date
    check_out: date


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Callers must validate start < end for both ranges beforehand."""
    return a_start < b_end and b_start < a_end


def find_overlapping(
    bookings: Iterable[DateRanged],
    check_in: date,
    check_out: date,
) -> list:
    return [b for b in bookings if overlaps(b.check_in, b.check_out, check_in, check_out)]
