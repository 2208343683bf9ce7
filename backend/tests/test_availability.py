"""
Tests for the half-open date-range overlap rule.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from itertools import product

from app.services.availability import find_overlapping, overlaps


def d(day: int) -> date:
    return date(2025, 6, 1) + timedelta(days=day - 1)


def test_adjacent_ranges_do_not_overlap():
    """Checkout on the 15th, next check-in on the 15th: same-day turnover."""
    assert overlaps(d(10), d(15), d(15), d(20)) is False
    assert overlaps(d(15), d(20), d(10), d(15)) is False


def test_nested_range_overlaps():
    assert overlaps(d(1), d(10), d(3), d(5)) is True
    assert overlaps(d(3), d(5), d(1), d(10)) is True


def test_equal_start_or_end_overlaps():
    assert overlaps(d(10), d(15), d(10), d(12)) is True
    assert overlaps(d(10), d(15), d(12), d(15)) is True
    assert overlaps(d(10), d(15), d(10), d(15)) is True


def test_partial_overlap_either_side():
    assert overlaps(d(10), d(15), d(8), d(11)) is True
    assert overlaps(d(10), d(15), d(14), d(18)) is True


def test_disjoint_ranges():
    assert overlaps(d(1), d(3), d(5), d(8)) is False


def test_overlap_is_symmetric():
    days = range(1, 8)
    ranges = [(d(s), d(e)) for s, e in product(days, days) if s < e]
    for (a_start, a_end), (b_start, b_end) in product(ranges, ranges):
        assert overlaps(a_start, a_end, b_start, b_end) == overlaps(b_start, b_end, a_start, a_end)


@dataclass
class Stay:
    check_in: date
    check_out: date


def test_find_overlapping_filters_with_same_rule():
    stays = [Stay(d(1), d(5)), Stay(d(5), d(9)), Stay(d(12), d(14))]
    assert find_overlapping(stays, d(4), d(6)) == stays[:2]
    assert find_overlapping(stays, d(9), d(12)) == []
