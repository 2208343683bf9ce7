"""
Tests for booking price calculation and the checkout quote.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.core.exceptions import InvalidRangeError
from app.services.pricing import compute_price, count_nights, quote_price


def test_five_nights_at_100():
    price = compute_price(date(2025, 7, 10), date(2025, 7, 15), Decimal("100"))
    assert price.nights == 5
    assert price.total == Decimal("500.00")


@pytest.mark.parametrize(
    "check_in, check_out, rate",
    [
        (date(2025, 2, 27), date(2025, 3, 2), Decimal("89.99")),  # across month end
        (date(2024, 2, 28), date(2024, 3, 1), Decimal("120")),  # leap day
        (date(2025, 12, 30), date(2026, 1, 2), Decimal("0")),  # free stay
        (date(2025, 1, 1), date(2025, 1, 2), 75),
    ],
)
def test_total_is_nights_times_rate(check_in, check_out, rate):
    price = compute_price(check_in, check_out, rate)
    assert price.nights == (check_out - check_in).days
    assert price.total == Decimal(str(rate)) * price.nights


@pytest.mark.parametrize(
    "check_in, check_out",
    [
        (date(2025, 7, 10), date(2025, 7, 10)),
        (date(2025, 7, 10), date(2025, 7, 9)),
    ],
)
def test_zero_or_negative_nights_rejected(check_in, check_out):
    with pytest.raises(InvalidRangeError):
        compute_price(check_in, check_out, Decimal("100"))


def test_count_nights():
    assert count_nights(date(2025, 7, 10), date(2025, 7, 11)) == 1


def test_quote_adds_fee_and_taxes():
    quote = quote_price(date(2025, 7, 10), date(2025, 7, 13), Decimal("100"), 0.12, 0.08)
    assert quote.nights == 3
    assert quote.room_total == Decimal("300.00")
    assert quote.fees == Decimal("36.00")
    assert quote.taxes == Decimal("24.00")
    assert quote.total == Decimal("360.00")


def test_quote_rounds_extras_to_whole_units():
    quote = quote_price(date(2025, 7, 10), date(2025, 7, 11), Decimal("99.99"), 0.12, 0.08)
    # 11.9988 -> 12, 7.9992 -> 8
    assert quote.fees == Decimal("12.00")
    assert quote.taxes == Decimal("8.00")
    assert quote.total == Decimal("119.99")
