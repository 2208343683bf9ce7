"""
Booking price calculation.

compute_price is the figure stored on a booking: nights x nightly rate, exact.
quote_price layers the service fee and taxes shown at checkout on top of it;
those extras are display-only and never persisted.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from app.core.exceptions import InvalidRangeError

Number = Union[Decimal, int, float, str]

_CENTS = Decimal("0.01")
_WHOLE = Decimal("1")


@dataclass(frozen=True)
class PriceCalculation:
    nights: int
    total: Decimal


@dataclass(frozen=True)
class PriceQuote:
    nights: int
    nightly_rate: Decimal
    room_total: Decimal
    fees: Decimal
    taxes: Decimal
    total: Decimal


def _as_decimal(value: Number) -> Decimal:
    # str() first so floats like 0.12 don't drag in binary noise
    return value if isinstance(value, Decimal) else Decimal(str(value))


def count_nights(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def compute_price(check_in: date, check_out: date, nightly_rate: Number) -> PriceCalculation:
    """
    Nights between the two dates times the nightly rate.
    Raises InvalidRangeError unless check_out is at least one day after check_in.
    """
    nights = count_nights(check_in, check_out)
    if nights <= 0:
        raise InvalidRangeError(
            f"Stay must be at least one night (check_in={check_in}, check_out={check_out})"
        )
    total = (_as_decimal(nightly_rate) * nights).quantize(_CENTS)
    return PriceCalculation(nights=nights, total=total)


def quote_price(
    check_in: date,
    check_out: date,
    nightly_rate: Number,
    service_fee_rate: Number,
    tax_rate: Number,
) -> PriceQuote:
    """Checkout breakdown: fee and taxes are rounded half-up to whole units."""
    base = compute_price(check_in, check_out, nightly_rate)
    fees = (base.total * _as_decimal(service_fee_rate)).quantize(_WHOLE, rounding=ROUND_HALF_UP)
    taxes = (base.total * _as_decimal(tax_rate)).quantize(_WHOLE, rounding=ROUND_HALF_UP)
    return PriceQuote(
        nights=base.nights,
        nightly_rate=_as_decimal(nightly_rate).quantize(_CENTS),
        room_total=base.total,
        fees=fees.quantize(_CENTS),
        taxes=taxes.quantize(_CENTS),
        total=(base.total + fees + taxes).quantize(_CENTS),
    )
