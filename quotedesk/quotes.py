"""Quote form helpers: price formatting and transfer airport lookup."""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from .constants import DEFAULT_TRANSFER_REGION, TRANSFER_AIRPORTS
from .schemas import Program, QuoteDetails

_NUMBER_CHARS = re.compile(r"[^\d.,-]")


def currency_symbol(program: Program) -> str:
    return "€" if "malta" in program.country.lower() else "£"


def format_price(raw: str, symbol: str) -> str:
    """Normalize free-text price input into ``£1,234.00`` form.

    Text without a usable number is returned untouched so notes such as
    "on request" survive.
    """

    cleaned = _NUMBER_CHARS.sub("", raw or "")
    if not cleaned or not any(ch.isdigit() for ch in cleaned):
        return raw
    # "1.500,50" and "1,500.50" both mean fifteen hundred and a half.
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        head, _, tail = cleaned.rpartition(",")
        cleaned = f"{head.replace(',', '')}.{tail}" if len(tail) in (1, 2) else cleaned.replace(",", "")
    try:
        amount = Decimal(cleaned).quantize(Decimal("0.01"))
    except InvalidOperation:
        return raw
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def transfer_region(program: Program) -> str:
    city, location, country = program.city, program.location, program.country
    if "London" in city or "King" in location:
        return "London"
    if "Bedford" in city:
        return "Bedford"
    if "Manchester" in city:
        return "Manchester"
    if "Wellington" in city or "Wellington" in location:
        return "Wellington"
    if "Malta" in country:
        return "Malta"
    return DEFAULT_TRANSFER_REGION


def available_airports(program: Program) -> list[str]:
    return list(TRANSFER_AIRPORTS.get(transfer_region(program), ()))


def prepare_quote(program: Program, quote: QuoteDetails) -> QuoteDetails:
    """Validate the transfer choice and format the price fields for display."""

    if quote.transfer_airport and quote.transfer_airport not in available_airports(program):
        raise ValueError(
            f"Airport '{quote.transfer_airport}' is not served for {program.name}"
        )
    symbol = currency_symbol(program)
    return quote.model_copy(
        update={
            "price_per_student": format_price(quote.price_per_student, symbol),
            "extra_leader_price": format_price(quote.extra_leader_price, symbol),
        }
    )
