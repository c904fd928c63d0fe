"""
Price discovery for offers placed without an explicit price.

Every offer the engine places is a sell offer of the ``selling`` asset
for the ``buying`` asset, priced in buying units per selling unit. The
counter-parties for that are the book's bids on (base=selling,
counter=buying), so the top bid is the execution price for both BUY and
SELL statements.

A BUY statement whose amount is denominated in the buying asset
("buy 100 MOBI using XLM") is converted to a selling amount by dividing
by the discovered price.

All arithmetic is Decimal. Amounts leave this module with exactly seven
fractional digits, the ledger's native precision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation

from alfred_please.assets import Asset
from alfred_please.errors import NoLiquidity, ParseError
from alfred_please.statement import AmountKind, OfferKind, OfferRequest
from alfred_please.stellar.client import LedgerClient, OrderBookSummary, PriceLevel

logger = logging.getLogger(__name__)

# One stroop.
AMOUNT_QUANTUM = Decimal("0.0000001")


@dataclass(frozen=True)
class PricedOffer:
    """Price and selling-denominated amount ready for the offer operation."""

    price: Decimal
    amount: Decimal
    discovered: bool


def parse_decimal(value: str, field_name: str) -> Decimal:
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        raise ParseError(f"{field_name} is not a decimal number: {value!r}") from None
    if not parsed.is_finite() or parsed <= 0:
        raise ParseError(f"{field_name} must be a positive number: {value!r}")
    return parsed


def format_amount(amount: Decimal) -> str:
    """Fixed-point string with 7 fractional digits (truncated, never rounded up)."""
    return format(amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN), "f")


def best_level(book: OrderBookSummary, kind: OfferKind) -> PriceLevel:
    """Top-of-book level an offer of ``kind`` would execute against.

    Raises:
        NoLiquidity: If that side of the book is empty.
    """
    levels = book.bids
    if not levels:
        raise NoLiquidity(
            f"no offers found in the {book.base.code}/{book.counter.code} order book, "
            "you should specify a price",
            details={"base": book.base.code, "counter": book.counter.code, "side": kind.value},
        )
    return levels[0]


def convert_amount(offer: OfferRequest, amount: Decimal, price: Decimal) -> Decimal:
    """Express ``amount`` in selling units for a discovered ``price``."""
    if offer.kind is OfferKind.BUY and offer.amount_kind is AmountKind.BUYING:
        return amount / price
    return amount


async def price_offer(
    offer: OfferRequest,
    *,
    selling: Asset,
    buying: Asset,
    client: LedgerClient,
) -> PricedOffer:
    """Resolve the price and selling amount for ``offer``.

    An explicit price is used as given and the amount is left untouched.
    Otherwise the order book is consulted once.

    Raises:
        ParseError: If the amount or price is not a positive decimal.
        NoLiquidity: If no price can be inferred from the book.
    """
    amount = parse_decimal(offer.amount, "amount")
    if offer.price is not None:
        return PricedOffer(
            price=parse_decimal(offer.price, "price"), amount=amount, discovered=False
        )

    book = await client.load_order_book(selling, buying)
    level = best_level(book, offer.kind)
    if level.price <= 0:
        raise NoLiquidity(f"order book reported a non-positive price: {level.price}")

    converted = convert_amount(offer, amount, level.price)
    logger.info(
        "discovered price %s %s per %s", level.price, buying.code, selling.code
    )
    return PricedOffer(price=level.price, amount=converted, discovered=True)
