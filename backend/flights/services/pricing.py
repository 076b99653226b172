"""Uniform pricing structure for search-time and quote-time price blocks.

Search responses attach a ``BestCombinablePrice`` block to every brand
offering; quote responses wrap the price inside an offer list. Both are
read with the same field mapping once the block has been located.
"""

from flights.services.lookup import dicts, dig, first_found, to_amount

SEARCH = "search"
QUOTE = "quote"

# Where to find the price block for each call context, tried in order.
PRICE_BLOCK_PATHS = {
    SEARCH: ((),),
    QUOTE: (
        ("OfferListResponse", "OfferID", 0, "Price"),
        ("OfferListResponse", "Offer", 0, "Price"),
    ),
}


def _currency(block) -> str | None:
    currency = dig(block, "CurrencyCode", "value")
    if currency is None:
        currency = dig(block, "CurrencyCode")
    return currency if isinstance(currency, str) else None


def _surcharges(entry) -> float:
    amount = dig(entry, "Amount", default={})
    return sum(
        (to_amount(surcharge.get("value")) for surcharge in dicts(dig(amount, "Surcharges", "Surcharge"))),
        0.0,
    )


def locate_price_block(raw, context: str = SEARCH) -> dict:
    _, block = first_found(raw, PRICE_BLOCK_PATHS.get(context, ()))
    return block if isinstance(block, dict) else {}


def passenger_breakdown(block) -> list[dict]:
    passengers = []
    for entry in dicts(dig(block, "PriceBreakdown")):
        amount = dig(entry, "Amount", default={})
        quantity = entry.get("quantity")
        passengers.append(
            {
                "type": entry.get("requestedPassengerType"),
                "quantity": quantity if isinstance(quantity, int) and not isinstance(quantity, bool) else 1,
                "currency": _currency(amount),
                "base": to_amount(dig(amount, "Base")),
                "taxes": to_amount(dig(amount, "Taxes", "TotalTaxes")),
                "fees": to_amount(dig(amount, "Fees", "TotalFees")),
                "surcharges": _surcharges(entry),
                "total": to_amount(dig(amount, "Total")),
            }
        )
    return passengers


def normalize_price(raw, context: str = SEARCH) -> dict:
    block = locate_price_block(raw, context)
    breakdown = dicts(block.get("PriceBreakdown"))

    return {
        "currency": _currency(block),
        "base": to_amount(block.get("Base")),
        "taxes": to_amount(block.get("TotalTaxes")),
        "fees": to_amount(block.get("TotalFees")),
        "surcharges": sum((_surcharges(entry) for entry in breakdown), 0.0),
        "total": to_amount(block.get("TotalPrice")),
        "breakdown": passenger_breakdown(block) if context == SEARCH else [],
    }
