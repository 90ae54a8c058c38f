"""Discount arithmetic.

All amounts are :class:`~decimal.Decimal`.  Rounding to cents happens once,
after the last arithmetic step.
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from storefront.pricing.types import Campaign, DiscountKind, DiscountRule

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_money(amount: Decimal) -> Decimal:
    """Round *amount* to 2 decimal places, half-up."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def apply_discount(
    base_price: Decimal,
    rule: DiscountRule,
    *,
    override: Optional[Decimal] = None,
) -> Decimal:
    """Return the price of *base_price* after *rule*.

    - ``PERCENTAGE``: ``base * (1 - value / 100)``.  Values outside
      ``[0, 100]`` are applied as given, so the result may be negative or
      above the base price.
    - ``FIXED_AMOUNT``: ``max(0, base - value)``.

    A non-``None`` *override* (a negotiated per-product offer price) is
    returned as-is and wins over both kinds.
    """
    if override is not None:
        return to_money(override)

    kind = rule.kind
    if kind is DiscountKind.PERCENTAGE:
        discounted = base_price * (1 - rule.value / HUNDRED)
    elif kind is DiscountKind.FIXED_AMOUNT:
        discounted = max(Decimal("0"), base_price - rule.value)
    else:
        raise ValueError(f"Unknown discount kind: {kind!r}")
    return to_money(discounted)


def campaign_price(
    campaign: Campaign, product_id: Optional[uuid.UUID], base_price: Decimal
) -> Decimal:
    """Price *campaign* gives *product_id*, honouring its fixed offer price."""
    override = campaign.fixed_offer_price(product_id) if product_id is not None else None
    return apply_discount(base_price, campaign.rule, override=override)
