"""Best-deal selection among eligible campaigns."""

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from storefront.pricing.discount import HUNDRED, campaign_price, to_money
from storefront.pricing.types import BestDeal, Campaign, DiscountKind

logger = logging.getLogger(__name__)


def discount_percent(
    base_price: Decimal,
    savings: Decimal,
    winner: Optional[Campaign] = None,
    *,
    product_id: Optional[uuid.UUID] = None,
) -> Decimal:
    """Percentage shown next to a deal.

    A winning ``PERCENTAGE`` campaign reports its configured value, unless a
    fixed offer price produced the price.  Everything else is derived from
    the savings and rounded to a whole number.
    """
    if (
        winner is not None
        and winner.rule.kind is DiscountKind.PERCENTAGE
        and (product_id is None or winner.fixed_offer_price(product_id) is None)
    ):
        return winner.rule.value
    if base_price <= 0:
        return Decimal("0")
    return (savings / base_price * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def select_best(
    base_price: Decimal,
    campaigns: Iterable[Campaign],
    *,
    product_id: Optional[uuid.UUID] = None,
) -> BestDeal:
    """Pick the campaign yielding the lowest price for *base_price*.

    Only a strictly lower price replaces the current best, so among equal
    prices the campaign evaluated first wins.  Pass *campaigns* in a
    deterministic order (the builder sorts by campaign id).  With nothing
    eligible, the base price is returned with no winner and zero savings.
    """
    base_price = to_money(base_price)
    best_price = base_price
    winner: Optional[Campaign] = None

    for campaign in campaigns:
        price = campaign_price(campaign, product_id, base_price)
        if price < best_price:
            best_price = price
            winner = campaign

    savings = base_price - best_price
    percent = discount_percent(base_price, savings, winner, product_id=product_id)

    if winner is not None:
        logger.debug(
            "Best deal for %s: campaign %s -> %s (base %s)",
            product_id,
            winner.id,
            best_price,
            base_price,
        )
    return BestDeal(
        price=best_price,
        savings=savings,
        discount_percent=percent,
        winning_campaign=winner,
    )
