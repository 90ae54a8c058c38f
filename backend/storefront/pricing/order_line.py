"""Cart/order line pricing.

A priced line keeps a copy of the campaign that produced its unit price, so
the line can be audited after that campaign expires or is deleted.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from storefront.pricing.discount import to_money
from storefront.pricing.types import DiscountKind, ResolvedPrice


class PriceUnavailableError(ValueError):
    """Raised when a line is priced against an ``unavailable`` resolution."""

    def __init__(self, product_id: uuid.UUID, price_list_id: int):
        self.product_id = product_id
        self.price_list_id = price_list_id
        super().__init__(f"Product {product_id} has no price on list {price_list_id}")


@dataclass(frozen=True, slots=True)
class AppliedCampaign:
    campaign_id: int
    name: str
    kind: DiscountKind
    value: Decimal


@dataclass(frozen=True, slots=True)
class PricedLine:
    product_id: uuid.UUID
    price_list_id: int
    quantity: Decimal
    list_price: Decimal
    unit_price: Decimal
    subtotal: Decimal
    sku: Optional[str] = None
    product_name: Optional[str] = None
    discount_reason: Optional[str] = None
    applied_campaign: Optional[AppliedCampaign] = None

    @property
    def applied_campaign_id(self) -> Optional[int]:
        return self.applied_campaign.campaign_id if self.applied_campaign else None


def price_line(
    resolved: ResolvedPrice,
    quantity: Decimal,
    *,
    sku: Optional[str] = None,
    product_name: Optional[str] = None,
) -> PricedLine:
    """Price *quantity* units at the price *resolved* says is charged."""
    quantity = Decimal(quantity)
    if quantity <= 0:
        raise ValueError(f"Quantity must be positive, got {quantity}")
    if not resolved.available or resolved.base_price is None:
        raise PriceUnavailableError(resolved.product_id, resolved.price_list_id)

    applied: Optional[AppliedCampaign] = None
    reason: Optional[str] = None
    if resolved.has_promotion:
        winner = next(
            p for p in resolved.promotions if p.campaign_id == resolved.winning_campaign_id
        )
        applied = AppliedCampaign(
            campaign_id=winner.campaign_id,
            name=winner.name,
            kind=winner.kind,
            value=winner.value,
        )
        reason = f"Promotion applied: {winner.name}"

    unit_price = resolved.final_price
    return PricedLine(
        product_id=resolved.product_id,
        price_list_id=resolved.price_list_id,
        quantity=quantity,
        list_price=resolved.base_price,
        unit_price=unit_price,
        subtotal=to_money(unit_price * quantity),
        sku=sku,
        product_name=product_name,
        discount_reason=reason,
        applied_campaign=applied,
    )
