"""Product price views: the structure presentation layers render."""

import logging
import uuid
from datetime import datetime
from typing import Iterable, Optional

from storefront.pricing.discount import campaign_price, to_money
from storefront.pricing.scope import matches
from storefront.pricing.selector import select_best
from storefront.pricing.snapshot import PricingSnapshot
from storefront.pricing.types import (
    Campaign,
    EligiblePromotion,
    PricingContext,
    ResolvedPrice,
)

logger = logging.getLogger(__name__)


class PriceViewBuilder:
    """Resolve product prices against one snapshot at one instant.

    The builder holds no mutable state; the same builder may be shared by
    any number of concurrent resolutions.
    """

    def __init__(self, snapshot: PricingSnapshot, now: datetime):
        self.snapshot = snapshot
        self.now = now

    # ------------------------------------------------------------------
    # Eligibility
    # ------------------------------------------------------------------

    def eligible_campaigns(
        self, product_id: uuid.UUID, context: PricingContext
    ) -> list[Campaign]:
        """Campaigns linked to *product_id* that match *context*, by id."""
        return [
            campaign
            for campaign in self.snapshot.campaigns.for_product(product_id)
            if matches(campaign, context, self.now)
        ]

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def build_view(
        self,
        product_id: uuid.UUID,
        price_list_id: int,
        client_id: Optional[uuid.UUID] = None,
    ) -> ResolvedPrice:
        """Resolve *product_id* on *price_list_id* for an optional client."""
        price_book = self.snapshot.price_book
        price_list = price_book.price_list(price_list_id)
        base_price = price_book.base_price(product_id, price_list_id)

        if base_price is None:
            logger.debug(
                "Product %s has no price on list %s", product_id, price_list_id
            )
            return ResolvedPrice(
                product_id=product_id,
                price_list_id=price_list_id,
                status="unavailable",
                price_list_name=price_list.name if price_list else None,
                currency=price_list.currency if price_list else None,
            )

        context = PricingContext(price_list_id=price_list_id, client_id=client_id)
        eligible = self.eligible_campaigns(product_id, context)
        deal = select_best(base_price, eligible, product_id=product_id)

        promotions = tuple(
            EligiblePromotion(
                campaign_id=campaign.id,
                name=campaign.name,
                scope=campaign.scope,
                kind=campaign.rule.kind,
                value=campaign.rule.value,
                offer_price=campaign_price(campaign, product_id, base_price),
            )
            for campaign in eligible
        )
        winner = deal.winning_campaign

        return ResolvedPrice(
            product_id=product_id,
            price_list_id=price_list_id,
            status="available",
            price_list_name=price_list.name,
            currency=price_list.currency,
            base_price=to_money(base_price),
            offer_price=deal.price if winner is not None else None,
            savings=deal.savings,
            discount_percent=deal.discount_percent,
            winning_campaign_id=deal.winning_campaign_id,
            winning_campaign_name=winner.name if winner else None,
            promotions=promotions,
        )

    def build_view_all_lists(
        self, product_id: uuid.UUID, client_id: Optional[uuid.UUID] = None
    ) -> list[ResolvedPrice]:
        """One view per active list *product_id* is sold on."""
        return [
            self.build_view(product_id, list_id, client_id)
            for list_id in self.snapshot.price_book.lists_for(product_id)
        ]

    def build_views(
        self,
        product_ids: Iterable[uuid.UUID],
        price_list_id: int,
        client_id: Optional[uuid.UUID] = None,
    ) -> list[ResolvedPrice]:
        """Resolve a batch of products on the same list and snapshot."""
        return [
            self.build_view(product_id, price_list_id, client_id)
            for product_id in product_ids
        ]


def promotions_only(views: Iterable[ResolvedPrice]) -> list[ResolvedPrice]:
    """Keep the views that carry a real promotion."""
    return [view for view in views if view.has_promotion]
