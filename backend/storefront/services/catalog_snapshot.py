"""Price list and campaign providers backed by the database.

Loads everything one resolution pass needs into an immutable
:class:`~storefront.pricing.PricingSnapshot`.  Rows are converted into the
pricing engine's value types here so the engine never sees ORM objects.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.database import async_session
from storefront.models import Campaign, PriceList, ProductPrice
from storefront.pricing import (
    CampaignScope,
    DiscountKind,
    DiscountRule,
    PricingSnapshot,
)
from storefront.pricing import Campaign as PricingCampaign
from storefront.pricing import PriceList as PricingPriceList
from storefront.pricing import ProductPrice as PricingProductPrice

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    """Treat naive timestamps (SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_pricing_campaign(row: Campaign) -> PricingCampaign:
    """Convert a :class:`Campaign` row and its links into the engine type.

    Raises ``ValueError`` for rows that break the campaign invariants or
    carry an unknown scope / discount kind.
    """
    return PricingCampaign(
        id=row.id,
        name=row.name,
        description=row.description,
        starts_at=_aware(row.starts_at),
        ends_at=_aware(row.ends_at),
        rule=DiscountRule(
            kind=DiscountKind(row.discount_kind.upper()),
            value=Decimal(str(row.discount_value)),
        ),
        scope=CampaignScope(row.scope.upper()),
        active=bool(row.active),
        target_list_id=row.target_list_id,
        product_ids=frozenset(link.product_id for link in row.products),
        client_ids=frozenset(link.client_id for link in row.clients),
        fixed_offer_prices={
            link.product_id: Decimal(str(link.fixed_offer_price))
            for link in row.products
            if link.fixed_offer_price is not None
        },
    )


def convert_campaigns(rows: Iterable[Campaign]) -> list[PricingCampaign]:
    """Convert campaign rows, skipping (and logging) malformed ones."""
    campaigns: list[PricingCampaign] = []
    for row in rows:
        try:
            campaigns.append(to_pricing_campaign(row))
        except ValueError as exc:
            logger.warning("Skipping campaign %s (%s): %s", row.id, row.name, exc)
    return campaigns


class CatalogSnapshotLoader:
    """Async loader for :class:`PricingSnapshot` instances."""

    async def load(
        self,
        *,
        product_ids: Optional[Iterable[uuid.UUID]] = None,
        active_campaigns_only: bool = True,
        session: AsyncSession | None = None,
    ) -> PricingSnapshot:
        """Fetch price lists, prices and campaigns in one go.

        *product_ids* narrows the prices and campaigns to those products.
        Inactive campaigns are left out by default; the engine re-checks the
        active flag and validity window anyway, so loading them is harmless.
        """
        close_session = False
        if session is None:
            session = async_session()
            close_session = True

        try:
            ids = list(product_ids) if product_ids is not None else None

            list_rows = (await session.execute(select(PriceList))).scalars().all()

            price_stmt = select(ProductPrice)
            if ids is not None:
                price_stmt = price_stmt.where(ProductPrice.product_id.in_(ids))
            price_rows = (await session.execute(price_stmt)).scalars().all()

            campaign_stmt = select(Campaign).options(
                selectinload(Campaign.products), selectinload(Campaign.clients)
            )
            if active_campaigns_only:
                campaign_stmt = campaign_stmt.where(Campaign.active.is_(True))
            campaign_rows = (await session.execute(campaign_stmt)).scalars().all()

            campaigns = convert_campaigns(campaign_rows)
            if ids is not None:
                wanted = set(ids)
                campaigns = [c for c in campaigns if c.product_ids & wanted]

            snapshot = PricingSnapshot.build(
                price_lists=[
                    PricingPriceList(
                        id=pl.id, name=pl.name, currency=pl.currency, active=bool(pl.active)
                    )
                    for pl in list_rows
                ],
                prices=[
                    PricingProductPrice(
                        product_id=p.product_id,
                        price_list_id=p.price_list_id,
                        amount=Decimal(str(p.amount)),
                    )
                    for p in price_rows
                ],
                campaigns=campaigns,
            )

            logger.debug(
                "Loaded pricing snapshot: %d lists, %d prices, %d campaigns",
                len(list_rows),
                len(price_rows),
                len(campaigns),
            )
            return snapshot
        finally:
            if close_session:
                await session.close()
