"""Price resolution service.

Ties the database-backed providers to the pure pricing engine: every public
method loads exactly one snapshot, captures the evaluation instant once and
resolves all requested products against that pair.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models import Client, Product
from storefront.pricing import (
    PricedLine,
    PriceViewBuilder,
    ResolvedPrice,
    price_line,
    promotions_only,
)
from storefront.services.catalog_snapshot import CatalogSnapshotLoader

logger = logging.getLogger(__name__)


class ClientNotFoundError(LookupError):
    pass


class ProductNotFoundError(LookupError):
    pass


class MissingPriceListError(ValueError):
    """Neither an explicit price list nor a client with an assigned one."""


@dataclass(frozen=True, slots=True)
class CampaignValidation:
    valid: bool
    resolution: ResolvedPrice


@dataclass(frozen=True, slots=True)
class LineRequest:
    product_id: uuid.UUID
    quantity: Decimal
    campaign_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class QuotedLine:
    line: PricedLine
    # False when the caller claimed a campaign that no longer wins
    campaign_confirmed: bool = True


def evaluation_time(at: Optional[datetime] = None) -> datetime:
    """The instant to resolve at: *at* (naive means UTC) or now."""
    if at is None:
        return datetime.now(timezone.utc)
    if at.tzinfo is None:
        return at.replace(tzinfo=timezone.utc)
    return at


class PriceResolver:
    """Async service resolving product prices for a pricing context."""

    def __init__(self, loader: CatalogSnapshotLoader | None = None):
        self.loader = loader or CatalogSnapshotLoader()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get_products(
        self, product_ids: Sequence[uuid.UUID], session: AsyncSession
    ) -> dict[uuid.UUID, Product]:
        result = await session.execute(select(Product).where(Product.id.in_(product_ids)))
        products = {p.id: p for p in result.scalars().all()}
        missing = [pid for pid in product_ids if pid not in products]
        if missing:
            raise ProductNotFoundError(f"Product not found: {missing[0]}")
        return products

    async def resolve_price_list(
        self,
        session: AsyncSession,
        *,
        price_list_id: Optional[int] = None,
        client_id: Optional[uuid.UUID] = None,
    ) -> Optional[int]:
        """Pick the list to resolve on.

        An explicit *price_list_id* wins; otherwise the client's assigned
        list is used.  Returns ``None`` when neither is available.
        """
        if client_id is not None:
            client = await session.get(Client, client_id)
            if client is None:
                raise ClientNotFoundError(f"Client not found: {client_id}")
            if price_list_id is None:
                return client.price_list_id
        return price_list_id

    async def _builder(
        self,
        session: AsyncSession,
        product_ids: Iterable[uuid.UUID],
        at: Optional[datetime],
    ) -> PriceViewBuilder:
        snapshot = await self.loader.load(product_ids=product_ids, session=session)
        return PriceViewBuilder(snapshot, evaluation_time(at))

    # ------------------------------------------------------------------
    # Product views
    # ------------------------------------------------------------------

    async def resolve_product(
        self,
        product_id: uuid.UUID,
        *,
        session: AsyncSession,
        price_list_id: Optional[int] = None,
        client_id: Optional[uuid.UUID] = None,
        at: Optional[datetime] = None,
    ) -> list[ResolvedPrice]:
        """Resolve one product on one list, or on every list it is sold on.

        Only an explicit *price_list_id* narrows the result to one list; a
        client without one still sees every list, with its own campaigns.
        """
        await self._get_products([product_id], session)
        if client_id is not None:
            await self.resolve_price_list(session, client_id=client_id)

        builder = await self._builder(session, [product_id], at)
        if price_list_id is not None:
            return [builder.build_view(product_id, price_list_id, client_id)]
        return builder.build_view_all_lists(product_id, client_id)

    async def resolve_products(
        self,
        product_ids: Sequence[uuid.UUID],
        *,
        session: AsyncSession,
        price_list_id: Optional[int] = None,
        client_id: Optional[uuid.UUID] = None,
        only_promotions: bool = False,
        at: Optional[datetime] = None,
    ) -> list[ResolvedPrice]:
        """Resolve a batch of products on one list against one snapshot."""
        list_id = await self.resolve_price_list(
            session, price_list_id=price_list_id, client_id=client_id
        )
        if list_id is None:
            raise MissingPriceListError("A price list or a client with one is required")

        builder = await self._builder(session, product_ids, at)
        views = builder.build_views(product_ids, list_id, client_id)
        if only_promotions:
            views = promotions_only(views)
        logger.debug(
            "Resolved %d products on list %s (client=%s)",
            len(views),
            list_id,
            client_id,
        )
        return views

    # ------------------------------------------------------------------
    # Best promotion / validation
    # ------------------------------------------------------------------

    async def best_promotion(
        self,
        product_id: uuid.UUID,
        *,
        session: AsyncSession,
        price_list_id: Optional[int] = None,
        client_id: Optional[uuid.UUID] = None,
        at: Optional[datetime] = None,
    ) -> ResolvedPrice:
        """Resolution for the client's context; check ``has_promotion``."""
        await self._get_products([product_id], session)
        list_id = await self.resolve_price_list(
            session, price_list_id=price_list_id, client_id=client_id
        )
        if list_id is None:
            raise MissingPriceListError("A price list or a client with one is required")

        builder = await self._builder(session, [product_id], at)
        return builder.build_view(product_id, list_id, client_id)

    async def validate_campaign(
        self,
        product_id: uuid.UUID,
        campaign_id: int,
        *,
        session: AsyncSession,
        price_list_id: Optional[int] = None,
        client_id: Optional[uuid.UUID] = None,
        at: Optional[datetime] = None,
    ) -> CampaignValidation:
        """Check that *campaign_id* is still the winning promotion."""
        resolution = await self.best_promotion(
            product_id,
            session=session,
            price_list_id=price_list_id,
            client_id=client_id,
            at=at,
        )
        valid = resolution.has_promotion and resolution.winning_campaign_id == campaign_id
        if not valid:
            logger.info(
                "Campaign %s no longer wins for product %s (winner: %s)",
                campaign_id,
                product_id,
                resolution.winning_campaign_id,
            )
        return CampaignValidation(valid=valid, resolution=resolution)

    # ------------------------------------------------------------------
    # Cart quoting
    # ------------------------------------------------------------------

    async def quote_lines(
        self,
        lines: Sequence[LineRequest],
        *,
        session: AsyncSession,
        price_list_id: Optional[int] = None,
        client_id: Optional[uuid.UUID] = None,
        at: Optional[datetime] = None,
    ) -> list[QuotedLine]:
        """Price cart lines, all against the same snapshot and instant.

        Raises :class:`~storefront.pricing.PriceUnavailableError` for a
        product not sold on the resolved list.
        """
        product_ids = list(dict.fromkeys(line.product_id for line in lines))
        products = await self._get_products(product_ids, session)
        list_id = await self.resolve_price_list(
            session, price_list_id=price_list_id, client_id=client_id
        )
        if list_id is None:
            raise MissingPriceListError("A price list or a client with one is required")

        builder = await self._builder(session, product_ids, at)
        quoted: list[QuotedLine] = []
        for request in lines:
            resolved = builder.build_view(request.product_id, list_id, client_id)
            product = products[request.product_id]
            priced = price_line(
                resolved, request.quantity, sku=product.sku, product_name=product.name
            )
            confirmed = (
                request.campaign_id is None
                or request.campaign_id == priced.applied_campaign_id
            )
            quoted.append(QuotedLine(line=priced, campaign_confirmed=confirmed))
        return quoted
