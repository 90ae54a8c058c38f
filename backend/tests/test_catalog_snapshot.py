"""Tests for the database-backed snapshot loader."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models import Campaign, CampaignProduct
from storefront.pricing import CampaignScope, DiscountKind
from storefront.services.catalog_snapshot import (
    CatalogSnapshotLoader,
    convert_campaigns,
    to_pricing_campaign,
)


def _row(**overrides) -> Campaign:
    fields = {
        "id": 99,
        "name": "Row",
        "starts_at": datetime(2026, 1, 1),
        "ends_at": datetime(2026, 1, 31),
        "discount_kind": "percentage",
        "discount_value": Decimal("15"),
        "scope": "GLOBAL",
        "active": True,
    }
    fields.update(overrides)
    return Campaign(**fields)


class TestConversion:
    def test_naive_timestamps_become_utc(self):
        campaign = to_pricing_campaign(_row())
        assert campaign.starts_at.tzinfo is timezone.utc
        assert campaign.rule.kind is DiscountKind.PERCENTAGE
        assert campaign.scope is CampaignScope.GLOBAL

    def test_fixed_offer_prices_come_from_links(self):
        row = _row()
        product_id = uuid.uuid4()
        other_id = uuid.uuid4()
        row.products = [
            CampaignProduct(campaign_id=99, product_id=product_id, fixed_offer_price=Decimal("12.50")),
            CampaignProduct(campaign_id=99, product_id=other_id),
        ]
        campaign = to_pricing_campaign(row)
        assert campaign.product_ids == {product_id, other_id}
        assert campaign.fixed_offer_price(product_id) == Decimal("12.50")
        assert campaign.fixed_offer_price(other_id) is None

    def test_malformed_rows_are_skipped(self):
        rows = [
            _row(id=1),
            _row(id=2, scope="PER_LIST", target_list_id=None),
            _row(id=3, scope="REGIONAL"),
            _row(id=4, starts_at=datetime(2026, 2, 1)),
        ]
        assert [c.id for c in convert_campaigns(rows)] == [1]


@pytest.mark.asyncio
async def test_load_snapshot(db: AsyncSession, sample_campaigns, sample_products):
    snapshot = await CatalogSnapshotLoader().load(session=db)
    oil = sample_products["oil"]

    assert snapshot.price_book.base_price(oil.id, 1) == Decimal("100.00")
    # Horeca is inactive: its price is dropped
    assert snapshot.price_book.base_price(oil.id, 3) is None
    assert snapshot.price_book.lists_for(oil.id) == [1, 2]
    assert [c.id for c in snapshot.campaigns.for_product(oil.id)] == [1, 2, 3, 4]


@pytest.mark.asyncio
async def test_load_snapshot_for_products(db: AsyncSession, sample_campaigns, sample_products):
    rice = sample_products["rice"]
    snapshot = await CatalogSnapshotLoader().load(product_ids=[rice.id], session=db)

    assert [c.id for c in snapshot.campaigns] == [5]
    assert snapshot.price_book.base_price(sample_products["oil"].id, 1) is None


@pytest.mark.asyncio
async def test_load_skips_inactive_campaigns(db: AsyncSession, sample_campaigns):
    sample_campaigns["summer"].active = False
    db.add(sample_campaigns["summer"])
    await db.commit()

    snapshot = await CatalogSnapshotLoader().load(session=db)
    assert snapshot.campaigns.get(1) is None

    everything = await CatalogSnapshotLoader().load(active_campaigns_only=False, session=db)
    campaign = everything.campaigns.get(1)
    assert campaign is not None and campaign.active is False
