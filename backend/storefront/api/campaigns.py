"""API routes for promotional campaigns."""

import uuid
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.api.products import (
    ResolvedPriceResponse,
    pricing_http_error,
    resolver,
    to_resolved_response,
)
from storefront.database import get_db
from storefront.models import Campaign

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


class CampaignResponse(BaseModel):
    id: int
    name: str
    description: str | None
    starts_at: datetime
    ends_at: datetime
    discount_kind: str
    discount_value: Decimal
    scope: str
    target_list_id: int | None
    active: bool

    model_config = {"from_attributes": True}


class CampaignDetailResponse(CampaignResponse):
    product_ids: list[uuid.UUID]
    client_ids: list[uuid.UUID]


class BestPromotionResponse(BaseModel):
    product_id: uuid.UUID
    price_list_id: int
    campaign_id: int | None
    campaign_name: str | None
    base_price: Decimal | None
    offer_price: Decimal | None
    savings: Decimal
    discount_percent: Decimal


class CampaignValidationResponse(BaseModel):
    valid: bool
    best: ResolvedPriceResponse


@router.get("", response_model=list[CampaignResponse])
async def list_campaigns(
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    query = select(Campaign).order_by(Campaign.id)
    if active_only:
        query = query.where(Campaign.active.is_(True))
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/best/product/{product_id}", response_model=BestPromotionResponse | None)
async def get_best_promotion(
    product_id: uuid.UUID,
    client_id: uuid.UUID | None = Query(None),
    price_list_id: int | None = Query(None),
    at: datetime | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Winning promotion for the caller's context, or ``null``."""
    try:
        view = await resolver.best_promotion(
            product_id,
            session=db,
            price_list_id=price_list_id,
            client_id=client_id,
            at=at,
        )
    except (LookupError, ValueError) as exc:
        raise pricing_http_error(exc)

    if not view.has_promotion:
        return None
    return BestPromotionResponse(
        product_id=view.product_id,
        price_list_id=view.price_list_id,
        campaign_id=view.winning_campaign_id,
        campaign_name=view.winning_campaign_name,
        base_price=view.base_price,
        offer_price=view.offer_price,
        savings=view.savings,
        discount_percent=view.discount_percent,
    )


@router.get("/validate/product/{product_id}", response_model=CampaignValidationResponse)
async def validate_promotion(
    product_id: uuid.UUID,
    campaign_id: int = Query(...),
    client_id: uuid.UUID | None = Query(None),
    price_list_id: int | None = Query(None),
    at: datetime | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Is ``campaign_id`` still the best promotion for this product?"""
    try:
        validation = await resolver.validate_campaign(
            product_id,
            campaign_id,
            session=db,
            price_list_id=price_list_id,
            client_id=client_id,
            at=at,
        )
    except (LookupError, ValueError) as exc:
        raise pricing_http_error(exc)
    return CampaignValidationResponse(
        valid=validation.valid,
        best=to_resolved_response(validation.resolution),
    )


@router.get("/{campaign_id}", response_model=CampaignDetailResponse)
async def get_campaign(campaign_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Campaign)
        .options(selectinload(Campaign.products), selectinload(Campaign.clients))
        .where(Campaign.id == campaign_id)
    )
    campaign = result.scalar_one_or_none()
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return CampaignDetailResponse(
        **CampaignResponse.model_validate(campaign).model_dump(),
        product_ids=[link.product_id for link in campaign.products],
        client_ids=[link.client_id for link in campaign.clients],
    )
