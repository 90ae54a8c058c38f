"""API routes for products and their resolved prices."""

import uuid
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.models import Product
from storefront.pricing import ResolvedPrice
from storefront.services.price_resolver import PriceResolver

router = APIRouter(prefix="/products", tags=["products"])

resolver = PriceResolver()


class ProductResponse(BaseModel):
    id: uuid.UUID
    sku: str
    name: str
    category: str | None
    unit: str | None
    image_url: str | None

    model_config = {"from_attributes": True}


class PromotionResponse(BaseModel):
    campaign_id: int
    name: str
    scope: str
    discount_kind: str
    discount_value: Decimal
    offer_price: Decimal


class ResolvedPriceResponse(BaseModel):
    product_id: uuid.UUID
    price_list_id: int
    price_list_name: str | None
    currency: str | None
    status: str
    base_price: Decimal | None
    offer_price: Decimal | None
    final_price: Decimal | None
    savings: Decimal
    discount_percent: Decimal
    has_promotion: bool
    winning_campaign_id: int | None
    winning_campaign_name: str | None
    promotions_count: int
    promotions: list[PromotionResponse]


class ProductPricesResponse(BaseModel):
    product: ProductResponse
    prices: list[ResolvedPriceResponse]


def to_resolved_response(view: ResolvedPrice) -> ResolvedPriceResponse:
    return ResolvedPriceResponse(
        product_id=view.product_id,
        price_list_id=view.price_list_id,
        price_list_name=view.price_list_name,
        currency=view.currency,
        status=view.status,
        base_price=view.base_price,
        offer_price=view.offer_price,
        final_price=view.final_price,
        savings=view.savings,
        discount_percent=view.discount_percent,
        has_promotion=view.has_promotion,
        winning_campaign_id=view.winning_campaign_id,
        winning_campaign_name=view.winning_campaign_name,
        promotions_count=len(view.promotions),
        promotions=[
            PromotionResponse(
                campaign_id=p.campaign_id,
                name=p.name,
                scope=p.scope.value,
                discount_kind=p.kind.value,
                discount_value=p.value,
                offer_price=p.offer_price,
            )
            for p in view.promotions
        ],
    )


def pricing_http_error(exc: Exception) -> HTTPException:
    """Unknown product/client ids are 404s; unresolvable contexts are 422s."""
    if isinstance(exc, LookupError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=422, detail=str(exc))


@router.get("/prices", response_model=list[ResolvedPriceResponse])
async def get_catalog_prices(
    price_list_id: int | None = Query(None),
    client_id: uuid.UUID | None = Query(None),
    category: str | None = Query(None),
    promotions_only: bool = Query(False, description="Only products with a promotion"),
    at: datetime | None = Query(None, description="Evaluate at this instant"),
    limit: int = Query(50, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Resolve prices for a page of active products on one list."""
    query = select(Product.id).where(Product.active.is_(True))
    if category:
        query = query.where(Product.category.ilike(f"%{category}%"))
    query = query.order_by(Product.name).offset(offset).limit(limit)
    product_ids = list((await db.execute(query)).scalars().all())

    try:
        views = await resolver.resolve_products(
            product_ids,
            session=db,
            price_list_id=price_list_id,
            client_id=client_id,
            only_promotions=promotions_only,
            at=at,
        )
    except (LookupError, ValueError) as exc:
        raise pricing_http_error(exc)
    return [to_resolved_response(v) for v in views]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/{product_id}/prices", response_model=ProductPricesResponse)
async def get_product_prices(
    product_id: uuid.UUID,
    price_list_id: int | None = Query(None, description="Restrict to one price list"),
    client_id: uuid.UUID | None = Query(None),
    at: datetime | None = Query(None, description="Evaluate at this instant"),
    db: AsyncSession = Depends(get_db),
):
    """Original price, offer price and promotions of a product.

    Without ``price_list_id`` every list the product is sold on is returned.
    A requested list the product is not sold on comes back with
    ``status == "unavailable"``.
    """
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    try:
        views = await resolver.resolve_product(
            product_id,
            session=db,
            price_list_id=price_list_id,
            client_id=client_id,
            at=at,
        )
    except (LookupError, ValueError) as exc:
        raise pricing_http_error(exc)

    return ProductPricesResponse(
        product=ProductResponse.model_validate(product),
        prices=[to_resolved_response(v) for v in views],
    )
