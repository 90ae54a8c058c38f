"""API routes for cart quoting.

Prices cart lines with the promotion that currently wins, recording which
campaign produced each unit price.  Nothing is persisted here.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.products import pricing_http_error, resolver
from storefront.database import get_db
from storefront.pricing import PriceUnavailableError
from storefront.services.price_resolver import LineRequest

router = APIRouter(prefix="/cart", tags=["cart"])


class CartLineRequest(BaseModel):
    product_id: uuid.UUID
    quantity: Decimal = Field(gt=0)
    campaign_id: int | None = None


class CartQuoteRequest(BaseModel):
    client_id: uuid.UUID | None = None
    price_list_id: int | None = None
    at: datetime | None = None
    items: list[CartLineRequest] = Field(min_length=1)


class QuotedLineResponse(BaseModel):
    product_id: uuid.UUID
    sku: str | None
    product_name: str | None
    price_list_id: int
    quantity: Decimal
    list_price: Decimal
    unit_price: Decimal
    subtotal: Decimal
    discount_reason: str | None
    applied_campaign_id: int | None
    applied_campaign_name: str | None
    campaign_confirmed: bool


class CartQuoteResponse(BaseModel):
    items: list[QuotedLineResponse]
    total: Decimal
    savings: Decimal


@router.post("/quote", response_model=CartQuoteResponse)
async def quote_cart(data: CartQuoteRequest, db: AsyncSession = Depends(get_db)):
    try:
        quoted = await resolver.quote_lines(
            [
                LineRequest(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    campaign_id=item.campaign_id,
                )
                for item in data.items
            ],
            session=db,
            price_list_id=data.price_list_id,
            client_id=data.client_id,
            at=data.at,
        )
    except PriceUnavailableError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except (LookupError, ValueError) as exc:
        raise pricing_http_error(exc)

    items = []
    total = Decimal("0.00")
    savings = Decimal("0.00")
    for q in quoted:
        line = q.line
        items.append(
            QuotedLineResponse(
                product_id=line.product_id,
                sku=line.sku,
                product_name=line.product_name,
                price_list_id=line.price_list_id,
                quantity=line.quantity,
                list_price=line.list_price,
                unit_price=line.unit_price,
                subtotal=line.subtotal,
                discount_reason=line.discount_reason,
                applied_campaign_id=line.applied_campaign_id,
                applied_campaign_name=(
                    line.applied_campaign.name if line.applied_campaign else None
                ),
                campaign_confirmed=q.campaign_confirmed,
            )
        )
        total += line.subtotal
        savings += (line.list_price - line.unit_price) * line.quantity

    return CartQuoteResponse(items=items, total=total, savings=savings.quantize(Decimal("0.01")))
