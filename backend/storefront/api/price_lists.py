"""API routes for price lists."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.models import PriceList

router = APIRouter(prefix="/price-lists", tags=["price-lists"])


class PriceListResponse(BaseModel):
    id: int
    name: str
    currency: str
    active: bool

    model_config = {"from_attributes": True}


@router.get("", response_model=list[PriceListResponse])
async def list_price_lists(
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    query = select(PriceList).order_by(PriceList.id)
    if active_only:
        query = query.where(PriceList.active.is_(True))
    result = await db.execute(query)
    return result.scalars().all()
