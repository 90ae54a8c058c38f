"""Promotional campaign model and its product/client links."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from storefront.database import Base


class Campaign(Base):
    __tablename__ = "campaigns"
    __table_args__ = (
        CheckConstraint("starts_at <= ends_at", name="ck_campaigns_window"),
        CheckConstraint(
            "scope <> 'PER_LIST' OR target_list_id IS NOT NULL",
            name="ck_campaigns_per_list_target",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # PERCENTAGE | FIXED_AMOUNT
    discount_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    discount_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # GLOBAL | PER_LIST | PER_CLIENT
    scope: Mapped[str] = mapped_column(String(20), nullable=False, default="GLOBAL")
    target_list_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("price_lists.id"), nullable=True
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    products = relationship(
        "CampaignProduct", back_populates="campaign", cascade="all, delete-orphan"
    )
    clients = relationship(
        "CampaignClient", back_populates="campaign", cascade="all, delete-orphan"
    )
    target_list = relationship("PriceList")


class CampaignProduct(Base):
    __tablename__ = "campaign_products"

    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id"), primary_key=True
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("products.id"), primary_key=True
    )
    fixed_offer_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    campaign = relationship("Campaign", back_populates="products")
    product = relationship("Product", back_populates="campaign_links")


class CampaignClient(Base):
    __tablename__ = "campaign_clients"

    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id"), primary_key=True
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("clients.id"), primary_key=True
    )

    campaign = relationship("Campaign", back_populates="clients")
    client = relationship("Client")
