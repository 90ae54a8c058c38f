"""Value types shared by the price resolution engine.

Everything here is immutable.  Instances are built once per resolution pass
(usually by :mod:`storefront.services.catalog_snapshot`) and then only read.
"""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Literal, Mapping, Optional


class CampaignScope(str, enum.Enum):
    """Where a campaign applies."""

    GLOBAL = "GLOBAL"
    PER_LIST = "PER_LIST"
    PER_CLIENT = "PER_CLIENT"


class DiscountKind(str, enum.Enum):
    """How a campaign's discount value is interpreted."""

    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


PriceStatus = Literal["available", "unavailable"]


@dataclass(frozen=True, slots=True)
class PriceList:
    """A commercial channel (general, wholesale, horeca...)."""

    id: int
    name: str
    currency: str
    active: bool = True


@dataclass(frozen=True, slots=True)
class ProductPrice:
    """Base (undiscounted) price of one product in one price list."""

    product_id: uuid.UUID
    price_list_id: int
    amount: Decimal


@dataclass(frozen=True, slots=True)
class DiscountRule:
    kind: DiscountKind
    value: Decimal


@dataclass(frozen=True, slots=True)
class Campaign:
    """A promotional rule together with its product and client links.

    ``product_ids`` is the set of linked products; a campaign without links
    discounts nothing.  ``client_ids`` is only consulted for
    :attr:`CampaignScope.PER_CLIENT`.  ``fixed_offer_prices`` maps a linked
    product to a negotiated price that overrides :attr:`rule`.
    """

    id: int
    name: str
    starts_at: datetime
    ends_at: datetime
    rule: DiscountRule
    scope: CampaignScope = CampaignScope.GLOBAL
    active: bool = True
    description: Optional[str] = None
    target_list_id: Optional[int] = None
    product_ids: frozenset[uuid.UUID] = frozenset()
    client_ids: frozenset[uuid.UUID] = frozenset()
    fixed_offer_prices: Mapping[uuid.UUID, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.starts_at > self.ends_at:
            raise ValueError(
                f"Campaign {self.id}: start {self.starts_at} is after end {self.ends_at}"
            )
        if self.scope is CampaignScope.PER_LIST and self.target_list_id is None:
            raise ValueError(f"Campaign {self.id}: PER_LIST scope needs target_list_id")

    def applies_to_product(self, product_id: uuid.UUID) -> bool:
        return product_id in self.product_ids

    def fixed_offer_price(self, product_id: uuid.UUID) -> Optional[Decimal]:
        return self.fixed_offer_prices.get(product_id)


@dataclass(frozen=True, slots=True)
class PricingContext:
    """The channel and (optional) client identity a price is resolved for."""

    price_list_id: int
    client_id: Optional[uuid.UUID] = None


@dataclass(frozen=True, slots=True)
class BestDeal:
    """Outcome of :func:`storefront.pricing.selector.select_best`."""

    price: Decimal
    savings: Decimal
    discount_percent: Decimal
    winning_campaign: Optional[Campaign] = None

    @property
    def winning_campaign_id(self) -> Optional[int]:
        return self.winning_campaign.id if self.winning_campaign else None


@dataclass(frozen=True, slots=True)
class EligiblePromotion:
    """A campaign that matched the query, with the price it computes."""

    campaign_id: int
    name: str
    scope: CampaignScope
    kind: DiscountKind
    value: Decimal
    offer_price: Decimal


@dataclass(frozen=True, slots=True)
class ResolvedPrice:
    """Price of one product in one price list for one client context.

    ``status == "unavailable"`` means the product is not sold on the list;
    ``base_price`` is then ``None`` and every other amount is meaningless.
    """

    product_id: uuid.UUID
    price_list_id: int
    status: PriceStatus
    price_list_name: Optional[str] = None
    currency: Optional[str] = None
    base_price: Optional[Decimal] = None
    offer_price: Optional[Decimal] = None
    savings: Decimal = Decimal("0.00")
    discount_percent: Decimal = Decimal("0")
    winning_campaign_id: Optional[int] = None
    winning_campaign_name: Optional[str] = None
    promotions: tuple[EligiblePromotion, ...] = ()

    @property
    def available(self) -> bool:
        return self.status == "available"

    @property
    def has_promotion(self) -> bool:
        return (
            self.winning_campaign_id is not None
            and self.offer_price is not None
            and self.base_price is not None
            and self.offer_price < self.base_price
        )

    @property
    def final_price(self) -> Optional[Decimal]:
        """The unit price actually charged."""
        if self.has_promotion:
            return self.offer_price
        return self.base_price
