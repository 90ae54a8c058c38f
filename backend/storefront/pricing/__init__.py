"""Promotional price resolution engine.

Pure and synchronous: no I/O, no clock.  Callers pass a
:class:`PricingSnapshot` and the instant to resolve at.
"""

from storefront.pricing.discount import apply_discount, campaign_price, to_money
from storefront.pricing.order_line import (
    AppliedCampaign,
    PricedLine,
    PriceUnavailableError,
    price_line,
)
from storefront.pricing.scope import is_running, matches
from storefront.pricing.selector import discount_percent, select_best
from storefront.pricing.snapshot import CampaignCatalog, PriceBook, PricingSnapshot
from storefront.pricing.types import (
    BestDeal,
    Campaign,
    CampaignScope,
    DiscountKind,
    DiscountRule,
    EligiblePromotion,
    PriceList,
    PricingContext,
    ProductPrice,
    ResolvedPrice,
)
from storefront.pricing.view import PriceViewBuilder, promotions_only

__all__ = [
    "AppliedCampaign",
    "BestDeal",
    "Campaign",
    "CampaignCatalog",
    "CampaignScope",
    "DiscountKind",
    "DiscountRule",
    "EligiblePromotion",
    "PriceBook",
    "PriceList",
    "PriceUnavailableError",
    "PriceViewBuilder",
    "PricedLine",
    "PricingContext",
    "PricingSnapshot",
    "ProductPrice",
    "ResolvedPrice",
    "apply_discount",
    "campaign_price",
    "discount_percent",
    "is_running",
    "matches",
    "price_line",
    "promotions_only",
    "select_best",
    "to_money",
]
