"""SQLAlchemy models."""

from storefront.models.campaign import Campaign, CampaignClient, CampaignProduct
from storefront.models.client import Client
from storefront.models.price_list import PriceList, ProductPrice
from storefront.models.product import Product

__all__ = [
    "Campaign",
    "CampaignClient",
    "CampaignProduct",
    "Client",
    "PriceList",
    "Product",
    "ProductPrice",
]
