"""Application services."""

from storefront.services.catalog_snapshot import CatalogSnapshotLoader
from storefront.services.price_resolver import PriceResolver

__all__ = [
    "CatalogSnapshotLoader",
    "PriceResolver",
]
