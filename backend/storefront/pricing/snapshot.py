"""In-memory snapshots of the price list and campaign providers.

A :class:`PricingSnapshot` is built once per logical operation (a screen
load, a cart recalculation) and every product of that operation is resolved
against it, so a campaign edited mid-pass cannot skew the results.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from storefront.pricing.types import Campaign, PriceList, ProductPrice


class PriceBook:
    """Base prices per ``(product, price list)``.

    Prices on inactive lists are dropped on construction: for resolution
    purposes a product is simply not sold on a deactivated channel.
    """

    def __init__(self, price_lists: Iterable[PriceList], prices: Iterable[ProductPrice]):
        self._lists: dict[int, PriceList] = {pl.id: pl for pl in price_lists}
        self._prices: dict[tuple[uuid.UUID, int], Decimal] = {}
        for price in prices:
            price_list = self._lists.get(price.price_list_id)
            if price_list is None or not price_list.active:
                continue
            self._prices[(price.product_id, price.price_list_id)] = price.amount

    def price_list(self, price_list_id: int) -> Optional[PriceList]:
        return self._lists.get(price_list_id)

    @property
    def price_lists(self) -> list[PriceList]:
        return sorted(self._lists.values(), key=lambda pl: pl.id)

    def base_price(self, product_id: uuid.UUID, price_list_id: int) -> Optional[Decimal]:
        """Base price, or ``None`` when the product is not sold on the list."""
        return self._prices.get((product_id, price_list_id))

    def lists_for(self, product_id: uuid.UUID) -> list[int]:
        """Ids of the active lists *product_id* has a price in, ascending."""
        return sorted(list_id for (pid, list_id) in self._prices if pid == product_id)


class CampaignCatalog:
    """Campaigns indexed by the products they are linked to."""

    def __init__(self, campaigns: Iterable[Campaign]):
        self._campaigns: tuple[Campaign, ...] = tuple(sorted(campaigns, key=lambda c: c.id))
        self._by_product: dict[uuid.UUID, list[Campaign]] = {}
        for campaign in self._campaigns:
            for product_id in campaign.product_ids:
                self._by_product.setdefault(product_id, []).append(campaign)

    def __iter__(self):
        return iter(self._campaigns)

    def __len__(self) -> int:
        return len(self._campaigns)

    def get(self, campaign_id: int) -> Optional[Campaign]:
        for campaign in self._campaigns:
            if campaign.id == campaign_id:
                return campaign
        return None

    def for_product(self, product_id: uuid.UUID) -> list[Campaign]:
        """Campaigns linked to *product_id*, ordered by campaign id."""
        return list(self._by_product.get(product_id, ()))


@dataclass(frozen=True)
class PricingSnapshot:
    price_book: PriceBook
    campaigns: CampaignCatalog

    @classmethod
    def build(
        cls,
        price_lists: Iterable[PriceList],
        prices: Iterable[ProductPrice],
        campaigns: Iterable[Campaign],
    ) -> "PricingSnapshot":
        return cls(
            price_book=PriceBook(price_lists, prices),
            campaigns=CampaignCatalog(campaigns),
        )
