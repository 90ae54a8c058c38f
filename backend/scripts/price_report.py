"""Print the resolved prices of every active product on one price list.

Useful to eyeball what a client (or an anonymous seller view) would see
before a campaign goes live: pass ``--at`` to evaluate at a future instant.

Run from the backend directory:
    PYTHONPATH=. python scripts/price_report.py --list 1 [--client UUID] [--at 2026-11-01T00:00]
"""

import argparse
import asyncio
import logging
import uuid
from datetime import datetime

from sqlalchemy import select

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


async def main(price_list_id: int, client_id: uuid.UUID | None, at: datetime | None, promos: bool):
    from storefront.database import async_session
    from storefront.models import Product
    from storefront.services.price_resolver import PriceResolver

    resolver = PriceResolver()

    async with async_session() as session:
        result = await session.execute(
            select(Product).where(Product.active.is_(True)).order_by(Product.name)
        )
        products = {p.id: p for p in result.scalars().all()}
        logger.info("Loaded %d active products.", len(products))

        views = await resolver.resolve_products(
            list(products),
            session=session,
            price_list_id=price_list_id,
            client_id=client_id,
            only_promotions=promos,
            at=at,
        )

    for view in views:
        name = products[view.product_id].name
        if not view.available:
            logger.info("  %-40s  not sold on this list", name)
        elif view.has_promotion:
            logger.info(
                "  %-40s  %10s -> %10s  (-%s%%, campaign %s, %d eligible)",
                name,
                view.base_price,
                view.offer_price,
                view.discount_percent,
                view.winning_campaign_id,
                len(view.promotions),
            )
        else:
            logger.info("  %-40s  %10s", name, view.base_price)

    promoted = sum(1 for v in views if v.has_promotion)
    logger.info("%d of %d products carry a promotion.", promoted, len(views))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--list", type=int, required=True, dest="price_list_id")
    parser.add_argument("--client", type=uuid.UUID, default=None)
    parser.add_argument("--at", type=datetime.fromisoformat, default=None)
    parser.add_argument("--promotions-only", action="store_true")
    args = parser.parse_args()
    asyncio.run(main(args.price_list_id, args.client, args.at, args.promotions_only))
