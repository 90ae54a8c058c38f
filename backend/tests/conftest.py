"""Pytest fixtures for the storefront pricing tests."""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from storefront.database import Base, get_db
from storefront.main import app
from storefront.models import (
    Campaign,
    CampaignClient,
    CampaignProduct,
    Client,
    PriceList,
    Product,
    ProductPrice,
)
from storefront.pricing import Campaign as PricingCampaign
from storefront.pricing import CampaignScope, DiscountKind, DiscountRule


# Use SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Pure engine helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_campaign():
    """Factory for engine-level campaigns running around :data:`NOW`."""

    def _make(
        id: int = 1,
        kind: DiscountKind = DiscountKind.PERCENTAGE,
        value: str | Decimal = "10",
        scope: CampaignScope = CampaignScope.GLOBAL,
        **overrides,
    ) -> PricingCampaign:
        fields = {
            "id": id,
            "name": f"Campaign {id}",
            "starts_at": NOW - timedelta(days=7),
            "ends_at": NOW + timedelta(days=7),
            "rule": DiscountRule(kind=kind, value=Decimal(value)),
            "scope": scope,
        }
        fields.update(overrides)
        return PricingCampaign(**fields)

    return _make


# ---------------------------------------------------------------------------
# Database / API
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def setup_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with test_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


@pytest_asyncio.fixture
async def client(setup_db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def db(setup_db):
    async with test_session() as session:
        yield session


@pytest_asyncio.fixture
async def sample_price_lists(db: AsyncSession) -> dict[str, PriceList]:
    lists = {
        "general": PriceList(id=1, name="General", currency="USD", active=True),
        "wholesale": PriceList(id=2, name="Mayorista", currency="USD", active=True),
        "horeca": PriceList(id=3, name="Horeca", currency="USD", active=False),
    }
    db.add_all(lists.values())
    await db.commit()
    return lists


@pytest_asyncio.fixture
async def sample_products(
    db: AsyncSession, sample_price_lists: dict[str, PriceList]
) -> dict[str, Product]:
    products = {
        "oil": Product(
            id=uuid.uuid4(),
            sku="ACE-001",
            name="Aceite Vegetal 1L",
            category="Abarrotes",
            unit="un",
        ),
        "rice": Product(
            id=uuid.uuid4(),
            sku="ARR-005",
            name="Arroz Grado 1 5kg",
            category="Abarrotes",
            unit="un",
        ),
    }
    db.add_all(products.values())
    await db.flush()
    db.add_all(
        [
            ProductPrice(product_id=products["oil"].id, price_list_id=1, amount=Decimal("100.00")),
            ProductPrice(product_id=products["oil"].id, price_list_id=2, amount=Decimal("90.00")),
            ProductPrice(product_id=products["oil"].id, price_list_id=3, amount=Decimal("85.00")),
            ProductPrice(product_id=products["rice"].id, price_list_id=1, amount=Decimal("50.00")),
        ]
    )
    await db.commit()
    return products


@pytest_asyncio.fixture
async def sample_client(
    db: AsyncSession, sample_price_lists: dict[str, PriceList]
) -> Client:
    customer = Client(id=uuid.uuid4(), name="Minimarket Don Pepe", price_list_id=2)
    db.add(customer)
    await db.commit()
    return customer


@pytest_asyncio.fixture
async def sample_campaigns(
    db: AsyncSession,
    sample_products: dict[str, Product],
    sample_client: Client,
) -> dict[str, Campaign]:
    """Campaigns around the real current time, so API calls without ``at`` see them."""
    current = datetime.now(timezone.utc)
    running = {"starts_at": current - timedelta(days=1), "ends_at": current + timedelta(days=6)}
    oil = sample_products["oil"]
    rice = sample_products["rice"]

    campaigns = {
        "summer": Campaign(
            id=1, name="Promo Verano", discount_kind="PERCENTAGE",
            discount_value=Decimal("20"), scope="GLOBAL", active=True, **running,
            products=[CampaignProduct(product_id=oil.id)],
        ),
        "general_list": Campaign(
            id=2, name="Lista General -10", discount_kind="FIXED_AMOUNT",
            discount_value=Decimal("10"), scope="PER_LIST", target_list_id=1,
            active=True, **running,
            products=[CampaignProduct(product_id=oil.id)],
        ),
        "loyal_client": Campaign(
            id=3, name="Cliente Frecuente", discount_kind="FIXED_AMOUNT",
            discount_value=Decimal("40"), scope="PER_CLIENT", active=True, **running,
            products=[CampaignProduct(product_id=oil.id)],
            clients=[CampaignClient(client_id=sample_client.id)],
        ),
        "expired": Campaign(
            id=4, name="Promo Vencida", discount_kind="PERCENTAGE",
            discount_value=Decimal("90"), scope="GLOBAL", active=True,
            starts_at=current - timedelta(days=30), ends_at=current - timedelta(days=2),
            products=[CampaignProduct(product_id=oil.id)],
        ),
        "rice_clearance": Campaign(
            id=5, name="Liquidacion Arroz", discount_kind="FIXED_AMOUNT",
            discount_value=Decimal("75"), scope="GLOBAL", active=True, **running,
            products=[CampaignProduct(product_id=rice.id)],
        ),
    }
    db.add_all(campaigns.values())
    await db.commit()
    return campaigns
