"""Fixtures for integration tests: SQLite database and API client."""

from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api.dependencies import build_container, reset_dependencies, set_container
from api.main import app
from core.data.models.base import Base
from core.domain.entities import Category, CustomerAccount, Product, Vendor
from core.domain.value_objects import CommissionRule
from core.settings import AppSettings
from core.settings.modules import (
    CommissionSettings,
    CourierSettings,
    DatabaseSettings,
    NotificationSettings,
    RenewalSettings,
)

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


def seed_products():
    return [
        Product(id="p1", title="Rice 5kg", price=Decimal("100"), stock=10, vendor_id="v1", category_id="c1"),
        Product(id="p2", title="Lentils 1kg", price=Decimal("50"), stock=5, vendor_id="v1"),
    ]


@pytest.fixture
def test_settings() -> AppSettings:
    return AppSettings(
        commission=CommissionSettings(),
        courier=CourierSettings(enabled=False),
        renewal=RenewalSettings(enabled=False),
        database=DatabaseSettings(backend="memory"),
        notifications=NotificationSettings(webhook_enabled=False),
    )


@pytest.fixture
def container(test_settings):
    container = build_container(test_settings)
    for product in seed_products():
        container.catalog.add_product(product)
    container.catalog.add_vendor(Vendor(id="v1", store_name="Green Store"))
    container.catalog.add_category(
        Category(id="c1", name="Groceries", commission=CommissionRule(type="percentage", value=Decimal("10")))
    )
    container.catalog.add_customer(
        CustomerAccount(id="u-blocked", email="blocked@example.com", is_blacklisted=True, blacklist_reason="fraud")
    )
    return container


@pytest.fixture
def test_client(container):
    """FastAPI test client over an in-memory container."""
    set_container(container)
    yield TestClient(app)
    reset_dependencies()
