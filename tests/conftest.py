from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from protein_orders.config import Settings
from protein_orders.database import create_engine, create_record_store
from protein_orders.infrastructure.db_schema import PRODUCTS
from protein_orders.infrastructure.repositories import StoreOrderRepository, StoreProductRepository

CATALOG = [
    {
        "id": "PZ001",
        "name": "Prozis Bar - Choco Blast",
        "price": Decimal("2.00"),
        "currency": "EUR",
        "in_stock": "true",
        "description": "Delicious chocolate protein bar with 20g of protein.",
    },
    {
        "id": "PZ002",
        "name": "Prozis Bar - Peanut Butter Power",
        "price": Decimal("2.00"),
        "currency": "EUR",
        "in_stock": "true",
    },
    {
        "id": "PZ004",
        "name": "Prozis Bar - Berry Blast",
        "price": Decimal("2.50"),
        "currency": "EUR",
        "in_stock": "true",
    },
    {
        "id": "PZ099",
        "name": "Prozis Bar - Discontinued Mint",
        "price": Decimal("1.75"),
        "currency": "EUR",
        "in_stock": "false",
    },
]


class TickingClock:
    """Each call returns a moment one second after the previous one."""

    def __init__(self, start: datetime):
        self._now = start

    def __call__(self) -> datetime:
        current = self._now
        self._now += timedelta(seconds=1)
        return current


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))
        for layer in ("domain", "application", "infrastructure", "presentation", "integration"):
            if f"/{layer}/" in test_path:
                item.add_marker(getattr(pytest.mark, layer))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        POSTGRES_CONNECTION_STRING="",
        SQLITE_FALLBACK_URL=f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}",
    )


@pytest.fixture
async def store(settings):
    engine = create_engine(settings)
    record_store = await create_record_store(engine, settings)
    yield record_store
    await engine.dispose()


@pytest.fixture
async def seeded_store(store):
    for product in CATALOG:
        await store.put(PRODUCTS, product)
    return store


@pytest.fixture
def products(seeded_store):
    return StoreProductRepository(seeded_store)


@pytest.fixture
def orders(seeded_store):
    return StoreOrderRepository(seeded_store)


@pytest.fixture
def clock():
    return TickingClock(datetime(2025, 5, 11, 13, 0, tzinfo=timezone.utc))
