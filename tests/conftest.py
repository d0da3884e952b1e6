import random
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.models.product import Product
from app.domain.repositories.catalog_client import CatalogFetchError
from app.domain.repositories.interaction_store import InMemoryInteractionStore
from app.domain.services.interaction_log import InteractionLog
from app.domain.services.product_cache import ProductCache
from app.domain.services.recommendation_svc import RecoContext

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class Clock:
    def __init__(self, now: datetime = NOW):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kw) -> None:
        self.current += timedelta(**kw)


class FakeCatalog:
    def __init__(self, products=None, error: Exception | None = None):
        self.products = list(products or [])
        self.error = error
        self.calls = 0

    async def list_products(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.products)


CATALOG = [
    {"_id": "p1", "name": "Glass Tank 60L", "category": "Tanks", "tags": ["glass", "freshwater"]},
    {"_id": "p2", "name": "Rimless Tank 30L", "category": "Tanks", "tags": ["glass", "nano"]},
    {"_id": "p3", "name": "Flake Food", "category": "Food", "tags": ["tropical"]},
    {"_id": "p4", "name": "Frozen Bloodworms", "category": "Food", "tags": ["frozen", "freshwater"]},
    {"_id": "p5", "name": "Driftwood", "category": "Decor", "tags": ["natural"]},
    {"_id": "p6", "name": "Ceramic Castle", "category": "Decor", "tags": []},
]


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store():
    return InMemoryInteractionStore()


@pytest.fixture
def catalog():
    return FakeCatalog(CATALOG)


@pytest.fixture
def log(store, clock):
    return InteractionLog(store, now=clock)


@pytest.fixture
def ctx(log, catalog, clock):
    return RecoContext(log, ProductCache(catalog), rng=random.Random(7), now=clock)


def make_products(*specs):
    """specs: (id, category, tags)"""
    return [Product(id=pid, category=cat, tags=list(tags)) for pid, cat, tags in specs]


@pytest.fixture
def failing_catalog():
    return FakeCatalog(error=CatalogFetchError("connection refused"))
