import asyncio
import logging
import time
from typing import Dict, List, Optional, Protocol

from pydantic import ValidationError

from app.domain.models.product import Product

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    async def list_products(self) -> List[dict]: ...


class ProductCache:
    """
    In-memory snapshot of the catalog, fetched once.

    A failed or empty fetch leaves the cache unloaded so the next call tries
    again. There is no automatic refresh; call invalidate() to force one.
    Concurrent callers on a cold cache share a single fetch.
    """

    def __init__(self, catalog: CatalogSource):
        self.catalog = catalog
        self._products: List[Product] = []
        self._by_id: Dict[str, Product] = {}
        self._fetch_lock = asyncio.Lock()
        self.loaded_at: Optional[float] = None

    @property
    def loaded(self) -> bool:
        return bool(self._products)

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    async def ensure_loaded(self) -> List[Product]:
        if self._products:
            return list(self._products)

        async with self._fetch_lock:
            # another caller may have filled the cache while we waited
            if self._products:
                return list(self._products)
            return await self._fetch()

    async def _fetch(self) -> List[Product]:
        t0 = time.perf_counter()
        try:
            raw = await self.catalog.list_products()
        except Exception as e:
            logger.warning("product_cache fetch failed, using empty list err=%s", e)
            return []

        products: List[Product] = []
        for item in raw:
            try:
                products.append(Product.model_validate(item))
            except ValidationError as e:
                logger.warning("product_cache skipping malformed product err=%s", e.errors()[:1])

        self._products = products
        self._by_id = index_by_keys(products)
        self.loaded_at = time.time() if products else None
        logger.info("product_cache loaded items=%s fetch_time=%.3fs", len(products), time.perf_counter() - t0)
        return list(products)

    def invalidate(self) -> None:
        logger.info("product_cache invalidated items=%s", len(self._products))
        self._products = []
        self._by_id = {}
        self.loaded_at = None

    def find(self, product_id: str) -> Optional[Product]:
        """Look up by `id` or `_id`."""
        return self._by_id.get(product_id)


def index_by_keys(products: List[Product]) -> Dict[str, Product]:
    """Map every id of every product to it; the first product wins on collisions."""
    by_id: Dict[str, Product] = {}
    for p in products:
        for key in p.keys:
            by_id.setdefault(key, p)
    return by_id
