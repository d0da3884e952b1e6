# app/domain/repositories/catalog_client.py
from __future__ import annotations
from typing import Any, List
import logging
import httpx

logger = logging.getLogger(__name__)


class CatalogFetchError(Exception):
    """The marketplace catalog could not be fetched or decoded."""


def extract_products(body: Any) -> List[dict]:
    """
    The browse endpoint answers either {"products": [...], ...} or a bare
    array depending on the backend version. Anything else is treated as empty.
    """
    if isinstance(body, dict) and isinstance(body.get("products"), list):
        return body["products"]
    if isinstance(body, list):
        return body
    return []


class CatalogClient:
    """
    Adapter over the marketplace backend listing retailer products.
    Raises CatalogFetchError on any failure; retries are not attempted.
    """
    def __init__(self, client: httpx.AsyncClient, url: str, *, fetch_limit: int = 1000):
        self.client = client
        self.url = url
        self.fetch_limit = fetch_limit

    async def list_products(self) -> List[dict]:
        try:
            resp = await self.client.get(self.url, params={"limit": self.fetch_limit})
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CatalogFetchError(f"catalog fetch failed url={self.url}: {e}") from e

        products = extract_products(body)
        logger.debug("catalog fetched url=%s items=%s", self.url, len(products))
        return products

    async def aclose(self) -> None:
        await self.client.aclose()
