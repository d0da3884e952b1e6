import httpx
import pytest

from app.domain.repositories.catalog_client import CatalogClient, CatalogFetchError, extract_products

URL = "http://catalog.test/api/retailer-products/browse"


def _client(handler) -> CatalogClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CatalogClient(http, URL, fetch_limit=250)


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"success": True, "products": [{"_id": "a"}], "pagination": {}}, [{"_id": "a"}]),
        ([{"_id": "a"}, {"_id": "b"}], [{"_id": "a"}, {"_id": "b"}]),
        ({"products": None}, []),
        ("oops", []),
    ],
)
def test_extract_products_accepts_both_shapes(body, expected):
    assert extract_products(body) == expected


async def test_list_products_sends_limit():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["limit"] = request.url.params.get("limit")
        return httpx.Response(200, json={"products": [{"_id": "p1", "category": "Tanks"}]})

    client = _client(handler)
    products = await client.list_products()
    await client.aclose()

    assert seen["limit"] == "250"
    assert products == [{"_id": "p1", "category": "Tanks"}]


async def test_http_error_raises_fetch_error():
    client = _client(lambda request: httpx.Response(503, json={"message": "down"}))
    with pytest.raises(CatalogFetchError):
        await client.list_products()
    await client.aclose()


async def test_invalid_json_raises_fetch_error():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(CatalogFetchError):
        await client.list_products()
    await client.aclose()


async def test_connection_error_raises_fetch_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)
    with pytest.raises(CatalogFetchError):
        await client.list_products()
    await client.aclose()
