from decimal import Decimal

import httpx
import pytest

from app.core_settings import get_settings
from app.infrastructure.catalog import SqlCatalogStore, HttpCatalogStore, get_catalog

def test_sql_catalog_price(db, add_sweet):
    item = add_sweet(price="180.00")
    catalog = SqlCatalogStore(db)
    assert catalog.get_unit_price(item) == Decimal("180")
    assert catalog.get_unit_price("missing") is None

class _StubClient:
    """Stands in for httpx.Client and answers from a handler."""

    def __init__(self, handler):
        self.handler = handler
        self.requested = []

    def __call__(self, timeout=None):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def get(self, url):
        self.requested.append(url)
        return self.handler(httpx.Request("GET", url))

@pytest.fixture
def stub_http(monkeypatch):
    def install(handler):
        stub = _StubClient(handler)
        monkeypatch.setattr(httpx, "Client", stub)
        return stub
    return install

@pytest.mark.parametrize("payload", [
    {"id": "x", "price": 99.5},
    {"success": True, "data": {"id": "x", "price": "99.50"}},
])
def test_http_catalog_price(stub_http, payload):
    stub = stub_http(lambda request: httpx.Response(200, json=payload, request=request))

    price = HttpCatalogStore("http://catalog:8000/").get_unit_price("x")

    assert price == Decimal("99.5")
    assert stub.requested == ["http://catalog:8000/sweets/x"]

def test_http_catalog_missing_item(stub_http):
    stub_http(lambda request: httpx.Response(404, json={"detail": "not found"}, request=request))
    assert HttpCatalogStore("http://catalog:8000").get_unit_price("x") is None

def test_http_catalog_unreachable(stub_http):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)
    stub_http(refuse)
    assert HttpCatalogStore("http://catalog:8000").get_unit_price("x") is None

def test_http_catalog_bad_price(stub_http):
    stub_http(lambda request: httpx.Response(200, json={"price": "free"}, request=request))
    assert HttpCatalogStore("http://catalog:8000").get_unit_price("x") is None

def test_get_catalog_defaults_to_database(db):
    assert isinstance(get_catalog(db), SqlCatalogStore)

def test_get_catalog_uses_http_when_configured(db, monkeypatch):
    monkeypatch.setenv("CATALOG_SERVICE_URL", "http://catalog:8000")
    get_settings.cache_clear()
    try:
        catalog = get_catalog(db)
    finally:
        get_settings.cache_clear()
    assert isinstance(catalog, HttpCatalogStore)
    assert catalog.base_url == "http://catalog:8000"
