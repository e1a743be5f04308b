"""
Tests for the public directory endpoints.
"""
import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from tradedir.main import app
from tradedir.api.v1.directory import handle_ranked_products
from tradedir.dependencies.directory import get_directory_service
from tradedir.services.directory_ranking import DirectoryRankingService
from tradedir.services.plan_resolver import ActivePlanResolver
from fakes import NOW, FailingListingSource, make_listings


client = TestClient(app)

PRODUCTS_URL = "/api/v1/dir/products"


@pytest.fixture
def directory_service(tiered_catalog, category_resolver):
    """Install a fake-backed ranking service for the duration of a test."""
    listings, subscriptions = tiered_catalog
    service = DirectoryRankingService(
        listings=listings,
        plan_resolver=ActivePlanResolver(subscriptions),
        categories=category_resolver,
        clock=lambda: NOW,
    )
    app.dependency_overrides[get_directory_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def test_root_endpoint():
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Trade Directory API"


def test_health_check():
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "trade-directory-api"


class TestProductsEndpoint:
    """GET /api/v1/dir/products"""

    def test_success_envelope(self, directory_service):
        response = client.get(PRODUCTS_URL, params={"limit": 4})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 18
        assert [row["id"] for row in body["data"]] == [
            "vendor-diamond-1", "vendor-diamond-2", "vendor-diamond-3", "vendor-trial-1",
        ]
        first = body["data"][0]
        assert first["vendor_plan_tier"] == "DIAMOND"
        assert first["vendor_plan_priority"] == 700
        assert first["vendors"]["plan_name"] == "Diamond Annual"

    def test_search_alias(self, directory_service):
        response = client.get("/api/v1/dir/search", params={"limit": 4, "page": 3})

        assert response.status_code == 200
        body = response.json()
        assert [row["id"] for row in body["data"]] == [f"vendor-plain-{n}" for n in range(1, 5)]
        assert body["count"] == 18

    def test_page_past_end(self, directory_service):
        response = client.get(PRODUCTS_URL, params={"limit": 4, "page": 50})

        body = response.json()
        assert body["data"] == []
        assert body["count"] == 18

    def test_bad_pagination_is_clamped(self, directory_service):
        response = client.get(PRODUCTS_URL, params={"page": "abc", "limit": "500"})

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 18
        listings = directory_service.listings
        assert all(call[3] <= 50 for call in listings.fetch_calls)

    def test_text_query_alias(self, directory_service):
        response = client.get(PRODUCTS_URL, params={"term": "vendor-trial"})

        body = response.json()
        assert body["count"] == 5
        assert {row["vendor_id"] for row in body["data"]} == {"vendor-trial"}

    def test_upstream_failure_returns_error_envelope(self, tiered_catalog, category_resolver):
        _, subscriptions = tiered_catalog
        service = DirectoryRankingService(
            listings=FailingListingSource(make_listings("vendor-diamond", 3), fail_after=1),
            plan_resolver=ActivePlanResolver(subscriptions),
            categories=category_resolver,
            clock=lambda: NOW,
        )
        app.dependency_overrides[get_directory_service] = lambda: service
        try:
            response = client.get(PRODUCTS_URL)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "DIR_PRODUCTS_FAILED",
            "details": "products count timed out",
        }


def test_unknown_route_is_not_found():
    response = client.get("/api/v1/dir/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_handle_ranked_products_direct(directory_service):
    """The shared handler works without the HTTP stack."""
    scope = {
        "type": "http",
        "method": "GET",
        "path": PRODUCTS_URL,
        "query_string": b"limit=2&page=2",
        "headers": [],
    }

    result = await handle_ranked_products(Request(scope), directory_service)

    assert [row["id"] for row in result.data] == ["vendor-diamond-3", "vendor-trial-1"]
    assert result.count == 18
