"""Unit tests for the GET /tenant route.

Runs against the real application so the TenancyError handler maps
resolution failures to their status codes and generic messages.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from main import app
from tenancy.dependencies.resolver import (
    get_franchise_repository,
    get_tenant_resolver,
)


@pytest.fixture
def overrides(resolver, franchise_repository) -> Iterator[None]:
    app.dependency_overrides[get_tenant_resolver] = lambda: resolver
    app.dependency_overrides[get_franchise_repository] = lambda: franchise_repository
    yield
    app.dependency_overrides.clear()


def _client(host: str) -> TestClient:
    return TestClient(app, base_url=f"http://{host}")


@pytest.mark.usefixtures("overrides")
class TestGetTenant:
    """Tests for GET /tenant."""

    def test_city_subdomain_resolves(self):
        response = _client("riverside.example.com").get("/tenant")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "tenant": "riverside",
            "source": "hostname",
            "hostname": "riverside.example.com",
            "is_fallback": False,
            "display_name": "Riverside",
            "locale": "en-US",
        }

    def test_override_on_city_host_is_403(self):
        response = _client("riverside.example.com").get(
            "/tenant", params={"tenant": "other"}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"detail": "Access denied"}

    def test_empty_override_on_city_host_is_403(self):
        response = _client("riverside.example.com").get("/tenant?tenant=")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_localhost_override_resolves_from_query(self):
        response = _client("localhost:3000").get(
            "/tenant", params={"tenant": "riverside"}
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["tenant"] == "riverside"
        assert body["source"] == "query"
        assert body["is_fallback"] is True

    def test_localhost_unknown_override_is_400(self):
        response = _client("localhost:3000").get(
            "/tenant", params={"tenant": "nowhere"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "nowhere" not in response.text

    def test_localhost_without_tenant_gets_actionable_message(self):
        response = _client("localhost:3000").get("/tenant")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "?tenant=<city>" in response.json()["detail"]

    def test_unknown_city_host_message_is_generic(self):
        response = _client("nowhere.example.com").get("/tenant")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"detail": "City not detected"}

    def test_franchise_detail_failure_after_resolution_is_500(
        self, franchise_repository, franchises
    ):
        riverside = franchises["riverside"]

        async def by_subdomain(subdomain: str):
            return riverside

        franchise_repository.get_by_subdomain.side_effect = by_subdomain
        franchise_repository.get_by_slug.side_effect = OperationalError(
            "SELECT", {}, Exception("down")
        )

        response = _client("riverside.example.com").get("/tenant")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"detail": "Failed to load city"}
