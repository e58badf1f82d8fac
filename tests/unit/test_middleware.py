"""Tests for the bearer token middleware."""

import pytest
from fastapi import status
from httpx import AsyncClient

from app.middleware.auth import BearerAuthMiddleware


class TestIsProtectedPath:
    @pytest.mark.parametrize(
        "path",
        ["/", "/health", "/health/db", "/auth/register", "/auth/login", "/docs"],
    )
    def test_public_paths(self, path):
        assert BearerAuthMiddleware.is_protected_path(path) is False

    @pytest.mark.parametrize(
        "path", ["/auth/me", "/subjects", "/topics/1", "/sessions/stats", "/preferences"]
    )
    def test_protected_paths(self, path):
        assert BearerAuthMiddleware.is_protected_path(path) is True

    def test_trailing_slash_ignored(self):
        assert BearerAuthMiddleware.is_protected_path("/health/") is False


class TestBearerAuthMiddleware:
    """Every non-auth route needs a valid bearer token."""

    @pytest.mark.asyncio
    async def test_missing_token_rejected(self, api_client: AsyncClient):
        # Act
        response = await api_client.get("/subjects")

        # Assert
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Access token required"

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_rejected(self, api_client: AsyncClient):
        response = await api_client.get(
            "/subjects", headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, api_client: AsyncClient):
        response = await api_client.get(
            "/subjects", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_unknown_route_still_requires_token(self, api_client: AsyncClient):
        response = await api_client.get("/nope")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_valid_token_reaches_route(
        self, api_client: AsyncClient, auth_headers: dict
    ):
        response = await api_client.get("/subjects", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"subjects": [], "total": 0}
