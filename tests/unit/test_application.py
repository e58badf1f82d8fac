"""Tests for application factory and public endpoints."""

import pytest
from fastapi import status
from httpx import AsyncClient

from app.application import create_app


class TestApplication:
    def test_create_app_includes_routes(self):
        app = create_app()
        routes = {route.path for route in app.routes}
        for path in (
            "/",
            "/health",
            "/health/db",
            "/auth/register",
            "/auth/login",
            "/auth/me",
            "/subjects",
            "/subjects/stats",
            "/subjects/{subject_id}",
            "/topics/bulk",
            "/topics/subject/{subject_id}",
            "/topics/subject/{subject_id}/reorder",
            "/topics/{topic_id}/toggle",
            "/sessions/stats",
            "/sessions/{session_id}/start",
            "/sessions/{session_id}/complete",
            "/preferences",
            "/preferences/reset",
        ):
            assert path in routes

    def test_stats_routes_registered_before_id_routes(self):
        """/subjects/stats must not be captured by /subjects/{subject_id}."""
        app = create_app()
        paths = [route.path for route in app.routes]
        assert paths.index("/subjects/stats") < paths.index("/subjects/{subject_id}")
        assert paths.index("/sessions/stats") < paths.index("/sessions/{session_id}")

    @pytest.mark.asyncio
    async def test_root_banner(self, api_client: AsyncClient, settings):
        response = await api_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "message": settings.API_TITLE,
            "version": settings.API_VERSION,
        }

    @pytest.mark.asyncio
    async def test_health_endpoint(self, api_client: AsyncClient):
        response = await api_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health_db_endpoint(self, api_client: AsyncClient):
        response = await api_client.get("/health/db")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "healthy", "database": "connected"}
