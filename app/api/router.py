"""API router factory with core endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.utils.db import get_db_session

logger = logging.getLogger(__name__)


def create_public_router() -> APIRouter:
    """Create router with public endpoints (no token required).

    Returns:
        APIRouter with the service banner and health checks.
    """
    router = APIRouter()

    @router.get("/", tags=["Health"])
    async def root() -> dict:
        """Service banner."""
        return {"message": settings.API_TITLE, "version": settings.API_VERSION}

    @router.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
    async def health_check() -> dict:
        """Health check endpoint - basic application health.

        Returns:
            Health status response.
        """
        return {"status": "healthy", "service": "study-planner"}

    @router.get(
        "/health/db",
        tags=["Health"],
        status_code=status.HTTP_200_OK,
        response_model=None,
    )
    async def health_check_db(
        db: AsyncSession = Depends(get_db_session),
    ) -> JSONResponse:
        """Deep health check - includes database connectivity check.

        Returns:
            Health status with database connectivity information.
        """
        try:
            await db.execute(text("SELECT 1"))
            return JSONResponse(
                status_code=status.HTTP_200_OK,
                content={"status": "healthy", "database": "connected"},
            )
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "status": "unhealthy",
                    "database": "disconnected",
                    "error": "Database unavailable",
                },
            )

    return router


def create_protected_router() -> APIRouter:
    """Create router with the resource endpoints.

    Authentication is enforced by BearerAuthMiddleware; register and login
    are on its public path list, every other route here needs a token.

    Returns:
        APIRouter with auth, subject, topic, session and preference routes.
    """
    from app.api.auth import router as auth_router
    from app.api.preferences import router as preferences_router
    from app.api.sessions import router as sessions_router
    from app.api.subjects import router as subjects_router
    from app.api.topics import router as topics_router

    router = APIRouter()
    router.include_router(auth_router)
    router.include_router(subjects_router)
    router.include_router(topics_router)
    router.include_router(sessions_router)
    router.include_router(preferences_router)

    return router
