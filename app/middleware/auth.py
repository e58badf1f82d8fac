"""Authentication middleware for bearer token validation."""

import logging
from typing import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.exceptions import AuthenticationError
from app.utils.security import decode_access_token

logger = logging.getLogger(__name__)


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Middleware to validate the bearer token for protected endpoints.

    Every path except the public ones below requires an
    ``Authorization: Bearer <token>`` header. On success the token's user id
    is stored on ``request.state.user_id`` for the route dependencies.
    """

    PUBLIC_PATHS: frozenset[str] = frozenset(
        {
            "/",
            "/health",
            "/health/db",
            "/auth/register",
            "/auth/login",
            "/docs",
            "/docs/oauth2-redirect",
            "/openapi.json",
            "/redoc",
        }
    )

    @classmethod
    def is_protected_path(cls, path: str) -> bool:
        """Check if path requires authentication.

        Args:
            path: Request URL path.

        Returns:
            True if path is not one of the public endpoints.
        """
        normalized = path.rstrip("/") or "/"
        return normalized not in cls.PUBLIC_PATHS

    @staticmethod
    def _unauthorized(message: str) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": message},
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and validate the bearer token if required."""
        if request.method == "OPTIONS" or not self.is_protected_path(
            request.url.path
        ):
            return await call_next(request)

        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            logger.warning(
                "Unauthorized request",
                extra={"path": request.url.path, "method": request.method},
            )
            return self._unauthorized("Access token required")

        try:
            payload = decode_access_token(token.strip())
        except AuthenticationError as e:
            logger.warning(
                "Rejected bearer token",
                extra={"path": request.url.path, "reason": str(e)},
            )
            return self._unauthorized(str(e))

        request.state.user_id = payload["user_id"]
        return await call_next(request)
