"""Middleware components for the application."""

from app.middleware.auth import BearerAuthMiddleware

__all__ = ["BearerAuthMiddleware"]
