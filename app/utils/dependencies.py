"""Dependency injection functions for FastAPI routes.

Uses descriptor pattern to automatically create dependency functions
for all services, eliminating code duplication.
"""

from typing import Any, Type, TypeVar

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AuthenticationError
from app.services.preferences_service import PreferencesService
from app.services.session_service import SessionService
from app.services.subject_service import SubjectService
from app.services.topic_service import TopicService
from app.services.user_service import UserService
from app.utils.db import get_db_session

T = TypeVar("T")


class ServiceDependency:
    """Descriptor that creates a dependency injection function for a service.

    Caches the dependency function to ensure the same function object is returned
    each time, enabling proper use of FastAPI's dependency_overrides.
    """

    def __init__(self, service_class: Type[T]) -> None:
        """Initialize service dependency descriptor.

        Args:
            service_class: The service class to create instances of.
        """
        self.service_class = service_class
        self._cached_func: Any = None

    def __get__(self, instance: Any, owner: type) -> Any:
        """Create and return cached dependency function when accessed."""
        if self._cached_func is None:

            def dependency_func(
                db: AsyncSession = Depends(get_db_session),
            ) -> T:
                """Get service instance for dependency injection."""
                return self.service_class(db)

            self._cached_func = dependency_func
        return self._cached_func


class ServiceDependencies:
    """Container for all service dependency injection functions."""

    user = ServiceDependency(UserService)
    preferences = ServiceDependency(PreferencesService)
    subject = ServiceDependency(SubjectService)
    topic = ServiceDependency(TopicService)
    session = ServiceDependency(SessionService)


# Create singleton instance for easy access
dependencies = ServiceDependencies()


def get_current_user_id(request: Request) -> int:
    """Return the user id the auth middleware attached to the request.

    Raises:
        AuthenticationError: If the request reached a protected route
            without passing through the middleware.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise AuthenticationError("Authentication required")
    return user_id
