"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request

from src.user_api.api.http.app_data import ApplicationDependencies
from src.user_api.core.services.user import UserLifecycleService
from src.user_api.core.storage.user_storage import UserStore
from src.user_api.entities.user import UserRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the application-wide dependencies."""
    return request.app.state.app_dependencies


def get_user_store(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[UserStore]:
    """Yield the user store for one request.

    The database backend gets a fresh session that is closed afterwards.
    """
    if app_deps.memory_store is not None:
        yield app_deps.memory_store
        return

    session = app_deps.database_service.get_session()
    try:
        yield UserRepository(session)
    finally:
        session.close()


def get_user_lifecycle_service(
    store: UserStore = Depends(get_user_store),
) -> UserLifecycleService:
    """Get the user lifecycle service bound to the request's store."""
    return UserLifecycleService(store)
