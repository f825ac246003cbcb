"""User storage interface and implementations.

The lifecycle service only talks to :class:`UserStore`. Two backends ship with
the application: an in-memory store and the SQLModel-backed
``UserRepository`` in ``src.user_api.entities.user.repository``.
"""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from src.user_api.core.exceptions import UserNotFoundError

if TYPE_CHECKING:
    from src.user_api.entities.user.entity import User


class UserStore(ABC):
    """Abstract key-value store for users keyed by identifier.

    Implementations must give read-your-writes consistency and serialize
    concurrent mutations of the same identifier.
    """

    @abstractmethod
    def get(self, user_id: str) -> User | None:
        """Return the user stored under ``user_id`` or None."""

    @abstractmethod
    def insert(self, user: User) -> User:
        """Persist a new user.

        The supplied identifier is kept when present; an empty one is replaced
        by a freshly generated UUID.

        Returns:
            The stored user, carrying its final identifier
        """

    @abstractmethod
    def put(self, user: User) -> User:
        """Overwrite the user stored under ``user.id``.

        Raises:
            UserNotFoundError: If no user is stored under that id
        """

    @abstractmethod
    def upsert(self, user: User) -> tuple[User, bool]:
        """Insert ``user`` under its id, or overwrite the user already stored there.

        The existence check and the write happen atomically, so concurrent
        upserts of one id produce exactly one insert.

        Returns:
            The stored user and ``True`` when it was inserted
        """

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Remove the user stored under ``user_id`` if there is one."""

    @abstractmethod
    def list(self, offset: int, limit: int) -> tuple[list[User], int]:
        """Return a slice of users in a stable order and the total count."""

    @abstractmethod
    def count(self) -> int:
        """Number of stored users."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the storage backend is healthy."""


class InMemoryUserStore(UserStore):
    """Dictionary-backed store that keeps users in insertion order."""

    def __init__(self) -> None:
        self._data: dict[str, User] = {}
        self._lock = threading.RLock()

    def get(self, user_id: str) -> User | None:
        with self._lock:
            user = self._data.get(user_id)
            return user.model_copy() if user is not None else None

    def insert(self, user: User) -> User:
        with self._lock:
            stored = user.model_copy()
            if not stored.id:
                stored.id = str(uuid.uuid4())
            if stored.id in self._data:
                raise ValueError(f"User {stored.id} already exists")
            self._data[stored.id] = stored
            return stored.model_copy()

    def put(self, user: User) -> User:
        with self._lock:
            existing = self._data.get(user.id)
            if existing is None:
                raise UserNotFoundError(user.id)
            stored = user.model_copy(
                update={
                    "created_at": existing.created_at,
                    "updated_at": datetime.now(UTC),
                }
            )
            self._data[user.id] = stored
            return stored.model_copy()

    def upsert(self, user: User) -> tuple[User, bool]:
        with self._lock:
            if user.id in self._data:
                return self.put(user), False
            return self.insert(user), True

    def delete(self, user_id: str) -> None:
        with self._lock:
            self._data.pop(user_id, None)

    def list(self, offset: int, limit: int) -> tuple[list[User], int]:
        with self._lock:
            users = list(self._data.values())
            page = users[offset : offset + limit] if limit > 0 else []
            return [user.model_copy() for user in page], len(users)

    def count(self) -> int:
        with self._lock:
            return len(self._data)

    def is_available(self) -> bool:
        return True
