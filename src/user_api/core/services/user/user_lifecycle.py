"""User lifecycle service.

Orchestrates validation, patch merging and pagination on top of a
:class:`UserStore`. The service returns plain data; mapping outcomes onto a
transport (status codes, headers, links) is the caller's job.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from loguru import logger

from src.user_api.core.exceptions import (
    InvalidIdentifierError,
    InvalidInputError,
    UserNotFoundError,
)
from src.user_api.core.models.page import Page
from src.user_api.core.models.user_requests import (
    CreateUserRequest,
    PatchUserRequest,
    ReplaceUserRequest,
)
from src.user_api.core.services.user.pagination import PaginationPlanner
from src.user_api.core.services.user.patch_merger import PatchMerger
from src.user_api.core.services.user.validation import (
    validate_complete,
    validate_create,
)
from src.user_api.core.storage.user_storage import UserStore
from src.user_api.entities.user.entity import User
from src.user_api.runtime.context import get_config

MIN_PAGE_NUMBER = 1
MIN_PAGE_SIZE = 1
# Largest offset a SQL backend accepts (signed 64-bit)
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class Created:
    """Marker returned by create; carries the id used to address the new user."""

    user_id: str


def parse_user_id(user_id: str | uuid.UUID | None) -> uuid.UUID | None:
    """Parse an identifier token, returning None when it is malformed."""
    if isinstance(user_id, uuid.UUID):
        return user_id
    if not user_id:
        return None
    try:
        return uuid.UUID(str(user_id).strip())
    except ValueError:
        return None


class UserLifecycleService:
    """Create, replace-or-insert, patch, delete, get and list users."""

    def __init__(
        self,
        store: UserStore,
        planner: PaginationPlanner | None = None,
        merger: PatchMerger | None = None,
        max_page_size: int | None = None,
    ) -> None:
        self._store = store
        self._planner = planner or PaginationPlanner()
        self._merger = merger or PatchMerger()
        self._max_page_size = max_page_size

    @property
    def max_page_size(self) -> int:
        if self._max_page_size is not None:
            return self._max_page_size
        return get_config().pagination.max_page_size

    def _load(self, user_id: str | uuid.UUID | None, *, allow_nil: bool) -> User:
        parsed = parse_user_id(user_id)
        if parsed is None or (parsed.int == 0 and not allow_nil):
            raise UserNotFoundError(str(user_id) if user_id is not None else None)

        canonical_id = str(parsed)
        user = self._store.get(canonical_id)
        if user is None:
            logger.debug("User {} not found", canonical_id)
            raise UserNotFoundError(canonical_id)
        return user

    def get(self, user_id: str | uuid.UUID | None) -> User:
        """Exact lookup. The nil id is looked up like any other.

        Raises:
            UserNotFoundError: If the id is malformed or no user has it
        """
        return self._load(user_id, allow_nil=True)

    def create(self, request: CreateUserRequest) -> tuple[User, Created]:
        """Create a user with a store-assigned identifier.

        Raises:
            InvalidInputError: If the login is empty or not alphanumeric
        """
        errors = validate_create(request.login)
        if errors:
            logger.warning("Rejected user creation: {}", [e.code.value for e in errors])
            raise InvalidInputError(errors)

        user = User(
            id="",
            login=request.login,
            first_name=request.first_name,
            last_name=request.last_name,
        )
        created = self._store.insert(user)
        logger.info("Created user {} with login {}", created.id, created.login)
        return created, Created(user_id=created.id)

    def replace_or_insert(
        self, user_id: str | uuid.UUID | None, request: ReplaceUserRequest
    ) -> tuple[User, bool]:
        """Overwrite the user with ``user_id`` or insert it under that id.

        Returns:
            The stored user and ``True`` when it was inserted

        Raises:
            InvalidIdentifierError: If ``user_id`` is not a well-formed UUID
            InvalidInputError: If any of the three fields is invalid
        """
        parsed = parse_user_id(user_id)
        if parsed is None:
            raise InvalidIdentifierError(str(user_id) if user_id is not None else None)
        canonical_id = str(parsed)

        errors = validate_complete(request.login, request.first_name, request.last_name)
        if errors:
            logger.warning(
                "Rejected replacement of user {}: {}",
                canonical_id,
                [e.code.value for e in errors],
            )
            raise InvalidInputError(errors)

        user = User(
            id=canonical_id,
            login=request.login,
            first_name=request.first_name,
            last_name=request.last_name,
        )
        stored, inserted = self._store.upsert(user)
        if inserted:
            logger.info("Inserted user {} through replace", canonical_id)
        else:
            logger.info("Replaced user {}", canonical_id)
        return stored, inserted

    def patch(self, user_id: str | uuid.UUID | None, request: PatchUserRequest) -> User:
        """Merge the assigned fields of ``request`` into a stored user.

        Nothing is written unless the merged user passes every check.

        Raises:
            UserNotFoundError: If the id is empty, nil, malformed or unknown
            InvalidInputError: If the merged user is invalid
        """
        user = self._load(user_id, allow_nil=False)
        try:
            candidate = self._merger.merge(user, request)
        except InvalidInputError as e:
            logger.warning("Rejected patch of user {}: {}", user.id, e.as_dict())
            raise

        updated = self._store.put(candidate)
        logger.info("Patched user {} fields {}", user.id, sorted(request.assignments()))
        return updated

    def delete(self, user_id: str | uuid.UUID | None) -> None:
        """Remove a user.

        Raises:
            UserNotFoundError: If the id is empty, nil, malformed or unknown
        """
        user = self._load(user_id, allow_nil=False)
        self._store.delete(user.id)
        logger.info("Deleted user {}", user.id)

    def list(self, page_number: int, page_size: int) -> Page:
        """Return one page of users.

        ``page_number`` is raised to at least 1 and ``page_size`` is clamped
        into ``[1, max_page_size]``; out-of-range values are never rejected.
        """
        page_number = max(MIN_PAGE_NUMBER, page_number)
        page_size = min(max(MIN_PAGE_SIZE, page_size), self.max_page_size)

        offset = self._planner.offset(page_number, page_size)
        if offset > MAX_OFFSET:
            # No store can hold that many rows, so the page is necessarily empty
            users, total_count = [], self._store.count()
        else:
            users, total_count = self._store.list(offset, page_size)
        plan = self._planner.plan(page_number, page_size, total_count)
        logger.debug(
            "Listed page {} of {} (size {}, total {})",
            plan.page_number,
            plan.total_pages,
            plan.page_size,
            plan.total_count,
        )

        return Page(
            items=users,
            total_count=plan.total_count,
            page_size=plan.page_size,
            current_page=plan.page_number,
            total_pages=plan.total_pages,
            has_previous=plan.has_previous,
            has_next=plan.has_next,
            previous_page=plan.previous_page,
            next_page=plan.next_page,
        )
