"""Errors raised by the user lifecycle operations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class FieldErrorCode(str, Enum):
    EMPTY_LOGIN = "empty_login"
    INVALID_LOGIN_CHARS = "invalid_login_chars"
    MISSING_FIELD = "missing_field"
    INVALID_PATCH = "invalid_patch"


class FieldError(BaseModel):
    """A single field-level validation failure."""

    field: str
    code: FieldErrorCode
    message: str


class UserLifecycleError(Exception):
    """Base class for every failure reported by the user lifecycle service."""


class InvalidIdentifierError(UserLifecycleError):
    """The supplied user id is not a well-formed identifier."""

    def __init__(self, user_id: str | None) -> None:
        super().__init__(f"Invalid user id: {user_id!r}")
        self.user_id = user_id


class UserNotFoundError(UserLifecycleError):
    """No user exists for a well-formed id."""

    def __init__(self, user_id: str | None) -> None:
        super().__init__(f"User not found: {user_id!r}")
        self.user_id = user_id


class InvalidInputError(UserLifecycleError):
    """One or more field-level validation failures for a single request."""

    def __init__(self, errors: list[FieldError]) -> None:
        if not errors:
            raise ValueError("InvalidInputError requires at least one field error")
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = list(errors)

    def as_dict(self) -> dict[str, str]:
        """Map field name to message, keeping the first message per field."""
        result: dict[str, str] = {}
        for error in self.errors:
            result.setdefault(error.field, error.message)
        return result
