"""HTTP request and response bodies for the users API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.user_api.core.exceptions import FieldError, FieldErrorCode
from src.user_api.core.models.user_requests import (
    CreateUserRequest,
    PatchUserRequest,
    ReplaceUserRequest,
)
from src.user_api.entities.user import User


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UserCreateBody(_CamelModel):
    login: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")

    def to_request(self) -> CreateUserRequest:
        return CreateUserRequest(
            login=self.login, first_name=self.first_name, last_name=self.last_name
        )


class UserUpdateBody(_CamelModel):
    login: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")

    def to_request(self) -> ReplaceUserRequest:
        return ReplaceUserRequest(
            login=self.login, first_name=self.first_name, last_name=self.last_name
        )


class UserResponse(_CamelModel):
    id: str
    login: str
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    full_name: str = Field(alias="fullName")

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            login=user.login,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
        )


class PaginationMetadata(_CamelModel):
    """Body of the ``X-Pagination`` response header."""

    previous_page_link: str | None = Field(default=None, alias="previousPageLink")
    next_page_link: str | None = Field(default=None, alias="nextPageLink")
    total_count: int = Field(alias="totalCount")
    page_size: int = Field(alias="pageSize")
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")


class JsonPatchOperation(_CamelModel):
    """One RFC 6902 operation. Only add, replace and remove are applied."""

    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: str
    value: Any = None
    from_: str | None = Field(default=None, alias="from")


# JSON pointer segment -> PatchUserRequest field
PATCHABLE_PATHS = {
    "login": "login",
    "firstname": "first_name",
    "lastname": "last_name",
}


def json_patch_to_request(
    operations: list[JsonPatchOperation],
) -> tuple[PatchUserRequest, list[FieldError]]:
    """Translate a JSON Patch document into a sparse patch request.

    Operations are applied in order, so a later assignment to the same field
    wins. Unsupported operations, unknown paths and non-string values are
    returned as field errors instead of being applied.
    """
    request = PatchUserRequest()
    errors: list[FieldError] = []

    for operation in operations:
        # A pointer to a top-level member is "/" followed by exactly one segment
        segment = operation.path[1:] if operation.path.startswith("/") else ""
        field_name = None if "/" in segment else PATCHABLE_PATHS.get(segment.lower())
        if field_name is None:
            errors.append(
                FieldError(
                    field=operation.path,
                    code=FieldErrorCode.INVALID_PATCH,
                    message=f"The target location '{operation.path}' was not found",
                )
            )
            continue

        if operation.op == "remove":
            request.assign(field_name, None)
        elif operation.op in ("add", "replace"):
            if operation.value is not None and not isinstance(operation.value, str):
                errors.append(
                    FieldError(
                        field=segment,
                        code=FieldErrorCode.INVALID_PATCH,
                        message=f"The value for '{segment}' must be a string",
                    )
                )
                continue
            request.assign(field_name, operation.value)
        else:
            errors.append(
                FieldError(
                    field=segment,
                    code=FieldErrorCode.INVALID_PATCH,
                    message=f"The '{operation.op}' operation is not supported",
                )
            )

    return request, errors
