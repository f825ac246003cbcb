"""Request models consumed by the user lifecycle service."""

from typing import Any

from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    """Input for creating a user. Only the login is mandatory."""

    login: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class ReplaceUserRequest(BaseModel):
    """Input for a full replacement. Every field must end up non-empty."""

    login: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class PatchUserRequest(BaseModel):
    """Sparse partial update.

    A field counts as present only when it was explicitly assigned, either at
    construction time or later through :meth:`assign`. Present fields may hold
    ``None``; absent fields mean "leave unchanged".
    """

    login: str | None = Field(default=None)
    first_name: str | None = Field(default=None)
    last_name: str | None = Field(default=None)

    def assign(self, field_name: str, value: str | None) -> None:
        if field_name not in type(self).model_fields:
            raise KeyError(field_name)
        setattr(self, field_name, value)

    def assignments(self) -> dict[str, Any]:
        """Only the fields the caller actually assigned."""
        return self.model_dump(exclude_unset=True)
