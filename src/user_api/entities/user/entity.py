"""User domain entity."""

from typing import Any

from pydantic import Field

from src.user_api.entities._base import Entity


class User(Entity):
    """User entity representing an account in the system.

    The identifier is fixed once the user exists. ``first_name`` and
    ``last_name`` may be missing on a freshly created user; replace and
    patch always leave both filled in.
    """

    login: str = Field(description="Letters-and-digits login name")
    first_name: str | None = Field(default=None, description="User's first name")
    last_name: str | None = Field(default=None, description="User's last name")

    @property
    def full_name(self) -> str:
        """First and last name joined by a space, skipping missing parts."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.login == other.login
            and self.first_name == other.first_name
            and self.last_name == other.last_name
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.login,
            self.first_name,
            self.last_name,
        ))
