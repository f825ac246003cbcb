"""Page of users returned by the listing operation."""

from pydantic import BaseModel, Field

from src.user_api.entities.user import User


class Page(BaseModel):
    """A bounded slice of users plus navigation metadata."""

    items: list[User] = Field(default_factory=list)
    total_count: int
    page_size: int
    current_page: int
    total_pages: int
    has_previous: bool
    has_next: bool
    previous_page: int | None = None
    next_page: int | None = None
