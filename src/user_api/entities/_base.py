"""Identity and timestamps shared by the user entity and its table."""

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def new_id() -> str:
    """Canonical string form of a fresh random UUID."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Domain object with a string UUID and creation/modification times."""

    id: str = PydanticField(default_factory=new_id, description="Canonical UUID string")
    created_at: datetime = PydanticField(default_factory=utc_now)
    updated_at: datetime = PydanticField(default_factory=utc_now)


class EntityTable(SQLModel, table=False):
    """Columns every stored entity has.

    ``updated_at`` is written by the repository on each overwrite; rows are
    listed by ``created_at``, hence the index.
    """

    id: str = Field(primary_key=True, default_factory=new_id, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, nullable=False)
