"""User repository backed by a SQLModel session."""

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from src.user_api.core.exceptions import UserNotFoundError
from src.user_api.core.storage.user_storage import UserStore
from src.user_api.entities._base import utc_now
from src.user_api.entities.user.entity import User
from src.user_api.entities.user.table import UserTable


class UserRepository(UserStore):
    """Data-access layer for users.

    Every mutation commits, so each call is its own transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def insert(self, user: User) -> User:
        data = user.model_dump()
        if not data.get("id"):
            data.pop("id", None)
        row = UserTable(**data)
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def put(self, user: User) -> User:
        row = self._session.get(UserTable, user.id)
        if row is None:
            raise UserNotFoundError(user.id)
        row.login = user.login
        row.first_name = user.first_name
        row.last_name = user.last_name
        row.updated_at = utc_now()
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def upsert(self, user: User) -> tuple[User, bool]:
        if self.get(user.id) is not None:
            return self.put(user), False
        try:
            return self.insert(user), True
        except IntegrityError:
            # Another session inserted this id after the existence check
            self._session.rollback()
            logger.debug("Concurrent insert of user {}, overwriting instead", user.id)
            return self.put(user), False

    def delete(self, user_id: str) -> None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return
        self._session.delete(row)
        self._session.commit()

    def list(self, offset: int, limit: int) -> tuple[list[User], int]:
        statement = (
            select(UserTable)
            .order_by(UserTable.created_at, UserTable.id)
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return [User.model_validate(row, from_attributes=True) for row in rows], self.count()

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(UserTable)).one()

    def is_available(self) -> bool:
        try:
            self.count()
            return True
        except Exception as e:
            logger.error(
                "User repository health check failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return False
