"""SQL engine and sessions for the database user store."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from src.user_api.runtime.config.config_data import ConfigData, DatabaseConfig
from src.user_api.runtime.context import get_config

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///", "sqlite:///:memory:")


def engine_options(db_config: DatabaseConfig, environment: str) -> dict[str, Any]:
    """Keyword arguments for ``create_engine`` matching the configured backend.

    SQLite connections are shared with FastAPI's worker threads and an
    in-memory database must keep its single connection alive. Server
    databases get the configured pool.
    """
    options: dict[str, Any] = {"echo": db_config.echo}

    if db_config.is_sqlite:
        options["connect_args"] = {"check_same_thread": False, "timeout": 20}
        if db_config.url in IN_MEMORY_SQLITE_URLS:
            options["poolclass"] = StaticPool
        elif environment == "production":
            logger.warning("SQLite user store in production; prefer PostgreSQL")
        return options

    if db_config.url.startswith("postgresql"):
        options["connect_args"] = {
            "application_name": f"user_api_{environment}",
            "connect_timeout": 30,
        }
    options.update(
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_recycle=db_config.pool_recycle,
        pool_pre_ping=True,
    )
    return options


class DbSessionService:
    """Owns the engine behind ``UserRepository`` and hands out sessions."""

    def __init__(self, config: ConfigData | None = None):
        config = config or get_config()
        self._engine = create_engine(
            config.database.connection_string,
            **engine_options(config.database, config.app.environment),
        )
        logger.info("User database engine ready ({})", self._engine.url.get_backend_name())

    @property
    def engine(self):
        return self._engine

    def create_all(self) -> None:
        """Create the users table if it does not exist yet."""
        from src.user_api.entities.user import UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("User tables ensured")

    def get_session(self) -> Session:
        # Repositories hand entities out after commit, so keep attributes loaded
        return Session(self._engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session committed on normal exit and rolled back if the block raises."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("User database unreachable: {}", e)
            return False
        return True

    def dispose(self) -> None:
        self._engine.dispose()
