from dataclasses import dataclass

from src.user_api.core.services.database.db_session import DbSessionService
from src.user_api.core.storage.user_storage import InMemoryUserStore


@dataclass
class ApplicationDependencies:
    """Process-wide services shared by every request.

    Exactly one of ``memory_store`` and ``database_service`` backs the user
    store, depending on ``storage.backend``.
    """

    memory_store: InMemoryUserStore | None = None
    database_service: DbSessionService | None = None

    def __post_init__(self) -> None:
        if (self.memory_store is None) == (self.database_service is None):
            raise ValueError(
                "ApplicationDependencies needs exactly one of memory_store or database_service"
            )

    @property
    def backend(self) -> str:
        return "memory" if self.memory_store is not None else "database"
