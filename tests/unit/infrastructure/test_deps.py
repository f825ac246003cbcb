"""Unit tests for HTTP dependencies and the database session service."""

from unittest.mock import Mock

import pytest
from fastapi import Request
from sqlalchemy import StaticPool

from src.user_api.api.http.app_data import ApplicationDependencies
from src.user_api.api.http.deps import (
    get_app_dependencies,
    get_user_lifecycle_service,
    get_user_store,
)
from src.user_api.core.services.database.db_session import DbSessionService, engine_options
from src.user_api.core.services.user import UserLifecycleService
from src.user_api.core.storage.user_storage import InMemoryUserStore
from src.user_api.entities.user import User, UserRepository
from src.user_api.runtime.config.config_data import ConfigData, DatabaseConfig


@pytest.fixture
def database_service():
    service = DbSessionService(ConfigData(database=DatabaseConfig(url="sqlite://")))
    service.create_all()
    yield service
    service.dispose()


class TestApplicationDependencies:
    def test_requires_exactly_one_backend(self, database_service):
        with pytest.raises(ValueError):
            ApplicationDependencies()
        with pytest.raises(ValueError):
            ApplicationDependencies(
                memory_store=InMemoryUserStore(), database_service=database_service
            )

    def test_backend_name(self, database_service):
        assert ApplicationDependencies(memory_store=InMemoryUserStore()).backend == "memory"
        assert ApplicationDependencies(database_service=database_service).backend == "database"


class TestUserStoreDependency:
    def test_app_dependencies_come_from_app_state(self):
        deps = ApplicationDependencies(memory_store=InMemoryUserStore())
        request = Mock(spec=Request)
        request.app.state.app_dependencies = deps

        assert get_app_dependencies(request) is deps

    def test_memory_store_is_shared(self):
        store = InMemoryUserStore()
        deps = ApplicationDependencies(memory_store=store)

        generator = get_user_store(deps)

        assert next(generator) is store
        with pytest.raises(StopIteration):
            next(generator)

    def test_database_store_gets_its_own_session(self, database_service):
        deps = ApplicationDependencies(database_service=database_service)

        generator = get_user_store(deps)
        repository = next(generator)

        assert isinstance(repository, UserRepository)
        repository.insert(User(id="", login="john"))
        generator.close()

        with database_service.session_scope() as session:
            assert UserRepository(session).count() == 1

    def test_lifecycle_service_wraps_store(self):
        service = get_user_lifecycle_service(InMemoryUserStore())

        assert isinstance(service, UserLifecycleService)


class TestDbSessionService:
    def test_health_check(self, database_service):
        assert database_service.health_check() is True

    def test_session_scope_rolls_back_on_error(self, database_service):
        with pytest.raises(RuntimeError):
            with database_service.session_scope() as session:
                UserRepository(session).count()
                raise RuntimeError("boom")

    def test_in_memory_database_survives_across_sessions(self, database_service):
        with database_service.session_scope() as session:
            UserRepository(session).insert(User(id="", login="john"))

        with database_service.session_scope() as session:
            assert UserRepository(session).count() == 1


class TestEngineOptions:
    @pytest.mark.parametrize("url", ["sqlite://", "sqlite:///:memory:"])
    def test_in_memory_sqlite_keeps_one_connection(self, url):
        options = engine_options(DatabaseConfig(url=url), "test")

        assert options["poolclass"] is StaticPool
        assert options["connect_args"]["check_same_thread"] is False
        assert "pool_size" not in options

    def test_sqlite_file_uses_default_pool(self):
        options = engine_options(DatabaseConfig(url="sqlite:///./users.db"), "development")

        assert "poolclass" not in options
        assert "pool_size" not in options

    def test_postgresql_gets_pool_and_application_name(self):
        db_config = DatabaseConfig(url="postgresql://user@db:5432/users", pool_size=5)

        options = engine_options(db_config, "production")

        assert options["pool_size"] == 5
        assert options["pool_pre_ping"] is True
        assert options["connect_args"]["application_name"] == "user_api_production"
