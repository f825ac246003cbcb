"""Tests for UserLifecycleService, run against every store backend."""

import threading
import uuid

import pytest

from src.user_api.core.exceptions import (
    FieldErrorCode,
    InvalidIdentifierError,
    InvalidInputError,
    UserNotFoundError,
)
from src.user_api.core.models.user_requests import (
    CreateUserRequest,
    PatchUserRequest,
    ReplaceUserRequest,
)
from src.user_api.core.services.user import UserLifecycleService, parse_user_id

NIL_ID = "00000000-0000-0000-0000-000000000000"


class TestCreate:
    def test_create_assigns_identifier(self, service, store):
        user, created = service.create(
            CreateUserRequest(login="john", first_name="John", last_name="Doe")
        )

        assert created.user_id == user.id
        uuid.UUID(user.id)
        assert store.get(user.id) == user

    def test_names_are_optional_on_create(self, service):
        user, _ = service.create(CreateUserRequest(login="john"))

        assert user.first_name is None
        assert user.last_name is None

    @pytest.mark.parametrize("login", ["john doe", "john_doe", "j@hn", "john!", "-", "a½", "x²"])
    def test_invalid_login_leaves_store_unchanged(self, service, store, login):
        with pytest.raises(InvalidInputError) as exc_info:
            service.create(CreateUserRequest(login=login))

        assert exc_info.value.errors[0].code == FieldErrorCode.INVALID_LOGIN_CHARS
        assert store.count() == 0

    @pytest.mark.parametrize("login", [None, "", "  "])
    def test_empty_login(self, service, store, login):
        with pytest.raises(InvalidInputError) as exc_info:
            service.create(CreateUserRequest(login=login))

        assert exc_info.value.as_dict() == {"login": "Login is required"}
        assert store.count() == 0


class TestReplaceOrInsert:
    def test_inserts_under_supplied_id(self, service, store):
        user_id = str(uuid.uuid4())

        user, inserted = service.replace_or_insert(
            user_id, ReplaceUserRequest(login="john", first_name="John", last_name="Doe")
        )

        assert inserted is True
        assert user.id == user_id
        assert store.get(user_id) == user

    def test_second_call_overwrites_in_place(self, service):
        user_id = str(uuid.uuid4())
        service.replace_or_insert(
            user_id, ReplaceUserRequest(login="john", first_name="John", last_name="Doe")
        )

        user, inserted = service.replace_or_insert(
            user_id, ReplaceUserRequest(login="jack", first_name="Jack", last_name="Smith")
        )

        assert inserted is False
        stored = service.get(user_id)
        assert (stored.login, stored.first_name, stored.last_name) == (
            "jack",
            "Jack",
            "Smith",
        )
        assert stored == user

    def test_replaces_user_created_by_create(self, service, store):
        created, _ = service.create(CreateUserRequest(login="john"))

        _, inserted = service.replace_or_insert(
            created.id, ReplaceUserRequest(login="john", first_name="John", last_name="Doe")
        )

        assert inserted is False
        assert store.count() == 1

    def test_accepts_any_uuid_spelling(self, service):
        user_id = uuid.uuid4()

        user, _ = service.replace_or_insert(
            str(user_id).upper(),
            ReplaceUserRequest(login="john", first_name="John", last_name="Doe"),
        )

        assert user.id == str(user_id)

    @pytest.mark.parametrize("user_id", ["not-a-guid", "", None, "123"])
    def test_malformed_identifier(self, service, store, user_id):
        with pytest.raises(InvalidIdentifierError):
            service.replace_or_insert(
                user_id, ReplaceUserRequest(login="john", first_name="John", last_name="Doe")
            )
        assert store.count() == 0

    def test_nil_identifier_is_upserted(self, service, store):
        user, inserted = service.replace_or_insert(
            NIL_ID, ReplaceUserRequest(login="john", first_name="John", last_name="Doe")
        )

        assert inserted is True
        assert user.id == NIL_ID
        assert service.get(NIL_ID) == user

        _, inserted = service.replace_or_insert(
            NIL_ID, ReplaceUserRequest(login="jack", first_name="Jack", last_name="Doe")
        )
        assert inserted is False
        assert store.count() == 1

    def test_identifier_checked_before_fields(self, service):
        with pytest.raises(InvalidIdentifierError):
            service.replace_or_insert("nope", ReplaceUserRequest())

    def test_all_field_errors_reported_together(self, service, store):
        with pytest.raises(InvalidInputError) as exc_info:
            service.replace_or_insert(
                str(uuid.uuid4()), ReplaceUserRequest(login="a b", first_name="")
            )

        assert set(exc_info.value.as_dict()) == {"login", "firstName", "lastName"}
        assert store.count() == 0


class TestPatch:
    @pytest.fixture
    def existing(self, service):
        user, _ = service.create(
            CreateUserRequest(login="john", first_name="John", last_name="Doe")
        )
        return user

    def test_login_only_patch(self, service, existing):
        updated = service.patch(existing.id, PatchUserRequest(login="johnny"))

        assert updated.login == "johnny"
        assert updated.first_name == "John"
        assert updated.last_name == "Doe"
        assert service.get(existing.id) == updated

    def test_nulling_required_field_leaves_entity_untouched(self, service, existing):
        before = service.get(existing.id).model_dump()

        with pytest.raises(InvalidInputError) as exc_info:
            service.patch(existing.id, PatchUserRequest(first_name=None))

        assert set(exc_info.value.as_dict()) == {"firstName"}
        assert service.get(existing.id).model_dump() == before

    def test_invalid_login_and_missing_name_reported_together(self, service, existing):
        before = service.get(existing.id).model_dump()

        with pytest.raises(InvalidInputError) as exc_info:
            service.patch(existing.id, PatchUserRequest(login="", last_name=""))

        assert set(exc_info.value.as_dict()) == {"login", "lastName"}
        assert service.get(existing.id).model_dump() == before

    @pytest.mark.parametrize("user_id", ["", None, NIL_ID, "not-a-guid"])
    def test_unusable_identifier_is_not_found(self, service, user_id):
        with pytest.raises(UserNotFoundError):
            service.patch(user_id, PatchUserRequest(login="john"))

    def test_unknown_user(self, service):
        with pytest.raises(UserNotFoundError):
            service.patch(str(uuid.uuid4()), PatchUserRequest(login="john"))


class TestDelete:
    def test_delete_then_get_is_not_found(self, service):
        user, _ = service.create(CreateUserRequest(login="john"))

        service.delete(user.id)

        with pytest.raises(UserNotFoundError):
            service.get(user.id)

    def test_second_delete_is_not_found(self, service):
        user, _ = service.create(CreateUserRequest(login="john"))
        service.delete(user.id)

        with pytest.raises(UserNotFoundError):
            service.delete(user.id)

    def test_nil_identifier_is_not_found_even_when_stored(self, service):
        service.replace_or_insert(
            NIL_ID, ReplaceUserRequest(login="john", first_name="John", last_name="Doe")
        )

        with pytest.raises(UserNotFoundError):
            service.delete(NIL_ID)
        with pytest.raises(UserNotFoundError):
            service.patch(NIL_ID, PatchUserRequest(login="jack"))
        assert service.get(NIL_ID).login == "john"

    @pytest.mark.parametrize("user_id", [str(uuid.uuid4()), NIL_ID, "", None])
    def test_absent_or_nil_identifier(self, service, user_id):
        with pytest.raises(UserNotFoundError):
            service.delete(user_id)


class TestGet:
    def test_exact_lookup(self, service):
        user, _ = service.create(CreateUserRequest(login="john"))

        assert service.get(user.id) == user
        assert service.get(uuid.UUID(user.id)) == user

    def test_nil_identifier_is_looked_up_exactly(self, service):
        with pytest.raises(UserNotFoundError):
            service.get(NIL_ID)

        service.replace_or_insert(
            NIL_ID, ReplaceUserRequest(login="john", first_name="John", last_name="Doe")
        )

        assert service.get(NIL_ID).login == "john"

    def test_malformed_identifier_is_not_found(self, service):
        with pytest.raises(UserNotFoundError):
            service.get("definitely-not-a-uuid")


class TestList:
    def test_first_page_of_three(self, service, make_users):
        make_users(25)

        page = service.list(page_number=1, page_size=10)

        assert len(page.items) == 10
        assert page.total_count == 25
        assert page.total_pages == 3
        assert page.has_previous is False
        assert page.has_next is True

    def test_last_page_of_three(self, service, make_users):
        make_users(25)

        page = service.list(page_number=3, page_size=10)

        assert len(page.items) == 5
        assert page.has_previous is True
        assert page.has_next is False
        assert page.previous_page == 2
        assert page.next_page is None

    def test_pages_do_not_overlap(self, service, make_users):
        users = make_users(25)

        seen = []
        for page_number in (1, 2, 3):
            seen.extend(u.id for u in service.list(page_number, 10).items)

        assert sorted(seen) == sorted(u.id for u in users)

    def test_page_size_is_clamped_to_maximum(self, service, make_users):
        make_users(25)

        page = service.list(page_number=1, page_size=500)

        assert page.page_size == 20
        assert len(page.items) == 20

    @pytest.mark.parametrize("page_size", [0, -3])
    def test_page_size_is_clamped_to_one(self, service, make_users, page_size):
        make_users(3)

        page = service.list(page_number=1, page_size=page_size)

        assert page.page_size == 1
        assert page.total_pages == 3

    @pytest.mark.parametrize("page_number", [0, -1, -100])
    def test_page_number_is_clamped_to_one(self, service, make_users, page_number):
        make_users(3)

        page = service.list(page_number=page_number, page_size=10)

        assert page.current_page == 1
        assert page.has_previous is False
        assert len(page.items) == 3

    @pytest.mark.parametrize("page_number", [10**19, 2**63])
    def test_page_number_beyond_any_offset(self, service, make_users, page_number):
        make_users(3)

        page = service.list(page_number=page_number, page_size=10)

        assert page.items == []
        assert page.total_count == 3
        assert page.current_page == page_number
        assert page.has_previous is True
        assert page.has_next is False

    def test_empty_store(self, service):
        page = service.list(1, 10)

        assert page.items == []
        assert page.total_count == 0
        assert page.total_pages == 0
        assert page.has_next is False


class TestConfiguredPageSize:
    def test_maximum_comes_from_config(self, memory_store):
        from src.user_api.runtime.config.config_data import ConfigData
        from src.user_api.runtime.context import with_context

        service = UserLifecycleService(memory_store)
        override = ConfigData()
        override.pagination.max_page_size = 5
        override.pagination.default_page_size = 5

        with with_context(override):
            assert service.list(1, 100).page_size == 5

        assert service.list(1, 100).page_size == 20


def test_parse_user_id():
    user_id = uuid.uuid4()

    assert parse_user_id(str(user_id)) == user_id
    assert parse_user_id(user_id) is user_id
    assert parse_user_id("{" + str(user_id) + "}") == user_id
    assert parse_user_id("nope") is None
    assert parse_user_id(None) is None


def test_concurrent_replace_of_new_id_inserts_once(memory_store):
    service = UserLifecycleService(memory_store, max_page_size=20)
    user_id = str(uuid.uuid4())
    barrier = threading.Barrier(2)
    results: list[bool] = []
    failures: list[Exception] = []

    def replace(login: str) -> None:
        barrier.wait()
        try:
            _, inserted = service.replace_or_insert(
                user_id, ReplaceUserRequest(login=login, first_name="A", last_name="B")
            )
            results.append(inserted)
        except Exception as e:  # noqa: BLE001
            failures.append(e)

    threads = [threading.Thread(target=replace, args=(login,)) for login in ("one", "two")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert failures == []
    assert sorted(results) == [False, True]
    assert memory_store.count() == 1
