"""Unit tests for PatchMerger."""

import pytest

from src.user_api.core.exceptions import FieldErrorCode, InvalidInputError
from src.user_api.core.models.user_requests import PatchUserRequest
from src.user_api.core.services.user.patch_merger import PatchMerger
from src.user_api.entities.user import User


@pytest.fixture
def merger() -> PatchMerger:
    return PatchMerger()


@pytest.fixture
def user() -> User:
    return User(login="john", first_name="John", last_name="Doe")


class TestPatchMerger:
    def test_only_assigned_fields_change(self, merger, user):
        candidate = merger.merge(user, PatchUserRequest(login="johnny"))

        assert candidate.id == user.id
        assert candidate.login == "johnny"
        assert candidate.first_name == "John"
        assert candidate.last_name == "Doe"

    def test_merge_does_not_mutate_the_original(self, merger, user):
        merger.merge(user, PatchUserRequest(first_name="Jack"))

        assert user.first_name == "John"

    def test_empty_patch_returns_equal_user(self, merger, user):
        assert merger.merge(user, PatchUserRequest()) == user

    def test_explicit_none_clears_and_fails(self, merger, user):
        with pytest.raises(InvalidInputError) as exc_info:
            merger.merge(user, PatchUserRequest(last_name=None))

        assert set(exc_info.value.as_dict()) == {"lastName"}

    def test_all_errors_are_accumulated(self, merger, user):
        patch = PatchUserRequest(login="not valid", first_name="", last_name="")

        with pytest.raises(InvalidInputError) as exc_info:
            merger.merge(user, patch)

        codes = {e.field: e.code for e in exc_info.value.errors}
        assert codes == {
            "login": FieldErrorCode.INVALID_LOGIN_CHARS,
            "firstName": FieldErrorCode.MISSING_FIELD,
            "lastName": FieldErrorCode.MISSING_FIELD,
        }

    def test_incomplete_user_must_be_completed_by_patch(self, merger):
        user = User(login="john")

        with pytest.raises(InvalidInputError) as exc_info:
            merger.merge(user, PatchUserRequest(first_name="John"))
        assert set(exc_info.value.as_dict()) == {"lastName"}

        candidate = merger.merge(user, PatchUserRequest(first_name="John", last_name="Doe"))
        assert candidate.full_name == "John Doe"

    def test_assign_marks_field_present(self, merger, user):
        patch = PatchUserRequest()
        patch.assign("first_name", "Jim")

        assert patch.assignments() == {"first_name": "Jim"}
        assert merger.merge(user, patch).first_name == "Jim"

    def test_assign_unknown_field(self):
        with pytest.raises(KeyError):
            PatchUserRequest().assign("email", "x@example.com")
