"""Unit tests for the user field validators."""

import pytest

from src.user_api.core.exceptions import FieldErrorCode
from src.user_api.core.services.user.validation import (
    FIRST_NAME_FIELD,
    LAST_NAME_FIELD,
    LOGIN_FIELD,
    validate_complete,
    validate_create,
    validate_login,
    validate_required_text,
)


class TestValidateLogin:
    @pytest.mark.parametrize("login", ["john", "John42", "42", "Иван", "José", "用户1"])
    def test_letters_and_digits_are_accepted(self, login):
        assert validate_login(login) is None

    @pytest.mark.parametrize("login", [None, "", "   ", "\t"])
    def test_blank_login_is_empty(self, login):
        error = validate_login(login)

        assert error is not None
        assert error.field == LOGIN_FIELD
        assert error.code == FieldErrorCode.EMPTY_LOGIN

    @pytest.mark.parametrize(
        "login",
        ["john doe", "john_doe", "john-doe", "john.doe", "john@x", "a!", " john", "a½", "x²", "Ⅻ"],
    )
    def test_non_alphanumeric_characters_are_rejected(self, login):
        error = validate_login(login)

        assert error is not None
        assert error.code == FieldErrorCode.INVALID_LOGIN_CHARS


class TestValidateRequiredText:
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_value(self, value):
        error = validate_required_text(value, FIRST_NAME_FIELD)

        assert error is not None
        assert error.field == FIRST_NAME_FIELD
        assert error.code == FieldErrorCode.MISSING_FIELD
        assert error.message == "FirstName is required"

    def test_present_value(self):
        assert validate_required_text("Doe", LAST_NAME_FIELD) is None


class TestValidateHelpers:
    def test_create_only_checks_login(self):
        assert validate_create("john") == []
        assert [e.code for e in validate_create("jo hn")] == [
            FieldErrorCode.INVALID_LOGIN_CHARS
        ]

    def test_complete_reports_every_failure(self):
        errors = validate_complete("bad login", "", None)

        assert [e.field for e in errors] == [LOGIN_FIELD, FIRST_NAME_FIELD, LAST_NAME_FIELD]

    def test_complete_accepts_valid_user(self):
        assert validate_complete("john", "John", "Doe") == []
