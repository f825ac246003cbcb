"""Field-level checks for user input.

Each check is pure and returns a :class:`FieldError` or None. The
``validate_*`` helpers run every check that applies to a request type and
return all failures together.
"""

from src.user_api.core.exceptions import FieldError, FieldErrorCode

LOGIN_FIELD = "login"
FIRST_NAME_FIELD = "firstName"
LAST_NAME_FIELD = "lastName"


def validate_login(login: str | None) -> FieldError | None:
    """Login must be non-blank and made of letters and digits only.

    Unicode letters and decimal digits are accepted, so "Иван2" is a valid
    login. Other numeric characters such as "½" or "²" are not.
    """
    if login is None or not login.strip():
        return FieldError(
            field=LOGIN_FIELD,
            code=FieldErrorCode.EMPTY_LOGIN,
            message="Login is required",
        )
    if not all(ch.isalpha() or ch.isdecimal() for ch in login):
        return FieldError(
            field=LOGIN_FIELD,
            code=FieldErrorCode.INVALID_LOGIN_CHARS,
            message="Login must contain only letters and digits",
        )
    return None


def validate_required_text(value: str | None, field_name: str) -> FieldError | None:
    if value is None or value == "":
        return FieldError(
            field=field_name,
            code=FieldErrorCode.MISSING_FIELD,
            message=f"{field_name[0].upper()}{field_name[1:]} is required",
        )
    return None


def _collect(*results: FieldError | None) -> list[FieldError]:
    return [error for error in results if error is not None]


def validate_create(login: str | None) -> list[FieldError]:
    return _collect(validate_login(login))


def validate_complete(
    login: str | None, first_name: str | None, last_name: str | None
) -> list[FieldError]:
    """Checks for a user that must have every field filled in."""
    return _collect(
        validate_login(login),
        validate_required_text(first_name, FIRST_NAME_FIELD),
        validate_required_text(last_name, LAST_NAME_FIELD),
    )
