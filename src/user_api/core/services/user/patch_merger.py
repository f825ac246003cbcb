"""Applies a sparse patch onto an existing user."""

from loguru import logger

from src.user_api.core.exceptions import InvalidInputError
from src.user_api.core.models.user_requests import PatchUserRequest
from src.user_api.core.services.user.validation import validate_complete
from src.user_api.entities._base import utc_now
from src.user_api.entities.user.entity import User

MUTABLE_FIELDS = ("login", "first_name", "last_name")


class PatchMerger:
    """Builds a validated candidate user from an entity and a patch.

    The merger never touches storage. The caller writes the candidate back
    only when :meth:`merge` returns normally.
    """

    def merge(self, user: User, patch: PatchUserRequest) -> User:
        """Overlay the assigned patch fields onto ``user`` and validate.

        Args:
            user: The currently stored user
            patch: Sparse update; unassigned fields keep their current value

        Returns:
            A new ``User`` with the same id carrying the merged values

        Raises:
            InvalidInputError: If the merged user fails any field check. All
                failures are reported together.
        """
        changes = {
            name: value
            for name, value in patch.assignments().items()
            if name in MUTABLE_FIELDS
        }
        candidate = user.model_copy(update=changes)

        errors = validate_complete(
            candidate.login, candidate.first_name, candidate.last_name
        )
        if errors:
            logger.debug(
                "Patch for user {} rejected: {}",
                user.id,
                [error.field for error in errors],
            )
            raise InvalidInputError(errors)

        candidate.updated_at = utc_now()
        return candidate
