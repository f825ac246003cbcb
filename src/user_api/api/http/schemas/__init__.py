"""HTTP schema exports."""

from .users import (
    JsonPatchOperation,
    PaginationMetadata,
    UserCreateBody,
    UserResponse,
    UserUpdateBody,
    json_patch_to_request,
)

__all__ = [
    "JsonPatchOperation",
    "PaginationMetadata",
    "UserCreateBody",
    "UserResponse",
    "UserUpdateBody",
    "json_patch_to_request",
]
