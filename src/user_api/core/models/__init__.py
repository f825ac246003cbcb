"""Core models exports."""

from .page import Page
from .user_requests import CreateUserRequest, PatchUserRequest, ReplaceUserRequest

__all__ = [
    "Page",
    "CreateUserRequest",
    "ReplaceUserRequest",
    "PatchUserRequest",
]
