"""User storage exports."""

from .user_storage import InMemoryUserStore, UserStore

__all__ = ["UserStore", "InMemoryUserStore"]
