"""Entities grouped by business concept.

Each entity package holds its domain model (entity.py), its persistence
model (table.py) and its repository (repository.py).
"""

from .user import User, UserRepository, UserTable

__all__ = [
    "User",
    "UserTable",
    "UserRepository",
]
