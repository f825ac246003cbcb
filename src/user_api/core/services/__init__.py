"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService

# User Services
from .user import (
    Created,
    PagePlan,
    PaginationPlanner,
    PatchMerger,
    UserLifecycleService,
)

__all__ = [
    # Database Service
    "DbSessionService",
    # User Services
    "Created",
    "PagePlan",
    "PaginationPlanner",
    "PatchMerger",
    "UserLifecycleService",
]
