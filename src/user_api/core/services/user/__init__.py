"""User lifecycle services."""

from .pagination import PagePlan, PaginationPlanner
from .patch_merger import PatchMerger
from .user_lifecycle import Created, UserLifecycleService, parse_user_id

__all__ = [
    "Created",
    "PagePlan",
    "PaginationPlanner",
    "PatchMerger",
    "UserLifecycleService",
    "parse_user_id",
]
