"""Service layer for the Wellnest API.

Each module here owns one resource family and sits between the
blueprints and the models. Services never touch the request: they take
the caller's id as an explicit argument, return model instances or
plain dicts, and signal failures by raising the exceptions from
``wellnest.errors``. The arithmetic behind challenge completion,
streaks, leaderboards and the dashboard lives in :mod:`.aggregates`
so it can be unit tested without a database.
"""

from .aggregates import compute_streak, completion_percentage, rank_leaderboard
from .soft_delete_service import soft_delete_comment, soft_delete_group, soft_delete_post

__all__ = [
    "compute_streak",
    "completion_percentage",
    "rank_leaderboard",
    "soft_delete_comment",
    "soft_delete_group",
    "soft_delete_post",
]
