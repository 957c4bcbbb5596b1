"""
Database models for the Wellnest API.

Each resource lives in its own module; everything is re-exported here so
that callers can simply ``from wellnest.models import Post``.
"""

from .base import utcnow
from .user import User
from .social import Comment, CommentLike, Post, PostLike, PostType, PostVisibility
from .group import Group, GroupCategory, GroupMembership, GroupType, MembershipRole, MembershipStatus
from .challenge import (
    Challenge,
    ChallengeDifficulty,
    ChallengeProgress,
    ChallengeStatus,
    ChallengeType,
    challenge_participants,
)
from .health import HealthLog, Reminder, ReminderFrequency, ReminderStatus, ReminderType
from .marketplace import (
    ItemCondition,
    ListingStatus,
    MarketplaceCategory,
    MarketplaceFavorite,
    MarketplaceItem,
    MarketplaceOrder,
    MarketplaceReview,
    OrderStatus,
)
from .notification import (
    DeliveryChannel,
    Notification,
    NotificationPreference,
    NotificationPriority,
    NotificationType,
)
from .analytics import Analytics, AnalyticsType, DashboardSettings, PeriodType
from .role import Role, UserRole

__all__ = [
    "utcnow",
    "User",
    "Post",
    "PostLike",
    "PostType",
    "PostVisibility",
    "Comment",
    "CommentLike",
    "Group",
    "GroupCategory",
    "GroupMembership",
    "GroupType",
    "MembershipRole",
    "MembershipStatus",
    "Challenge",
    "ChallengeDifficulty",
    "ChallengeProgress",
    "ChallengeStatus",
    "ChallengeType",
    "challenge_participants",
    "HealthLog",
    "Reminder",
    "ReminderFrequency",
    "ReminderStatus",
    "ReminderType",
    "ItemCondition",
    "ListingStatus",
    "MarketplaceCategory",
    "MarketplaceFavorite",
    "MarketplaceItem",
    "MarketplaceOrder",
    "MarketplaceReview",
    "OrderStatus",
    "DeliveryChannel",
    "Notification",
    "NotificationPreference",
    "NotificationPriority",
    "NotificationType",
    "Analytics",
    "AnalyticsType",
    "DashboardSettings",
    "PeriodType",
    "Role",
    "UserRole",
]
