"""
Database models package.

WHY: Importing every model here registers it on ``Base.metadata`` so
Alembic and the test fixtures see all tables.
"""

from subs_aggregator.models.base import BIGINT_MAX, Base, PrimaryKeyMixin
from subs_aggregator.models.subscription import UserSubscription

__all__ = [
    "BIGINT_MAX",
    "Base",
    "PrimaryKeyMixin",
    "UserSubscription",
]
