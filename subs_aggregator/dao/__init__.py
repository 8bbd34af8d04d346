"""
Data Access Object (DAO) package.

WHY: DAOs keep SQL out of the service layer; the service only knows the
``SubscriptionRepository`` interface.
"""

from subs_aggregator.dao.base import BaseDAO
from subs_aggregator.dao.repository import SubscriptionRepository
from subs_aggregator.dao.subscription import SubscriptionDAO

__all__ = [
    "BaseDAO",
    "SubscriptionRepository",
    "SubscriptionDAO",
]
