"""
Test factories for creating test data.

WHY: Factories provide a consistent, reusable way to create subscriptions
in tests, both as plain records and as stored rows.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from subs_aggregator.dao.subscription import SubscriptionDAO
from subs_aggregator.domain import SubscriptionRecord


def utc(year: int, month: int, day: int) -> datetime:
    """Midnight UTC on the given day."""
    return datetime(year, month, day, tzinfo=timezone.utc)


class SubscriptionFactory:
    """
    Factory for subscription test data.

    Defaults describe a year-long 2025 subscription at 100 per month.
    """

    @staticmethod
    def build(
        service_name: str = "Yandex Plus",
        price: int = 100,
        user_id: str = "u1",
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        id: Optional[int] = None,
    ) -> SubscriptionRecord:
        """Build an unsaved record."""
        return SubscriptionRecord(
            id=id,
            service_name=service_name,
            price=price,
            user_id=user_id,
            start_date=start_date or utc(2025, 1, 1),
            end_date=end_date or utc(2025, 12, 31),
        )

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> SubscriptionRecord:
        """
        Store a subscription through the DAO.

        Args:
            session: Database session
            **kwargs: Field overrides passed to ``build``

        Returns:
            The stored record with its id
        """
        return await SubscriptionDAO(session).create(SubscriptionFactory.build(**kwargs))
