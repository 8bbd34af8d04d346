"""
Subscription Data Access Object (DAO).

WHAT: SQLAlchemy implementation of ``SubscriptionRepository`` over the
``user_subs`` table.

HOW: Extends BaseDAO for the generic CRUD plumbing and adds the period
overlap query. Rows are converted to ``SubscriptionRecord`` before they
leave this module.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from subs_aggregator.dao.base import BaseDAO
from subs_aggregator.dao.repository import SubscriptionRepository
from subs_aggregator.domain import BillingFilters, SubscriptionRecord
from subs_aggregator.models.subscription import UserSubscription
from subs_aggregator.services.billing import as_utc

logger = logging.getLogger(__name__)


def to_record(row: UserSubscription) -> SubscriptionRecord:
    """Convert an ORM row to a plain record."""
    return SubscriptionRecord(
        id=row.id,
        service_name=row.service_name,
        price=row.price,
        user_id=row.user_id,
        start_date=row.start_date,
        end_date=row.end_date,
    )


def _column_values(record: SubscriptionRecord) -> dict:
    # Stored in UTC; SQLite drops the offset instead of converting
    return {
        "service_name": record.service_name,
        "price": record.price,
        "user_id": record.user_id,
        "start_date": as_utc(record.start_date),
        "end_date": as_utc(record.end_date),
    }


class SubscriptionDAO(BaseDAO[UserSubscription], SubscriptionRepository):
    """
    Data Access Object for user subscriptions.

    All failures surface as ``StorageError`` (see BaseDAO); a missing id is
    reported as None/False, never as an exception.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize SubscriptionDAO.

        Args:
            session: Async database session
        """
        super().__init__(UserSubscription, session)

    async def create(self, record: SubscriptionRecord) -> SubscriptionRecord:
        """
        Insert a subscription.

        Args:
            record: Validated record; its ``id`` is ignored

        Returns:
            The stored record with its database-assigned id
        """
        logger.info(
            "Creating subscription for user %s, service %s",
            record.user_id,
            record.service_name,
        )
        row = await super().create(**_column_values(record))
        logger.info("Subscription created with ID %d", row.id)
        return to_record(row)

    async def get_by_id(self, id: int) -> Optional[SubscriptionRecord]:
        """
        Get a subscription by primary key.

        Args:
            id: Subscription ID

        Returns:
            The record if found, None otherwise
        """
        row = await super().get_by_id(id)
        if row is None:
            logger.info("Subscription with ID %d not found", id)
            return None
        return to_record(row)

    async def update(self, record: SubscriptionRecord) -> Optional[SubscriptionRecord]:
        """
        Overwrite every field of an existing subscription.

        Args:
            record: Validated record carrying the target ``id``

        Returns:
            The updated record, None if the id does not exist
        """
        logger.info("Updating subscription with ID %s", record.id)
        row = await super().update(record.id, **_column_values(record))
        if row is None:
            logger.info("Subscription with ID %s not found for update", record.id)
            return None
        return to_record(row)

    async def delete(self, id: int) -> bool:
        """
        Hard-delete a subscription.

        Args:
            id: Subscription ID

        Returns:
            True if a row was deleted, False if the id does not exist
        """
        logger.info("Deleting subscription with ID %d", id)
        deleted = await super().delete(id)
        if not deleted:
            logger.info("Subscription with ID %d not found for delete", id)
        return deleted

    async def list_all(self) -> List[SubscriptionRecord]:
        """
        Get every subscription.

        Returns:
            All records in primary key order
        """
        rows = await self.get_all()
        logger.info("Fetched %d subscriptions", len(rows))
        return [to_record(row) for row in rows]

    async def list_page(self, limit: int, offset: int) -> Tuple[List[SubscriptionRecord], int]:
        """
        Get one page of subscriptions.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip

        Returns:
            Tuple of (records in primary key order, total row count)
        """
        total = await self.count()
        rows = await self.get_all(skip=offset, limit=limit)
        logger.info(
            "Fetched %d subscriptions (limit %d, offset %d, total %d)",
            len(rows),
            limit,
            offset,
            total,
        )
        return [to_record(row) for row in rows], total

    async def find_overlapping(
        self,
        range_start: datetime,
        range_end: datetime,
        filters: BillingFilters,
    ) -> List[SubscriptionRecord]:
        """
        Fetch subscriptions active at some point of [range_start, range_end].

        Args:
            range_start: First moment of the billing period
            range_end: Last moment of the billing period
            filters: Exact-match user/service filters (empty = not applied)

        Returns:
            Overlapping records in primary key order
        """
        query = select(UserSubscription).where(
            UserSubscription.start_date <= as_utc(range_end),
            UserSubscription.end_date >= as_utc(range_start),
        )
        if filters.user_id:
            query = query.where(UserSubscription.user_id == filters.user_id)
        if filters.service_name:
            query = query.where(UserSubscription.service_name == filters.service_name)
        query = query.order_by(UserSubscription.id)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise self._storage_error("find_overlapping", exc) from exc

        rows = list(result.scalars().all())
        logger.info(
            "Found %d subscriptions overlapping %s..%s (user_id=%r, service_name=%r)",
            len(rows),
            range_start.isoformat(),
            range_end.isoformat(),
            filters.user_id,
            filters.service_name,
        )
        return [to_record(row) for row in rows]
