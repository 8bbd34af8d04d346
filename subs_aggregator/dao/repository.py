"""
Subscription repository interface.

WHAT: The storage capabilities the subscription service depends on.

WHY: The service is written against this interface only, so it runs the
same against ``SubscriptionDAO`` (SQLAlchemy) and an in-memory fake in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from subs_aggregator.domain import BillingFilters, SubscriptionRecord


class SubscriptionRepository(ABC):
    """
    Abstract repository for subscription records.

    Implementations raise ``StorageError`` for any persistence failure and
    never raise ``NotFoundError`` themselves: a missing row is reported as
    ``None``/``False`` and the service decides what that means.
    """

    @abstractmethod
    async def create(self, record: SubscriptionRecord) -> SubscriptionRecord:
        """
        Persist a new record.

        Returns:
            The stored record with its assigned id
        """

    @abstractmethod
    async def get_by_id(self, id: int) -> Optional[SubscriptionRecord]:
        """Return the record with this id, or None."""

    @abstractmethod
    async def update(self, record: SubscriptionRecord) -> Optional[SubscriptionRecord]:
        """
        Overwrite every field of the record with ``record.id``.

        Returns:
            The updated record, or None if no record has that id
        """

    @abstractmethod
    async def delete(self, id: int) -> bool:
        """Delete a record. Returns False if no record has that id."""

    @abstractmethod
    async def list_all(self) -> List[SubscriptionRecord]:
        """Return every record in storage order."""

    @abstractmethod
    async def list_page(self, limit: int, offset: int) -> Tuple[List[SubscriptionRecord], int]:
        """
        Return up to ``limit`` records starting at ``offset``.

        Returns:
            (records, total) where total is the full table count
        """

    @abstractmethod
    async def find_overlapping(
        self,
        range_start: datetime,
        range_end: datetime,
        filters: BillingFilters,
    ) -> List[SubscriptionRecord]:
        """
        Return records whose interval overlaps [range_start, range_end].

        A record overlaps when ``start_date <= range_end`` and
        ``end_date >= range_start``; non-empty filters match exactly.
        """
