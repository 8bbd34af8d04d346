"""
Subscription Service.

WHAT: Business logic for user subscriptions: validated writes, lookups,
listing and the billing total for a period.

WHY: The service layer:
1. Runs validation before anything reaches storage
2. Turns "no such row" from the repository into NotFoundError
3. Computes the period total from the overlapping records

HOW: Constructed with a ``SubscriptionRepository``; it keeps no other state,
so one instance per request is enough.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from subs_aggregator.core.exceptions import NotFoundError
from subs_aggregator.dao.repository import SubscriptionRepository
from subs_aggregator.domain import BillingFilters, SubscriptionRecord
from subs_aggregator.services.billing import ensure_range, total_for_records
from subs_aggregator.services.validation import validate_for_create, validate_for_update

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Service for user subscription operations.

    Errors:
    - ValidationError / InvalidRangeError: bad input, raised before storage
    - NotFoundError: the id has no record
    - StorageError: propagated unchanged from the repository
    """

    def __init__(self, repository: SubscriptionRepository):
        """
        Initialize SubscriptionService.

        Args:
            repository: Storage for subscription records
        """
        self.repository = repository

    async def create(self, record: SubscriptionRecord) -> SubscriptionRecord:
        """
        Validate and store a new subscription.

        Args:
            record: Candidate record; any id on it is ignored

        Returns:
            The stored record with its assigned id

        Raises:
            ValidationError: If a field rule is violated
        """
        logger.info("Creating subscription")
        validate_for_create(record)
        return await self.repository.create(record.with_id(None))

    async def get_by_id(self, id: int) -> SubscriptionRecord:
        """
        Get a subscription by ID.

        Raises:
            NotFoundError: If no record has this id
        """
        logger.info("Fetching subscription with ID %d", id)
        record = await self.repository.get_by_id(id)
        if record is None:
            raise NotFoundError(subscription_id=id)
        return record

    async def update(self, record: SubscriptionRecord) -> SubscriptionRecord:
        """
        Overwrite every field of an existing subscription.

        Raises:
            ValidationError: If a field rule is violated or the id is missing
            NotFoundError: If no record has this id
        """
        logger.info("Updating subscription with ID %s", record.id)
        validate_for_update(record)
        updated = await self.repository.update(record)
        if updated is None:
            raise NotFoundError(subscription_id=record.id)
        return updated

    async def delete(self, id: int) -> None:
        """
        Delete a subscription.

        Raises:
            NotFoundError: If no record has this id (including a second delete)
        """
        logger.info("Deleting subscription with ID %d", id)
        if not await self.repository.delete(id):
            raise NotFoundError(subscription_id=id)

    async def list_all(self) -> List[SubscriptionRecord]:
        """Return every subscription."""
        logger.info("Fetching list of all subscriptions")
        return await self.repository.list_all()

    async def list_page(self, limit: int, offset: int) -> Tuple[List[SubscriptionRecord], int]:
        """
        Return one page of subscriptions and the full table count.

        ``limit`` and ``offset`` are expected to be resolved by the caller.
        """
        logger.info("Fetching subscriptions with limit %d and offset %d", limit, offset)
        return await self.repository.list_page(limit, offset)

    async def total_billed_amount(
        self,
        range_start: datetime,
        range_end: datetime,
        filters: Optional[BillingFilters] = None,
    ) -> int:
        """
        Total billed for [range_start, range_end] in whole months x price.

        Args:
            range_start: First moment of the period
            range_end: Last moment of the period
            filters: Optional exact-match user/service filters

        Returns:
            Sum over overlapping subscriptions; 0 when none match

        Raises:
            InvalidRangeError: If range_end precedes range_start
        """
        filters = filters or BillingFilters()
        logger.info(
            "Calculating total price for period %s to %s, user_id: %r, service_name: %r",
            range_start.isoformat(),
            range_end.isoformat(),
            filters.user_id,
            filters.service_name,
        )
        ensure_range(range_start, range_end)

        records = await self.repository.find_overlapping(range_start, range_end, filters)
        total = total_for_records(records, range_start, range_end)
        logger.info("Total price calculated: %d over %d subscriptions", total, len(records))
        return total
