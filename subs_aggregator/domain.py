"""
Plain value types passed between the API, service and storage layers.

WHAT: ``SubscriptionRecord`` is the storage-independent shape of a user
subscription; ``BillingFilters`` carries the optional exact-match filters of
a billing total query.

WHY: Services and the billing engine work on these instead of ORM rows, so
they can be exercised against an in-memory repository and no session-bound
object leaks out of a request.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass
class SubscriptionRecord:
    """
    A user's subscription to one service.

    ``id`` is None until storage assigns one. ``start_date`` and ``end_date``
    are Optional so the validator can report a missing value instead of the
    caller failing earlier with a TypeError.
    """

    service_name: str
    price: int
    user_id: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    id: Optional[int] = None

    def with_id(self, id: Optional[int]) -> "SubscriptionRecord":
        """Return a copy carrying the given id."""
        return replace(self, id=id)


@dataclass(frozen=True)
class BillingFilters:
    """
    Exact-match filters for the billing total.

    An empty string means the filter is not applied.
    """

    user_id: str = ""
    service_name: str = ""

    def matches(self, record: SubscriptionRecord) -> bool:
        """Check a record against the non-empty filters."""
        if self.user_id and record.user_id != self.user_id:
            return False
        if self.service_name and record.service_name != self.service_name:
            return False
        return True
