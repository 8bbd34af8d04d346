"""
Billing period arithmetic.

Pure functions, no I/O. A subscription is billed once per whole calendar
month of overlap with the query period; partial months are not billed.
Calendar fields are read in each timestamp's own offset, so a client at
+03:00 is billed by its local months.
"""

from datetime import datetime, timezone
from typing import Iterable, Tuple

from subs_aggregator.core.exceptions import InvalidRangeError
from subs_aggregator.domain import SubscriptionRecord


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC. Naive datetimes are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def as_aware(value: datetime) -> datetime:
    """Tag a naive (storage) value as UTC; aware values keep their offset."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def ensure_range(range_start: datetime, range_end: datetime) -> None:
    """
    Reject a billing range that ends before it starts.

    Raises:
        InvalidRangeError: If range_end precedes range_start
    """
    if as_aware(range_end) < as_aware(range_start):
        raise InvalidRangeError(
            range_start=range_start.isoformat(),
            range_end=range_end.isoformat(),
        )


def months_between(start: datetime, end: datetime) -> int:
    """
    Count whole calendar months from ``start`` to ``end``.

    The trailing month only counts once ``end`` reaches the day-of-month of
    ``start``: Jan 15 -> Mar 10 is 1, Jan 15 -> Mar 20 is 2. Year, month and
    day are taken from each value as given. Never negative.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


def overlap(
    record: SubscriptionRecord, range_start: datetime, range_end: datetime
) -> Tuple[datetime, datetime]:
    """
    Intersect a record's active interval with the query range.

    Bounds are compared as instants but returned unchanged, with the query
    bound preferred on a tie.
    """
    effective_start = max(as_aware(range_start), as_aware(record.start_date))
    effective_end = min(as_aware(range_end), as_aware(record.end_date))
    return effective_start, effective_end


def billed_amount(record: SubscriptionRecord, range_start: datetime, range_end: datetime) -> int:
    """Amount one subscription contributes to the period total."""
    effective_start, effective_end = overlap(record, range_start, range_end)
    return months_between(effective_start, effective_end) * max(record.price, 0)


def total_for_records(
    records: Iterable[SubscriptionRecord], range_start: datetime, range_end: datetime
) -> int:
    """
    Sum billed amounts over records already known to overlap the range.

    Returns:
        The total, 0 for no records
    """
    total = 0
    for record in records:
        total += billed_amount(record, range_start, range_end)
    return total
