"""
Subscription record validation.

WHAT: Field-presence and ordering rules checked before a record is created
or updated.

HOW: Rules run in a fixed order and the first violation raises
``ValidationError``; later rules are not evaluated.
"""

import logging
from typing import Callable, List, Optional, Tuple

from subs_aggregator.core.exceptions import ValidationError
from subs_aggregator.domain import SubscriptionRecord
from subs_aggregator.services.billing import as_utc

logger = logging.getLogger(__name__)

# (field, message, predicate returning True when the record violates the rule)
Rule = Tuple[str, str, Callable[[SubscriptionRecord], bool]]

RECORD_RULES: List[Rule] = [
    ("service_name", "service_name is required", lambda r: not r.service_name),
    ("price", "price must be greater than 0", lambda r: r.price is None or r.price <= 0),
    ("user_id", "user_id is required", lambda r: not r.user_id),
    ("start_date", "start_date is required", lambda r: r.start_date is None),
    ("end_date", "end_date is required", lambda r: r.end_date is None),
    (
        "end_date",
        "end_date must be after start_date",
        lambda r: as_utc(r.end_date) <= as_utc(r.start_date),
    ),
]

UPDATE_RULES: List[Rule] = RECORD_RULES + [
    ("id", "id is required for update", lambda r: not r.id),
]


def _first_violation(record: SubscriptionRecord, rules: List[Rule]) -> Optional[Rule]:
    for rule in rules:
        if rule[2](record):
            return rule
    return None


def _check(record: SubscriptionRecord, rules: List[Rule], operation: str) -> None:
    violation = _first_violation(record, rules)
    if violation is None:
        return
    field, message, _ = violation
    logger.warning("%s: %s", operation, message)
    raise ValidationError(message=message, field=field)


def validate_for_create(record: SubscriptionRecord) -> None:
    """
    Validate a record about to be created.

    Raises:
        ValidationError: On the first violated rule, with ``field`` context
    """
    _check(record, RECORD_RULES, "validate_for_create")


def validate_for_update(record: SubscriptionRecord) -> None:
    """
    Validate a record about to overwrite an existing one.

    Same rules as creation, plus a non-zero id.

    Raises:
        ValidationError: On the first violated rule, with ``field`` context
    """
    _check(record, UPDATE_RULES, "validate_for_update")
