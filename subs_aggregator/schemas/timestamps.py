"""
RFC 3339 timestamp parsing.

WHAT: The single accepted wire format for dates, e.g.
``2025-07-31T19:00:00Z`` or ``2025-07-31T19:00:00.5+03:00``.

WHY: Pydantic's own datetime parsing also takes unix numbers, bare dates and
offset-less values. Those are rejected here so every stored timestamp has
an explicit offset.
"""

import re
from datetime import datetime

RFC3339_PATTERN = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware datetime.

    The offset is kept as sent; billing reads calendar fields in it.

    Fractions beyond microseconds are truncated.

    Raises:
        ValueError: If the text is not an RFC 3339 timestamp
    """
    match = RFC3339_PATTERN.match(value)
    if match is None:
        raise ValueError(f"invalid RFC3339 timestamp: {value!r}")

    fraction = (match.group("fraction") or "0")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset == "Z":
        offset = "+00:00"

    return datetime.fromisoformat(f"{match.group('base')}.{fraction}{offset}")


def coerce_rfc3339(value):
    """Pydantic ``mode="before"`` hook: only strings in RFC 3339 are accepted."""
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError("expected an RFC3339 timestamp string")
    return parse_rfc3339(value)
