"""
Page/limit resolution for list endpoints.

WHAT: Turns the raw ``page`` and ``limit`` query strings into a page spec.

HOW: Pagination is requested when either parameter is non-empty. Values
that do not parse or are not positive fall back to page 1 and the default
limit. The limit is clamped to the configured maximum and the page to
``MAX_PAGE`` so the offset stays within the database integer range.
"""

import re
from dataclasses import dataclass
from typing import Optional

_INTEGER = re.compile(r"^[+-]?\d+$")

MAX_PAGE = 1_000_000


@dataclass(frozen=True)
class PaginationSpec:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _positive_or(raw: str, default: int) -> int:
    raw = raw.strip()
    if not _INTEGER.match(raw):
        return default
    value = int(raw)
    return value if value > 0 else default


def resolve_pagination(
    page_raw: Optional[str],
    limit_raw: Optional[str],
    default_limit: int = 10,
    max_limit: int = 100,
    max_page: int = MAX_PAGE,
) -> Optional[PaginationSpec]:
    """
    Resolve query strings into a ``PaginationSpec``.

    Returns:
        None when neither parameter was supplied (plain list mode)

    Example:
        >>> resolve_pagination("2", "500")
        PaginationSpec(page=2, limit=100)
    """
    page_raw = page_raw or ""
    limit_raw = limit_raw or ""
    if not page_raw and not limit_raw:
        return None

    page = min(_positive_or(page_raw, 1), max_page)
    limit = min(_positive_or(limit_raw, default_limit), max_limit)
    return PaginationSpec(page=page, limit=limit)
