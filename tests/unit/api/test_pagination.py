"""Tests for page/limit query resolution."""

import pytest

from subs_aggregator.api.pagination import MAX_PAGE, PaginationSpec, resolve_pagination


def test_absent_parameters_mean_plain_list():
    assert resolve_pagination(None, None) is None
    assert resolve_pagination("", "") is None


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        ("2", "20", PaginationSpec(page=2, limit=20)),
        ("3", None, PaginationSpec(page=3, limit=10)),
        (None, "5", PaginationSpec(page=1, limit=5)),
        ("0", "0", PaginationSpec(page=1, limit=10)),
        ("-1", "-7", PaginationSpec(page=1, limit=10)),
        ("abc", "1.5", PaginationSpec(page=1, limit=10)),
        ("1", "500", PaginationSpec(page=1, limit=100)),
        ("+2", " 15 ", PaginationSpec(page=2, limit=15)),
    ],
)
def test_resolution(page, limit, expected):
    assert resolve_pagination(page, limit) == expected


def test_custom_bounds():
    assert resolve_pagination("1", "30", default_limit=5, max_limit=25) == PaginationSpec(1, 25)
    assert resolve_pagination("1", "x", default_limit=5, max_limit=25) == PaginationSpec(1, 5)


def test_offset():
    assert PaginationSpec(page=1, limit=10).offset == 0
    assert PaginationSpec(page=3, limit=10).offset == 20


def test_page_capped():
    spec = resolve_pagination("99999999999999999999", "100")

    assert spec.page == MAX_PAGE
    assert spec.offset < 2**63 - 1
