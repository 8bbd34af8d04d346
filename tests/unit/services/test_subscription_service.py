"""
Unit tests for SubscriptionService.

WHAT: CRUD, listing and the billed-amount total against an in-memory
repository.

HOW: The repository fake from tests.fakes stands in for the DAO so the
tests cover the service rules only.
"""

import pytest

from subs_aggregator.core.exceptions import (
    InvalidRangeError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from subs_aggregator.domain import BillingFilters
from subs_aggregator.services.subscription_service import SubscriptionService
from tests.factories import utc
from tests.fakes import FailingSubscriptionRepository


@pytest.fixture
def service(repository) -> SubscriptionService:
    return SubscriptionService(repository)


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_assigns_id(self, service, sample_record):
        created = await service.create(sample_record)

        assert created.id == 1
        assert created.service_name == "Yandex Plus"

    @pytest.mark.asyncio
    async def test_create_ignores_incoming_id(self, service, repository, sample_record):
        created = await service.create(sample_record.with_id(99))

        assert created.id == 1
        assert 99 not in repository.rows

    @pytest.mark.asyncio
    async def test_invalid_record_never_reaches_storage(self, service, repository, sample_record):
        sample_record.price = 0

        with pytest.raises(ValidationError):
            await service.create(sample_record)

        assert repository.rows == {}


class TestReadUpdateDelete:
    @pytest.mark.asyncio
    async def test_get_by_id(self, service, sample_record):
        created = await service.create(sample_record)

        found = await service.get_by_id(created.id)

        assert found == created

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get_by_id(404)

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, service, sample_record):
        created = await service.create(sample_record)
        created.price = 250

        updated = await service.update(created)

        assert updated.price == 250
        assert (await service.get_by_id(created.id)).price == 250

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, service, sample_record):
        with pytest.raises(NotFoundError):
            await service.update(sample_record.with_id(12))

    @pytest.mark.asyncio
    async def test_update_without_id_is_invalid(self, service, sample_record):
        with pytest.raises(ValidationError):
            await service.update(sample_record)

    @pytest.mark.asyncio
    async def test_delete_twice(self, service, sample_record):
        """The second delete of the same id reports not found."""
        created = await service.create(sample_record)

        await service.delete(created.id)

        with pytest.raises(NotFoundError):
            await service.delete(created.id)


class TestListing:
    @pytest.mark.asyncio
    async def test_list_all_in_id_order(self, service, sample_record):
        for name in ("A", "B", "C"):
            sample_record.service_name = name
            await service.create(sample_record)

        records = await service.list_all()

        assert [r.service_name for r in records] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_empty_page(self, service):
        records, total = await service.list_page(limit=10, offset=0)

        assert records == []
        assert total == 0

    @pytest.mark.asyncio
    async def test_page_with_offset(self, service, sample_record):
        for _ in range(5):
            await service.create(sample_record)

        records, total = await service.list_page(limit=2, offset=2)

        assert [r.id for r in records] == [3, 4]
        assert total == 5


class TestTotalBilledAmount:
    """Aggregation over overlapping subscriptions."""

    @pytest.mark.asyncio
    async def test_no_matches_is_zero(self, service):
        total = await service.total_billed_amount(utc(2025, 1, 1), utc(2025, 12, 31))

        assert total == 0

    @pytest.mark.asyncio
    async def test_year_subscription_over_two_months(self, service, sample_record):
        await service.create(sample_record)

        total = await service.total_billed_amount(utc(2025, 2, 1), utc(2025, 4, 1))

        assert total == 200

    @pytest.mark.asyncio
    async def test_reversed_range(self, service):
        with pytest.raises(InvalidRangeError):
            await service.total_billed_amount(utc(2025, 4, 1), utc(2025, 2, 1))

    @pytest.mark.asyncio
    async def test_non_overlapping_subscription_ignored(self, service, sample_record):
        await service.create(sample_record)

        total = await service.total_billed_amount(utc(2026, 1, 1), utc(2026, 6, 1))

        assert total == 0

    @pytest.mark.asyncio
    async def test_user_filter_is_exact(self, service, sample_record):
        await service.create(sample_record)
        sample_record.user_id = "u10"
        await service.create(sample_record)

        total = await service.total_billed_amount(
            utc(2025, 2, 1), utc(2025, 4, 1), BillingFilters(user_id="u1")
        )

        assert total == 200

    @pytest.mark.asyncio
    async def test_service_filter(self, service, sample_record):
        await service.create(sample_record)
        sample_record.service_name = "Netflix"
        sample_record.price = 400
        await service.create(sample_record)

        total = await service.total_billed_amount(
            utc(2025, 2, 1), utc(2025, 4, 1), BillingFilters(service_name="Netflix")
        )

        assert total == 800

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self):
        service = SubscriptionService(FailingSubscriptionRepository())

        with pytest.raises(StorageError):
            await service.total_billed_amount(utc(2025, 1, 1), utc(2025, 2, 1))
