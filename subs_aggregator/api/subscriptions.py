"""
Subscription API endpoints.

WHAT: CRUD over user subscriptions plus the billed-amount total for a period.

WHY: Clients need to record which services a user pays for, and over which
interval, then ask how much was billed across a date range.

HOW: FastAPI router delegating to ``SubscriptionService``:
- Request bodies are parsed into ``SubscriptionRequest`` (types and RFC 3339
  dates only); business rules are enforced by the service
- ``/total`` is declared before ``/{sub_id}`` so it is not taken for an id
- List returns a bare array, or a page object when page/limit is given
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Path, Query, Response, status

from subs_aggregator.api.pagination import resolve_pagination
from subs_aggregator.core.config import Settings
from subs_aggregator.core.deps import get_app_settings, get_subscription_service
from subs_aggregator.core.exceptions import ValidationError
from subs_aggregator.domain import BillingFilters
from subs_aggregator.models.base import BIGINT_MAX
from subs_aggregator.schemas.subscription import (
    PaginationInfo,
    SubscriptionPageResponse,
    SubscriptionRequest,
    SubscriptionResponse,
    TotalResponse,
)
from subs_aggregator.schemas.timestamps import parse_rfc3339
from subs_aggregator.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subs", tags=["subscriptions"])


def _required_timestamp(name: str, raw: Optional[str]):
    """Parse a required RFC 3339 query parameter."""
    if not raw:
        raise ValidationError(message=f"{name} is required", field=name)
    try:
        return parse_rfc3339(raw)
    except ValueError as exc:
        logger.warning("Rejected %s query value %r", name, raw[:64])
        raise ValidationError(
            message=f"invalid {name} format, expected RFC3339",
            field=name,
        ) from exc


@router.post(
    "",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subscription(
    body: SubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    """
    Create a subscription.

    Any ``id`` in the body is ignored and a new one is assigned.
    """
    record = await service.create(body.to_record())
    return SubscriptionResponse.from_record(record)


@router.get("/total", response_model=TotalResponse)
async def get_total(
    start_date: Optional[str] = Query(None, description="Range start (RFC3339)"),
    end_date: Optional[str] = Query(None, description="Range end (RFC3339)"),
    user_id: str = Query("", description="Exact user id filter"),
    service_name: str = Query("", description="Exact service name filter"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> TotalResponse:
    """
    Total billed amount over ``[start_date, end_date]``.

    Each overlapping subscription contributes whole months of overlap
    times its price. Empty filters match everything.
    """
    range_start = _required_timestamp("start_date", start_date)
    range_end = _required_timestamp("end_date", end_date)

    total = await service.total_billed_amount(
        range_start,
        range_end,
        BillingFilters(user_id=user_id, service_name=service_name),
    )
    return TotalResponse(total=total)


@router.get("/{sub_id}", response_model=SubscriptionResponse)
async def get_subscription(
    sub_id: int = Path(..., ge=0, le=BIGINT_MAX),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    record = await service.get_by_id(sub_id)
    return SubscriptionResponse.from_record(record)


@router.put("/{sub_id}", response_model=SubscriptionResponse)
async def update_subscription(
    body: SubscriptionRequest,
    sub_id: int = Path(..., ge=0, le=BIGINT_MAX),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    """
    Replace all fields of a subscription.

    The id in the path wins over any id in the body.
    """
    record = await service.update(body.to_record(id=sub_id))
    return SubscriptionResponse.from_record(record)


@router.delete("/{sub_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    sub_id: int = Path(..., ge=0, le=BIGINT_MAX),
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    await service.delete(sub_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=Union[SubscriptionPageResponse, List[SubscriptionResponse]],
)
async def list_subscriptions(
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Page size (max 100)"),
    service: SubscriptionService = Depends(get_subscription_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    List subscriptions.

    Without ``page``/``limit`` every record is returned as an array.
    With either of them a ``{subscriptions, pagination}`` object is returned.
    """
    spec = resolve_pagination(
        page,
        limit,
        default_limit=settings.DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )
    if spec is None:
        records = await service.list_all()
        return [SubscriptionResponse.from_record(r) for r in records]

    records, total = await service.list_page(spec.limit, spec.offset)
    return SubscriptionPageResponse(
        subscriptions=[SubscriptionResponse.from_record(r) for r in records],
        pagination=PaginationInfo(page=spec.page, limit=spec.limit, total=total),
    )
