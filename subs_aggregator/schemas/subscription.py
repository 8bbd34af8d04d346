"""
Subscription schemas for API request/response validation.

WHAT: Pydantic schemas for the /subs endpoints.

HOW: The request schema only checks JSON types and the timestamp format.
Missing fields default to empty values so the business rules (required
fields, positive price, date order) are reported by the service validator
with its own messages.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from subs_aggregator.domain import SubscriptionRecord
from subs_aggregator.models.base import BIGINT_MAX
from subs_aggregator.schemas.timestamps import coerce_rfc3339
from subs_aggregator.services.billing import as_utc


# ============================================================================
# Request Schemas
# ============================================================================


class SubscriptionRequest(BaseModel):
    """
    Body of POST /subs and PUT /subs/{id}.

    Any ``id`` in the body is ignored; PUT takes the id from the path.
    """

    model_config = ConfigDict(extra="ignore")

    service_name: str = Field(default="", description="Name of the subscribed service")
    price: int = Field(
        default=0,
        ge=0,
        le=BIGINT_MAX,
        strict=True,
        description="Monthly price in the smallest currency unit",
    )
    user_id: str = Field(default="", description="Identifier of the owning user")
    start_date: Optional[datetime] = Field(
        default=None,
        description="Start of the active interval (RFC3339, e.g. 2025-07-01T00:00:00Z)",
    )
    end_date: Optional[datetime] = Field(
        default=None,
        description="End of the active interval (RFC3339, e.g. 2025-12-31T00:00:00Z)",
    )

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def validate_timestamp(cls, value):
        return coerce_rfc3339(value)

    def to_record(self, id: Optional[int] = None) -> SubscriptionRecord:
        """Convert to the service-layer record."""
        return SubscriptionRecord(
            id=id,
            service_name=self.service_name,
            price=self.price,
            user_id=self.user_id,
            start_date=self.start_date,
            end_date=self.end_date,
        )


# ============================================================================
# Response Schemas
# ============================================================================


class SubscriptionResponse(BaseModel):
    """A stored subscription."""

    id: int = Field(..., description="Subscription ID")
    service_name: str
    price: int
    user_id: str
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        # Some backends hand back naive UTC values
        return as_utc(value)

    @classmethod
    def from_record(cls, record: SubscriptionRecord) -> "SubscriptionResponse":
        return cls(
            id=record.id,
            service_name=record.service_name,
            price=record.price,
            user_id=record.user_id,
            start_date=record.start_date,
            end_date=record.end_date,
        )


class PaginationInfo(BaseModel):
    """Pagination metadata for a page of subscriptions."""

    page: int = Field(..., description="1-based page number")
    limit: int = Field(..., description="Page size")
    total: int = Field(..., description="Total number of subscriptions")


class SubscriptionPageResponse(BaseModel):
    """Response of GET /subs when page or limit is given."""

    subscriptions: List[SubscriptionResponse]
    pagination: PaginationInfo


class TotalResponse(BaseModel):
    """Response of GET /subs/total."""

    total: int = Field(..., ge=0, description="Billed amount for the period")
