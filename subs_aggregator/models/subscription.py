"""
User subscription model.

WHY: A user subscription is the only persisted entity: which user pays for
which service, how much per month, and over which active interval. The
billing total for a period is derived from these rows at query time.

ARCHITECTURE:
- No foreign keys: ``user_id`` is an opaque identifier owned elsewhere
- Prices are integers in the smallest currency unit
- Dates are stored with timezone (timestamptz on PostgreSQL)
"""

from sqlalchemy import BigInteger, Column, DateTime, Index, Text

from subs_aggregator.models.base import Base, PrimaryKeyMixin


class UserSubscription(Base, PrimaryKeyMixin):
    """
    One user's subscription to one service over an active interval.

    INVARIANTS (enforced by the validator before writes):
    - service_name and user_id are non-empty
    - price > 0
    - end_date strictly after start_date
    """

    __tablename__ = "user_subs"

    service_name = Column(
        Text,
        nullable=False,
        doc="Name of the subscribed service",
    )
    price = Column(
        BigInteger,
        nullable=False,
        doc="Monthly price in the smallest currency unit",
    )
    user_id = Column(
        Text,
        nullable=False,
        index=True,
        doc="Opaque identifier of the owning user",
    )
    start_date = Column(
        DateTime(timezone=True),
        nullable=False,
        doc="First moment of the active interval",
    )
    end_date = Column(
        DateTime(timezone=True),
        nullable=False,
        doc="Last moment of the active interval",
    )

    # Supports the overlap scan used by the billing total
    __table_args__ = (
        Index("ix_user_subs_period", "start_date", "end_date"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<UserSubscription(id={self.id}, user_id={self.user_id}, "
            f"service_name={self.service_name}, price={self.price})>"
        )
