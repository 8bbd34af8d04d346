"""
Base model class for all SQLAlchemy models.

WHY: Centralizing the declarative base and the primary key column keeps
every table on the same metadata, which is what Alembic and the test
fixtures create tables from.
"""

from sqlalchemy import BigInteger, Column, Integer
from sqlalchemy.orm import DeclarativeBase

# Largest value a signed 64-bit BIGINT column (and SQLite INTEGER) can hold
BIGINT_MAX = 2**63 - 1


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models (SQLAlchemy 2.0 declarative)."""

    pass


class PrimaryKeyMixin:
    """
    Mixin adding an auto-incrementing 64-bit primary key.

    SQLite only auto-increments a column declared exactly ``INTEGER PRIMARY
    KEY``, so the variant keeps it as INTEGER there (still 64-bit).
    """

    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        index=True,
    )
