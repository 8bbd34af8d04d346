"""Database package"""

from subs_aggregator.db.session import create_engine, create_session_factory, create_tables, get_db
from subs_aggregator.models.base import Base

__all__ = ["Base", "create_engine", "create_session_factory", "create_tables", "get_db"]
