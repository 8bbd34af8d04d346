"""Subscription aggregation service: subscription CRUD and billed-amount totals."""

__version__ = "1.3.0"
