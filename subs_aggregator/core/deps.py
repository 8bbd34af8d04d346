"""
FastAPI dependencies.

WHY: Route handlers receive a ready ``SubscriptionService`` wired to the
request's database session, and tests can replace either layer with
``app.dependency_overrides``.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from subs_aggregator.core.config import Settings
from subs_aggregator.dao.subscription import SubscriptionDAO
from subs_aggregator.db.session import get_db
from subs_aggregator.services.subscription_service import SubscriptionService


def get_subscription_service(db: AsyncSession = Depends(get_db)) -> SubscriptionService:
    """
    Build the subscription service for the current request.

    Usage:
        @router.get("/subs")
        async def list_subs(service: SubscriptionService = Depends(get_subscription_service)):
            ...
    """
    return SubscriptionService(SubscriptionDAO(db))


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings
