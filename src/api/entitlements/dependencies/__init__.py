"""FastAPI dependencies for the entitlements bounded context."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.application import EntitlementService
from entitlements.infrastructure.observability import (
    DefaultSubscriptionRepositoryProbe,
)
from entitlements.infrastructure.subscription_repository import (
    SubscriptionRepository,
)
from infrastructure.database.dependencies import get_read_session
from shared_kernel.observability_context import ObservationContext
from tenancy.dependencies.request import get_observation_context


def get_subscription_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> SubscriptionRepository:
    return SubscriptionRepository(
        session=session,
        probe=DefaultSubscriptionRepositoryProbe().with_context(context),
    )


def get_entitlement_service(
    repository: Annotated[SubscriptionRepository, Depends(get_subscription_repository)],
) -> EntitlementService:
    return EntitlementService(subscription_repository=repository)
