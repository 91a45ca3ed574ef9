"""Domain probe for subscription repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SubscriptionRepositoryProbe(Protocol):
    """Domain probe for subscription lookups."""

    def subscription_retrieved(self, business_id: str, status: str | None) -> None:
        ...

    def subscription_not_found(self, business_id: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> SubscriptionRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSubscriptionRepositoryProbe:
    """Default implementation of SubscriptionRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultSubscriptionRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultSubscriptionRepositoryProbe(logger=self._logger, context=context)

    def subscription_retrieved(self, business_id: str, status: str | None) -> None:
        self._logger.debug(
            "subscription_retrieved",
            business_id=business_id,
            subscription_status=status,
            **self._get_context_kwargs(),
        )

    def subscription_not_found(self, business_id: str) -> None:
        self._logger.debug(
            "subscription_not_found",
            business_id=business_id,
            **self._get_context_kwargs(),
        )
