"""Domain probe for tenancy repository operations.

Following Domain-Oriented Observability patterns, this probe captures
lookups against franchises, businesses, admins and admin sessions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RepositoryProbe(Protocol):
    """Domain probe for tenancy repository operations."""

    def entity_retrieved(self, entity: str, key: str) -> None:
        """Record that an entity was found."""
        ...

    def entity_not_found(self, entity: str, key: str) -> None:
        """Record that a lookup matched nothing."""
        ...

    def entities_listed(self, entity: str, count: int) -> None:
        """Record the size of a listing."""
        ...

    def ambiguous_owner(self, owner_user_id: str, count: int) -> None:
        """Record an owner linked to more than one business."""
        ...

    def session_stored(self, admin_id: str) -> None:
        """Record that an admin session row was written."""
        ...

    def session_revoked(self, revoked: bool) -> None:
        """Record the outcome of a session revoke."""
        ...

    def with_context(self, context: ObservationContext) -> RepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRepositoryProbe:
    """Default implementation of RepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultRepositoryProbe(logger=self._logger, context=context)

    def entity_retrieved(self, entity: str, key: str) -> None:
        self._logger.debug(
            "tenancy_entity_retrieved",
            entity=entity,
            key=key,
            **self._get_context_kwargs(),
        )

    def entity_not_found(self, entity: str, key: str) -> None:
        self._logger.debug(
            "tenancy_entity_not_found",
            entity=entity,
            key=key,
            **self._get_context_kwargs(),
        )

    def entities_listed(self, entity: str, count: int) -> None:
        self._logger.debug(
            "tenancy_entities_listed",
            entity=entity,
            count=count,
            **self._get_context_kwargs(),
        )

    def ambiguous_owner(self, owner_user_id: str, count: int) -> None:
        """Record an owner linked to more than one business.

        This breaks the one-business-per-owner rule and needs manual
        cleanup, so it logs at error.
        """
        self._logger.error(
            "tenancy_ambiguous_owner",
            owner_user_id=owner_user_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def session_stored(self, admin_id: str) -> None:
        self._logger.debug(
            "tenancy_admin_session_stored",
            admin_id=admin_id,
            **self._get_context_kwargs(),
        )

    def session_revoked(self, revoked: bool) -> None:
        self._logger.debug(
            "tenancy_admin_session_revoke",
            revoked=revoked,
            **self._get_context_kwargs(),
        )
