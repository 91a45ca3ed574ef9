"""Protocol for admin session observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AdminSessionProbe(Protocol):
    """Domain probe for admin login and logout."""

    def session_issued(self, admin_id: str, tenant: str) -> None:
        ...

    def login_failed(self, tenant: str, username: str) -> None:
        ...

    def session_revoked(self) -> None:
        ...

    def session_revoke_missed(self) -> None:
        ...

    def with_context(self, context: ObservationContext) -> AdminSessionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAdminSessionProbe:
    """Default implementation of AdminSessionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAdminSessionProbe:
        """Create a new probe with observation context bound."""
        return DefaultAdminSessionProbe(logger=self._logger, context=context)

    def session_issued(self, admin_id: str, tenant: str) -> None:
        """Record a successful admin login."""
        self._logger.info(
            "admin_session_issued",
            admin_id=admin_id,
            tenant=tenant,
            **self._get_context_kwargs(),
        )

    def login_failed(self, tenant: str, username: str) -> None:
        """Record a failed admin login.

        The cause (unknown user, wrong password, inactive) is deliberately
        not distinguished.
        """
        self._logger.warning(
            "admin_login_failed",
            tenant=tenant,
            username=username,
            **self._get_context_kwargs(),
        )

    def session_revoked(self) -> None:
        self._logger.info(
            "admin_session_revoked",
            **self._get_context_kwargs(),
        )

    def session_revoke_missed(self) -> None:
        self._logger.debug(
            "admin_session_revoke_missed",
            **self._get_context_kwargs(),
        )
