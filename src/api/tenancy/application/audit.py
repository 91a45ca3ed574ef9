"""Audit sink for access validation attempts.

Every call to the access validator writes exactly one entry, whether it
allows or denies. Entries go to a dedicated structlog logger named
``audit`` so deployments can route them to append-only storage.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from tenancy.application.value_objects import AuditEntry

AUDIT_LOGGER_NAME = "audit"


class AuditSink(Protocol):
    """Destination for audit entries."""

    def record(self, entry: AuditEntry) -> None:
        ...


class StructlogAuditSink:
    """Writes audit entries as ``access_audit`` events."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger(AUDIT_LOGGER_NAME)

    def record(self, entry: AuditEntry) -> None:
        self._logger.info("access_audit", **entry.as_dict())
