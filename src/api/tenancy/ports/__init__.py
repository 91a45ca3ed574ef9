"""Ports for the tenancy bounded context."""

from tenancy.ports.repositories import (
    IAdminSessionRepository,
    IBusinessRepository,
    ICityAdminRepository,
    IFranchiseRepository,
)

__all__ = [
    "IAdminSessionRepository",
    "IBusinessRepository",
    "ICityAdminRepository",
    "IFranchiseRepository",
]
