"""SQLAlchemy ORM models for the tenancy bounded context."""

from tenancy.infrastructure.models.admin import AdminSessionModel, CityAdminModel
from tenancy.infrastructure.models.business import BusinessProfileModel
from tenancy.infrastructure.models.franchise import FranchiseModel

__all__ = [
    "AdminSessionModel",
    "BusinessProfileModel",
    "CityAdminModel",
    "FranchiseModel",
]
