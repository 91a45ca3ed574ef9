"""SQLAlchemy ORM model for the business_profiles table."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class BusinessProfileModel(Base, TimestampMixin):
    """ORM model for business_profiles table.

    ``tenant`` is written once at creation. ``owner_user_id`` holds the OIDC
    subject of the claiming owner and is null while the listing is
    unclaimed.
    """

    __tablename__ = "business_profiles"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant: Mapped[str] = mapped_column(
        String(63), ForeignKey("franchises.slug"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="unclaimed"
    )
    owner_user_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<BusinessProfileModel(id={self.id}, tenant={self.tenant}, "
            f"status={self.status})>"
        )
