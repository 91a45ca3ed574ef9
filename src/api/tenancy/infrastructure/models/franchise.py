"""SQLAlchemy ORM model for the franchises table."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class FranchiseModel(Base, TimestampMixin):
    """ORM model for franchises table.

    One row per franchise city. ``slug`` is the tenant identifier used in
    every other table and is never updated.
    """

    __tablename__ = "franchises"

    slug: Mapped[str] = mapped_column(String(63), primary_key=True)
    subdomain: Mapped[str] = mapped_column(
        String(63), nullable=False, unique=True, index=True
    )
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    locale: Mapped[str] = mapped_column(String(16), nullable=False, default="en-US")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<FranchiseModel(slug={self.slug}, status={self.status})>"
