"""SQLAlchemy ORM models for city admins and their sessions."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class CityAdminModel(Base, TimestampMixin):
    """ORM model for city_admins table.

    Usernames are unique per franchise, not globally.
    """

    __tablename__ = "city_admins"
    __table_args__ = (UniqueConstraint("tenant", "username"),)

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant: Mapped[str] = mapped_column(
        String(63), ForeignKey("franchises.slug"), nullable=False, index=True
    )
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CityAdminModel(id={self.id}, tenant={self.tenant})>"


class AdminSessionModel(Base):
    """ORM model for admin_sessions table.

    Keyed by the SHA-256 hex digest of the opaque session token.
    """

    __tablename__ = "admin_sessions"

    token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    admin_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("city_admins.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant: Mapped[str] = mapped_column(String(63), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<AdminSessionModel(admin_id={self.admin_id}, tenant={self.tenant})>"
