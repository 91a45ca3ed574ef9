"""SQLAlchemy ORM model for the business_subscriptions table."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class BusinessSubscriptionModel(Base, TimestampMixin):
    """ORM model for business_subscriptions table.

    Rows are append-only history written by the billing integration. The
    row with the greatest ``created_at`` is the current one.
    """

    __tablename__ = "business_subscriptions"
    __table_args__ = (
        Index("ix_business_subscriptions_business_id", "business_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    business_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("business_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_in_free_trial: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    free_trial_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    current_period_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    tier_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tier_display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<BusinessSubscriptionModel(id={self.id}, "
            f"business_id={self.business_id}, status={self.status})>"
        )
