"""create tenancy and subscription tables

Revision ID: 3c9d2a71b4e8
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c9d2a71b4e8"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "franchises",
        sa.Column("slug", sa.String(length=63), nullable=False),
        sa.Column("subdomain", sa.String(length=63), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("locale", sa.String(length=16), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("slug", name="pk_franchises"),
    )
    op.create_index(
        "ix_franchises_subdomain", "franchises", ["subdomain"], unique=True
    )

    op.create_table(
        "business_profiles",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("tenant", sa.String(length=63), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("owner_user_id", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_business_profiles"),
        sa.ForeignKeyConstraint(
            ["tenant"],
            ["franchises.slug"],
            name="fk_business_profiles_tenant_franchises",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_business_profiles_tenant", "business_profiles", ["tenant"])
    op.create_index(
        "ix_business_profiles_owner_user_id", "business_profiles", ["owner_user_id"]
    )

    op.create_table(
        "business_subscriptions",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("business_id", sa.String(length=26), nullable=False),
        sa.Column("is_in_free_trial", sa.Boolean(), nullable=True),
        sa.Column("free_trial_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=True),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("tier_name", sa.String(length=64), nullable=True),
        sa.Column("tier_display_name", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_business_subscriptions"),
        sa.ForeignKeyConstraint(
            ["business_id"],
            ["business_profiles.id"],
            name="fk_business_subscriptions_business_id_business_profiles",
            ondelete="CASCADE",
        ),
    )
    # Latest-record lookups order by created_at per business
    op.create_index(
        "ix_business_subscriptions_business_id",
        "business_subscriptions",
        ["business_id", "created_at"],
    )

    op.create_table(
        "city_admins",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("tenant", sa.String(length=63), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_city_admins"),
        sa.ForeignKeyConstraint(
            ["tenant"],
            ["franchises.slug"],
            name="fk_city_admins_tenant_franchises",
            ondelete="RESTRICT",
        ),
        sa.UniqueConstraint("tenant", "username", name="uq_city_admins_tenant"),
    )
    op.create_index("ix_city_admins_tenant", "city_admins", ["tenant"])

    op.create_table(
        "admin_sessions",
        sa.Column("token_hash", sa.String(length=64), nullable=False),  # SHA-256 hex
        sa.Column("admin_id", sa.String(length=26), nullable=False),
        sa.Column("tenant", sa.String(length=63), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("token_hash", name="pk_admin_sessions"),
        sa.ForeignKeyConstraint(
            ["admin_id"],
            ["city_admins.id"],
            name="fk_admin_sessions_admin_id_city_admins",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_admin_sessions_admin_id", "admin_sessions", ["admin_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_admin_sessions_admin_id", table_name="admin_sessions")
    op.drop_table("admin_sessions")
    op.drop_index("ix_city_admins_tenant", table_name="city_admins")
    op.drop_table("city_admins")
    op.drop_index(
        "ix_business_subscriptions_business_id", table_name="business_subscriptions"
    )
    op.drop_table("business_subscriptions")
    op.drop_index(
        "ix_business_profiles_owner_user_id", table_name="business_profiles"
    )
    op.drop_index("ix_business_profiles_tenant", table_name="business_profiles")
    op.drop_table("business_profiles")
    op.drop_index("ix_franchises_subdomain", table_name="franchises")
    op.drop_table("franchises")
