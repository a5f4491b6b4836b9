"""Initial LORO schema: tenancy, users, rewards and the enterprise modules.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_NOW = sa.text("now()")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    ]


def _tenancy() -> list[sa.Column]:
    return [
        sa.Column("organisation_id", sa.BigInteger(), sa.ForeignKey("organisations.id"), nullable=False),
        sa.Column("branch_id", sa.BigInteger(), sa.ForeignKey("branches.id"), nullable=True),
    ]


def upgrade() -> None:
    """Create all tables."""
    # --- Tenancy ---
    op.create_table(
        "organisations",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("currency", sa.String(8), server_default="ZAR", nullable=False),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    )

    op.create_table(
        "branches",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("organisation_id", sa.BigInteger(), sa.ForeignKey("organisations.id"), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    )
    op.create_index("ix_branches_organisation_id", "branches", ["organisation_id"])

    op.create_table(
        "licenses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("organisation_id", sa.BigInteger(), sa.ForeignKey("organisations.id"), nullable=False),
        sa.Column("plan", sa.String(32), nullable=False),
        sa.Column("status", sa.String(16), server_default="active", nullable=False),
        sa.Column("valid_from", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_validated", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_users", sa.Integer(), server_default="10", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    )
    op.create_index("ix_licenses_organisation_id", "licenses", ["organisation_id"])
    op.execute(
        "ALTER TABLE licenses ADD CONSTRAINT ck_licenses_plan "
        "CHECK (plan IN ('starter', 'professional', 'business', 'enterprise'))"
    )

    # --- Users ---
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("organisation_id", sa.BigInteger(), sa.ForeignKey("organisations.id"), nullable=False),
        sa.Column("branch_id", sa.BigInteger(), sa.ForeignKey("branches.id"), nullable=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(256), nullable=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("surname", sa.String(64), server_default="", nullable=False),
        sa.Column("username", sa.String(64), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("role", sa.String(16), server_default="user", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_organisation_id", "users", ["organisation_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("data", postgresql.JSONB(), server_default="{}", nullable=False),
        sa.Column("is_read", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index(
        "ix_notifications_unread", "notifications", ["user_id"], postgresql_where=sa.text("is_read = false")
    )

    # --- Rewards ---
    op.create_table(
        "user_rewards",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("current_xp", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_xp", sa.Integer(), server_default="0", nullable=False),
        sa.Column("level", sa.Integer(), server_default="1", nullable=False),
        sa.Column("rank", sa.String(16), server_default="ROOKIE", nullable=False),
        sa.Column(
            "xp_breakdown",
            postgresql.JSONB(),
            server_default=(
                '{"tasks": 0, "leads": 0, "sales": 0, "attendance": 0, '
                '"collaboration": 0, "login": 0, "other": 0}'
            ),
            nullable=False,
        ),
        sa.Column("last_action", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_user_rewards_user_id", "user_rewards", ["user_id"], unique=True)
    op.create_index("ix_user_rewards_total_xp", "user_rewards", [sa.text("total_xp DESC")])

    op.create_table(
        "xp_transactions",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_rewards_id", sa.BigInteger(), sa.ForeignKey("user_rewards.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("xp_amount", sa.Integer(), nullable=False),
        sa.Column("meta", postgresql.JSONB(), server_default="{}", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    )
    op.create_index("ix_xp_transactions_user_rewards_id", "xp_transactions", ["user_rewards_id"])
    op.create_index("ix_xp_transactions_created_at", "xp_transactions", ["created_at"])

    op.create_table(
        "achievements",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_rewards_id", sa.BigInteger(), sa.ForeignKey("user_rewards.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("xp_value", sa.Integer(), server_default="0", nullable=False),
        sa.Column("icon", sa.String(256), nullable=True),
        sa.Column("category", sa.String(32), server_default="special", nullable=False),
        sa.Column("is_repeatable", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    )
    op.create_index("ix_achievements_user_rewards_id", "achievements", ["user_rewards_id"])

    op.create_table(
        "unlocked_items",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_rewards_id", sa.BigInteger(), sa.ForeignKey("user_rewards.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("rarity", sa.String(16), server_default="common", nullable=False),
        sa.Column("icon", sa.String(256), nullable=True),
        sa.Column("required_level", sa.Integer(), server_default="1", nullable=False),
        sa.Column("required_xp", sa.Integer(), server_default="0", nullable=False),
        sa.Column("unlocked_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    )
    op.create_index("ix_unlocked_items_user_rewards_id", "unlocked_items", ["user_rewards_id"])

    # --- Assets ---
    op.create_table(
        "assets",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("brand", sa.String(128), nullable=False),
        sa.Column("serial_number", sa.String(128), nullable=False),
        sa.Column("model_number", sa.String(128), nullable=False),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("has_insurance", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("insurance_provider", sa.String(128), nullable=True),
        sa.Column("insurance_expiry_date", sa.Date(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("owner_id", sa.BigInteger(), sa.ForeignKey("users.id"), nullable=False),
        *_tenancy(),
        *_timestamps(),
    )
    op.create_index("ix_assets_serial_number", "assets", ["serial_number"], unique=True)
    op.create_index("ix_assets_owner_id", "assets", ["owner_id"])
    op.create_index("ix_assets_organisation_id", "assets", ["organisation_id"])

    # --- Leave ---
    op.create_table(
        "leave",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.BigInteger(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("leave_type", sa.String(32), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("motivation", sa.Text(), nullable=True),
        sa.Column("status", sa.String(24), server_default="pending", nullable=False),
        sa.Column("approved_by_id", sa.BigInteger(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("is_half_day", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("half_day_period", sa.String(16), nullable=True),
        sa.Column("attachments", postgresql.JSONB(), server_default="[]", nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("is_public_holiday", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("is_paid", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("paid_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("tags", postgresql.JSONB(), server_default="[]", nullable=False),
        sa.Column("delegated_to_id", sa.BigInteger(), sa.ForeignKey("users.id"), nullable=True),
        *_tenancy(),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_leave_owner_id", "leave", ["owner_id"])
    op.create_index("ix_leave_status", "leave", ["status"])
    op.create_index("ix_leave_organisation_id", "leave", ["organisation_id"])
    op.execute("ALTER TABLE leave ADD CONSTRAINT ck_leave_dates CHECK (end_date >= start_date)")

    # --- News ---
    op.create_table(
        "news",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("subtitle", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("attachments", sa.Text(), nullable=True),
        sa.Column("cover_image", sa.Text(), nullable=True),
        sa.Column("thumbnail", sa.Text(), nullable=True),
        sa.Column("publishing_date", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
        sa.Column("status", sa.String(16), server_default="active", nullable=False),
        sa.Column("category", sa.String(32), server_default="news", nullable=False),
        sa.Column("share_link", sa.Text(), nullable=True),
        sa.Column("author_id", sa.BigInteger(), sa.ForeignKey("users.id"), nullable=False),
        *_tenancy(),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_news_organisation_id", "news", ["organisation_id"])

    # --- Payslips ---
    op.create_table(
        "payslips",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("period", sa.String(16), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("payslip_number", sa.String(64), nullable=True),
        sa.Column("gross_pay", sa.Numeric(12, 2), nullable=True),
        sa.Column("net_pay", sa.Numeric(12, 2), nullable=True),
        sa.Column("status", sa.String(16), server_default="generated", nullable=False),
        sa.Column("document_key", sa.String(512), nullable=True),
        sa.Column("document_url", sa.Text(), nullable=True),
        *_tenancy(),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_payslips_user_id", "payslips", ["user_id"])
    op.create_index("ix_payslips_organisation_id", "payslips", ["organisation_id"])

    # --- Resellers ---
    op.create_table(
        "resellers",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("logo", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), server_default="active", nullable=False),
        sa.Column("contact_person", sa.String(128), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("address", postgresql.JSONB(), server_default="{}", nullable=False),
        *_tenancy(),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_resellers_organisation_id", "resellers", ["organisation_id"])

    # --- Shop ---
    op.create_table(
        "clients",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        *_tenancy(),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
    )
    op.create_index("ix_clients_organisation_id", "clients", ["organisation_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("sku", sa.String(64), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("sale_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_on_promotion", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("stock_quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("status", sa.String(16), server_default="active", nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("reseller_id", sa.BigInteger(), sa.ForeignKey("resellers.id"), nullable=True),
        *_tenancy(),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_products_sku", "products", ["sku"], unique=True)
    op.create_index("ix_products_category", "products", ["category"])
    op.create_index("ix_products_organisation_id", "products", ["organisation_id"])

    op.create_table(
        "quotations",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("quotation_number", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_items", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(24), server_default="draft", nullable=False),
        sa.Column("quotation_date", sa.DateTime(timezone=True), server_default=_NOW, nullable=False),
        sa.Column("promo_code", sa.String(32), nullable=True),
        sa.Column("currency", sa.String(8), server_default="ZAR", nullable=False),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_token", sa.String(64), nullable=True),
        sa.Column("review_url", sa.Text(), nullable=True),
        sa.Column("is_converted", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("placed_by_id", sa.BigInteger(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("client_id", sa.BigInteger(), sa.ForeignKey("clients.id"), nullable=False),
        *_tenancy(),
        *_timestamps(),
    )
    op.create_index("ix_quotations_quotation_number", "quotations", ["quotation_number"], unique=True)
    op.create_index("ix_quotations_review_token", "quotations", ["review_token"], unique=True)
    op.create_index("ix_quotations_status", "quotations", ["status"])
    op.create_index("ix_quotations_placed_by_id", "quotations", ["placed_by_id"])
    op.create_index("ix_quotations_client_id", "quotations", ["client_id"])
    op.create_index("ix_quotations_organisation_id", "quotations", ["organisation_id"])

    op.create_table(
        "quotation_items",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("quotation_id", sa.BigInteger(), sa.ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.BigInteger(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_quotation_items_quotation_id", "quotation_items", ["quotation_id"])
    op.execute("ALTER TABLE quotation_items ADD CONSTRAINT ck_quotation_items_quantity CHECK (quantity >= 1)")


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    for table in (
        "quotation_items",
        "quotations",
        "products",
        "clients",
        "resellers",
        "payslips",
        "news",
        "leave",
        "assets",
        "unlocked_items",
        "achievements",
        "xp_transactions",
        "user_rewards",
        "notifications",
        "users",
        "licenses",
        "branches",
        "organisations",
    ):
        op.drop_table(table)
