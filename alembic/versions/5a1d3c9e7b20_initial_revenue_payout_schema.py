"""initial revenue, payout and check tracking schema

Revision ID: 5a1d3c9e7b20
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5a1d3c9e7b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "houses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_houses_id", "houses", ["id"], unique=False)

    op.create_table(
        "service_codes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_service_codes_id", "service_codes", ["id"], unique=False)
    op.create_index("ix_service_codes_code", "service_codes", ["code"], unique=True)

    op.create_table(
        "staff",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_staff_id", "staff", ["id"], unique=False)

    op.create_table(
        "payout_rates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("house_id", sa.Integer(), sa.ForeignKey("houses.id"), nullable=False),
        sa.Column("service_code_id", sa.Integer(), sa.ForeignKey("service_codes.id"), nullable=False),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id"), nullable=False),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("house_id", "service_code_id", "staff_id", name="uq_payout_rates_triple"),
    )
    op.create_index("ix_payout_rates_id", "payout_rates", ["id"], unique=False)
    op.create_index("ix_payout_rates_house_id", "payout_rates", ["house_id"], unique=False)
    op.create_index("ix_payout_rates_service_code_id", "payout_rates", ["service_code_id"], unique=False)
    op.create_index("ix_payout_rates_staff_id", "payout_rates", ["staff_id"], unique=False)

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("house_id", sa.Integer(), sa.ForeignKey("houses.id"), nullable=True),
        sa.Column("program", sa.String(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_patients_id", "patients", ["id"], unique=False)
    op.create_index("ix_patients_name", "patients", ["name"], unique=False)
    op.create_index("ix_patients_house_id", "patients", ["house_id"], unique=False)

    op.create_table(
        "revenue_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("check_date", sa.Date(), nullable=True),
        sa.Column("check_number", sa.String(), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=True),
        sa.Column("house_id", sa.Integer(), sa.ForeignKey("houses.id"), nullable=False),
        sa.Column("service_code_id", sa.Integer(), sa.ForeignKey("service_codes.id"), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="paid"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_revenue_entries_id", "revenue_entries", ["id"], unique=False)
    op.create_index("ix_revenue_entries_date", "revenue_entries", ["date"], unique=False)
    op.create_index("ix_revenue_entries_check_date", "revenue_entries", ["check_date"], unique=False)
    op.create_index("ix_revenue_entries_check_number", "revenue_entries", ["check_number"], unique=False)
    op.create_index("ix_revenue_entries_patient_id", "revenue_entries", ["patient_id"], unique=False)
    op.create_index("ix_revenue_entries_house_id", "revenue_entries", ["house_id"], unique=False)
    op.create_index("ix_revenue_entries_service_code_id", "revenue_entries", ["service_code_id"], unique=False)

    op.create_table(
        "payouts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column(
            "revenue_entry_id",
            sa.Integer(),
            sa.ForeignKey("revenue_entries.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("revenue_entry_id", "staff_id", name="uq_payouts_entry_staff"),
    )
    op.create_index("ix_payouts_id", "payouts", ["id"], unique=False)
    op.create_index("ix_payouts_revenue_entry_id", "payouts", ["revenue_entry_id"], unique=False)
    op.create_index("ix_payouts_staff_id", "payouts", ["staff_id"], unique=False)

    op.create_table(
        "check_tracking",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("service_provider", sa.String(), nullable=False),
        sa.Column("check_number", sa.String(), nullable=False),
        sa.Column("check_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("check_date", sa.Date(), nullable=False),
        sa.Column("processed_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_check_tracking_id", "check_tracking", ["id"], unique=False)
    op.create_index("ix_check_tracking_check_number", "check_tracking", ["check_number"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("vendor", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="paid"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_expenses_id", "expenses", ["id"], unique=False)
    op.create_index("ix_expenses_date", "expenses", ["date"], unique=False)
    op.create_index("ix_expenses_category", "expenses", ["category"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("source", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=True),
        sa.Column("risk_level", sa.String(), nullable=False, server_default="low"),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_id", "audit_logs", ["id"], unique=False)
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"], unique=False)
    op.create_index("ix_audit_logs_entity_type", "audit_logs", ["entity_type"], unique=False)
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"], unique=False)
    op.create_index("ix_audit_logs_source", "audit_logs", ["source"], unique=False)
    op.create_index("ix_audit_logs_status", "audit_logs", ["status"], unique=False)
    op.create_index("ix_audit_logs_risk_level", "audit_logs", ["risk_level"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("audit_logs")
    op.drop_table("expenses")
    op.drop_table("check_tracking")
    op.drop_table("payouts")
    op.drop_table("revenue_entries")
    op.drop_table("patients")
    op.drop_table("payout_rates")
    op.drop_table("staff")
    op.drop_table("service_codes")
    op.drop_table("houses")
