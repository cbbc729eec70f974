"""Create insurance_policies table.

Revision ID: 001
Revises:
Create Date: 2025-07-02

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TEXT_COLUMNS = (
    "assured",
    "address",
    "coc_number",
    "or_number",
    "policy_number",
    "policy_type",
    "model",
    "make",
    "body_type",
    "color",
    "mv_file_no",
    "plate_no",
    "chassis_no",
    "motor_no",
)
MONEY_COLUMNS = (
    "premium",
    "other_charges",
    "auth_fee",
    "doc_stamps",
    "e_vat",
    "lgt",
    "total_premium",
)


def upgrade() -> None:
    """Create the policy table, its soft-delete index and timestamp trigger."""
    op.create_table(
        "insurance_policies",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        *(
            sa.Column(name, sa.Text(), nullable=False, server_default="")
            for name in TEXT_COLUMNS
        ),
        sa.Column("policy_year", sa.Integer(), nullable=True),
        sa.Column("date_issued", sa.Date(), nullable=True),
        sa.Column("date_received", sa.Date(), nullable=True),
        sa.Column("insurance_from_date", sa.Date(), nullable=True),
        sa.Column("insurance_to_date", sa.Date(), nullable=True),
        *(
            sa.Column(
                name, sa.Numeric(), nullable=False, server_default=sa.text("0")
            )
            for name in MONEY_COLUMNS
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_insurance_policies")),
    )

    # Active/deleted listings filter on this column
    op.create_index(
        op.f("ix_insurance_policies_deleted_at"),
        "insurance_policies",
        ["deleted_at"],
        unique=False,
    )

    op.execute(
        """
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ language 'plpgsql';
        """
    )
    op.execute(
        """
        CREATE TRIGGER update_insurance_policies_updated_at
        BEFORE UPDATE ON insurance_policies
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
        """
    )


def downgrade() -> None:
    """Drop the policy table and its trigger function."""
    op.execute(
        "DROP TRIGGER IF EXISTS update_insurance_policies_updated_at "
        "ON insurance_policies;"
    )
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column();")
    op.drop_index(
        op.f("ix_insurance_policies_deleted_at"), table_name="insurance_policies"
    )
    op.drop_table("insurance_policies")
