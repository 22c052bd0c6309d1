"""Create companies and invoices tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Initial schema: `companies` keyed by slug code, `invoices` keyed by
       serial id with a cascading FK to companies.
Constraints:
    - ck_invoices_amt_nonneg:              amt >= 0
    - ck_invoices_paid_date_matches_paid:  paid_date is set iff paid
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column(
            "code",
            sa.String(100),
            nullable=False,
            comment="Slug identifier, derived from the name when not supplied",
        ),
        sa.Column("name", sa.String(255), nullable=False, comment="Display name"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("code"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comp_code", sa.String(100), nullable=False),
        sa.Column(
            "amt",
            sa.Numeric(10, 2),
            nullable=False,
            comment="Invoice amount, non-negative",
        ),
        sa.Column(
            "paid",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "add_date",
            sa.Date(),
            nullable=False,
            server_default=sa.text("CURRENT_DATE"),
            comment="Date the invoice was created; never updated",
        ),
        sa.Column(
            "paid_date",
            sa.Date(),
            nullable=True,
            comment="Date the invoice was marked paid; NULL while unpaid",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["comp_code"], ["companies.code"], ondelete="CASCADE"),
        sa.CheckConstraint("amt >= 0", name="ck_invoices_amt_nonneg"),
        sa.CheckConstraint(
            "(paid AND paid_date IS NOT NULL) OR (NOT paid AND paid_date IS NULL)",
            name="ck_invoices_paid_date_matches_paid",
        ),
    )

    op.create_index("idx_invoices_comp_code", "invoices", ["comp_code"])


def downgrade() -> None:
    """Drops both tables; all company and invoice data is lost."""
    op.drop_index("idx_invoices_comp_code", table_name="invoices")
    op.drop_table("invoices")
    op.drop_table("companies")
