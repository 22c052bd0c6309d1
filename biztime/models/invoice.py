"""
BizTime Backend — Invoice SQLAlchemy Model
============================================

What:  ORM model for the `invoices` table.
Who:   Used by InvoiceService and CompanyService (invoice ids on company
       detail); read by Alembic.

Payment state:
    `paid` and `paid_date` move together: paid_date is set exactly when the
    invoice is paid. The rule that keeps them in step lives in
    biztime.services.payment_state; the CHECK constraint below makes the
    database refuse any row that breaks it.

Lifecycle:
    1. Created unpaid (paid=False, paid_date=NULL, add_date=today)
    2. Updated through PUT /invoices/{id} (amt, paid; paid_date derived)
    3. Deleted explicitly, or by the storage layer when its company is deleted
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from biztime.database import Base


class Invoice(Base):
    """A billing record linking a company to an amount owed and its payment status."""

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # ON DELETE CASCADE: the application never deletes invoices on behalf of
    # a company; the database does
    comp_code: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("companies.code", ondelete="CASCADE"),
        nullable=False,
    )

    amt: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Invoice amount, non-negative",
    )

    paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    add_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=date.today,
        server_default=text("CURRENT_DATE"),
        comment="Date the invoice was created; never updated",
    )

    paid_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        default=None,
        comment="Date the invoice was marked paid; NULL while unpaid",
    )

    __table_args__ = (
        CheckConstraint("amt >= 0", name="ck_invoices_amt_nonneg"),
        CheckConstraint(
            "(paid AND paid_date IS NOT NULL) OR (NOT paid AND paid_date IS NULL)",
            name="ck_invoices_paid_date_matches_paid",
        ),
        Index("idx_invoices_comp_code", "comp_code"),
    )

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, comp_code='{self.comp_code}', "
            f"amt={self.amt}, paid={self.paid})>"
        )
