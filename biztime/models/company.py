"""
BizTime Backend — Company SQLAlchemy Model
============================================

What:  ORM model for the `companies` table.
Who:   Used by CompanyService (CRUD) and InvoiceService (existence check on
       invoice creation, join for invoice detail); read by Alembic.

Columns:
    - code:        Slug primary key (e.g. "apple", "big-blue"); referenced by
                   invoices.comp_code
    - name:        Display name, unique
    - description: Free text, nullable
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from biztime.database import Base


class Company(Base):
    """A company that invoices are billed to."""

    __tablename__ = "companies"

    code: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Slug identifier, derived from the name when not supplied",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Display name",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    def __repr__(self) -> str:
        return f"<Company(code='{self.code}', name='{self.name}')>"
