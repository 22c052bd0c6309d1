"""
BizTime Backend — Invoice Request/Response Schemas
====================================================

What:  Pydantic models for the /invoices API contract.

Serialization:
    `amt` is a Decimal and is emitted as a string ("200.00") so no precision
    is lost on the way to the client; dates are ISO 8601 ("2018-02-02").
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from biztime.schemas.company import CompanyOut


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


_CENTS = Decimal("0.01")


class _AmountMixin(BaseModel):
    amt: Decimal = Field(ge=0, max_digits=10, decimal_places=2, description="Amount owed")

    @field_validator("amt")
    @classmethod
    def to_cents(cls, v: Decimal) -> Decimal:
        """Normalizes 200 / 200.0 to 200.00 so responses match stored values."""
        return v.quantize(_CENTS)


class InvoiceCreate(_AmountMixin):
    """Body of POST /invoices. New invoices always start unpaid."""
    comp_code: str = Field(min_length=1, max_length=100, description="Code of the billed company")


class InvoiceUpdate(_AmountMixin):
    """
    Body of PUT /invoices/{id}.

    `paid_date` is absent on purpose: it is derived from the stored state
    and `paid` by resolve_payment_update().
    """
    paid: bool = Field(description="Whether the invoice is paid")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class InvoiceSummary(BaseModel):
    id: int
    comp_code: str

    model_config = {"from_attributes": True}


class InvoiceOut(BaseModel):
    """Full invoice row as stored."""
    id: int
    comp_code: str
    amt: Decimal
    paid: bool
    add_date: date
    paid_date: Optional[date] = None

    model_config = {"from_attributes": True}


class InvoiceDetail(BaseModel):
    """Invoice with its company inlined in place of comp_code."""
    id: int
    amt: Decimal
    paid: bool
    add_date: date
    paid_date: Optional[date] = None
    company: CompanyOut


class InvoiceListResponse(BaseModel):
    invoices: List[InvoiceSummary]


class InvoiceResponse(BaseModel):
    invoice: InvoiceOut


class InvoiceDetailResponse(BaseModel):
    invoice: InvoiceDetail
