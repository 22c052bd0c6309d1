"""
BizTime Backend — Invoice Route Handlers
==========================================

    GET    /invoices        → {invoices: [{id, comp_code}, ...]}
    GET    /invoices/{id}   → {invoice: {id, amt, paid, add_date, paid_date,
                                         company: {code, name, description}}}
    POST   /invoices        → 201 {invoice: {id, comp_code, amt, paid, add_date, paid_date}}
    PUT    /invoices/{id}   → {invoice: {id, comp_code, amt, paid, add_date, paid_date}}
    DELETE /invoices/{id}   → {status: "deleted"}

PUT takes {amt, paid}. paid_date is never accepted from the client: it is
set when an unpaid invoice is paid, kept when a paid invoice stays paid, and
cleared when an invoice is marked unpaid.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import get_db_session
from biztime.schemas.common import ErrorResponse, StatusResponse
from biztime.schemas.invoice import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceUpdate,
)
from biztime.services.invoice_service import invoice_service

router = APIRouter(prefix="/invoices", tags=["Invoices"])

_NOT_FOUND = {404: {"description": "Invoice not found", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Missing or invalid body", "model": ErrorResponse}}


@router.get("", response_model=InvoiceListResponse, summary="List invoices")
async def list_invoices(
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceListResponse:
    """All invoices as {id, comp_code}, ordered by id."""
    invoices = await invoice_service.list_invoices(db)
    return InvoiceListResponse(invoices=invoices)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceDetailResponse,
    responses=_NOT_FOUND,
    summary="Get an invoice with its company",
)
async def get_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceDetailResponse:
    invoice = await invoice_service.get_invoice(db, invoice_id)
    return InvoiceDetailResponse(invoice=invoice)


@router.post(
    "",
    status_code=201,
    response_model=InvoiceResponse,
    responses={
        **_BAD_REQUEST,
        404: {"description": "Company not found", "model": ErrorResponse},
    },
    summary="Create an unpaid invoice",
)
async def create_invoice(
    payload: InvoiceCreate,
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceResponse:
    invoice = await invoice_service.create_invoice(db, payload)
    return InvoiceResponse(invoice=invoice)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
    summary="Update amount and paid status",
)
async def update_invoice(
    invoice_id: int,
    payload: InvoiceUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceResponse:
    invoice = await invoice_service.update_invoice(db, invoice_id, payload)
    return InvoiceResponse(invoice=invoice)


@router.delete(
    "/{invoice_id}",
    response_model=StatusResponse,
    responses=_NOT_FOUND,
    summary="Delete an invoice",
)
async def delete_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> StatusResponse:
    await invoice_service.delete_invoice(db, invoice_id)
    return StatusResponse(status="deleted")
