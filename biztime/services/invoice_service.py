"""
BizTime Backend — Invoice Service
===================================

What:  Reads and writes of the `invoices` table, plus the persistence
       gateway used by the payment-state update.
Who:   Called by the /invoices route handlers.

Update flow (PUT /invoices/{id}):
    ┌──────────────────────┐   ┌────────────────────────┐   ┌──────────────────────────┐
    │ fetch_payment_state  │──▶│ resolve_payment_update │──▶│ persist_invoice_update   │
    │ SELECT ... FOR UPDATE│   │ (pure, injected clock) │   │ UPDATE ... RETURNING     │
    └──────────────────────┘   └────────────────────────┘   └──────────────────────────┘

    Both statements run in the request's transaction. On PostgreSQL the
    row lock taken by the SELECT holds until the dependency commits, so a
    concurrent update of the same invoice waits instead of racing between
    the read and the write. SQLite has no row locks; the dialect drops the
    FOR UPDATE clause and the read/write window stays open there.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.exceptions import NotFoundError
from biztime.models.company import Company
from biztime.models.invoice import Invoice
from biztime.schemas.company import CompanyOut
from biztime.schemas.invoice import (
    InvoiceCreate,
    InvoiceDetail,
    InvoiceOut,
    InvoiceSummary,
    InvoiceUpdate,
)
from biztime.services.db_errors import translate_db_errors
from biztime.services.payment_state import (
    Clock,
    PaymentState,
    resolve_payment_update,
)

logger = logging.getLogger(__name__)

_INVOICE_COLUMNS = (
    Invoice.id,
    Invoice.comp_code,
    Invoice.amt,
    Invoice.paid,
    Invoice.add_date,
    Invoice.paid_date,
)


class InvoiceService:
    """
    CRUD operations for invoices.

    Args:
        clock: Source of today's date, used for add_date on creation and for
               paid_date when an invoice becomes paid. Tests pass a fixed one.
    """

    def __init__(self, clock: Clock = date.today):
        self._clock = clock

    async def list_invoices(self, db: AsyncSession) -> List[InvoiceSummary]:
        with translate_db_errors("list invoices"):
            result = await db.execute(
                select(Invoice.id, Invoice.comp_code).order_by(Invoice.id)
            )
            rows = result.mappings().all()
        return [InvoiceSummary(**row) for row in rows]

    async def get_invoice(self, db: AsyncSession, invoice_id: int) -> InvoiceDetail:
        """
        An invoice with its company inlined.

        Raises:
            NotFoundError: no invoice has this id
        """
        with translate_db_errors("get invoice", invoice_id=invoice_id):
            result = await db.execute(
                select(
                    Invoice.id,
                    Invoice.amt,
                    Invoice.paid,
                    Invoice.add_date,
                    Invoice.paid_date,
                    Company.code,
                    Company.name,
                    Company.description,
                )
                .join(Company, Invoice.comp_code == Company.code)
                .where(Invoice.id == invoice_id)
            )
            row = result.mappings().one_or_none()

        if row is None:
            raise NotFoundError(resource="invoice", resource_id=str(invoice_id))

        return InvoiceDetail(
            id=row["id"],
            amt=row["amt"],
            paid=row["paid"],
            add_date=row["add_date"],
            paid_date=row["paid_date"],
            company=CompanyOut(
                code=row["code"],
                name=row["name"],
                description=row["description"],
            ),
        )

    async def create_invoice(self, db: AsyncSession, payload: InvoiceCreate) -> InvoiceOut:
        """
        Insert an unpaid invoice dated today.

        Raises:
            NotFoundError: the referenced company does not exist
        """
        with translate_db_errors("create invoice", comp_code=payload.comp_code):
            company = await db.get(Company, payload.comp_code)
            if company is None:
                raise NotFoundError(resource="company", resource_id=payload.comp_code)

            invoice = Invoice(
                comp_code=payload.comp_code,
                amt=payload.amt,
                paid=False,
                add_date=self._clock(),
                paid_date=None,
            )
            db.add(invoice)
            await db.flush()

        logger.info("Invoice created: %s for %s", invoice.id, invoice.comp_code)
        return InvoiceOut.model_validate(invoice)

    # ── Persistence gateway for the payment-state update ──────────────────

    async def fetch_payment_state(self, db: AsyncSession, invoice_id: int) -> PaymentState:
        """
        Stored (paid, paid_date) of an invoice, row-locked for the rest of
        the transaction where the backend supports it.

        Raises:
            NotFoundError: no invoice has this id
        """
        with translate_db_errors("fetch invoice payment state", invoice_id=invoice_id):
            result = await db.execute(
                select(Invoice.paid, Invoice.paid_date)
                .where(Invoice.id == invoice_id)
                .with_for_update()
            )
            row = result.mappings().one_or_none()

        if row is None:
            raise NotFoundError(resource="invoice", resource_id=str(invoice_id))
        return PaymentState(paid=row["paid"], paid_date=row["paid_date"])

    async def persist_invoice_update(
        self,
        db: AsyncSession,
        invoice_id: int,
        amt: Decimal,
        paid: bool,
        paid_date: Optional[date],
    ) -> InvoiceOut:
        """
        Write amt/paid/paid_date verbatim and return the updated row.

        Raises:
            NotFoundError: no invoice has this id
        """
        with translate_db_errors("update invoice", invoice_id=invoice_id):
            result = await db.execute(
                update(Invoice)
                .where(Invoice.id == invoice_id)
                .values(amt=amt, paid=paid, paid_date=paid_date)
                .returning(*_INVOICE_COLUMNS)
            )
            row = result.mappings().one_or_none()

        if row is None:
            raise NotFoundError(resource="invoice", resource_id=str(invoice_id))
        return InvoiceOut(**row)

    # ──────────────────────────────────────────────────────────────────────

    async def update_invoice(
        self, db: AsyncSession, invoice_id: int, payload: InvoiceUpdate
    ) -> InvoiceOut:
        """
        Update amount and paid flag, deriving paid_date from the stored state.

        Raises:
            NotFoundError: no invoice has this id
        """
        current = await self.fetch_payment_state(db, invoice_id)
        resolved = resolve_payment_update(current, payload, clock=self._clock)

        invoice = await self.persist_invoice_update(
            db,
            invoice_id,
            amt=resolved.amt,
            paid=resolved.paid,
            paid_date=resolved.paid_date,
        )

        if current.paid_date != resolved.paid_date:
            logger.info(
                "Invoice %s payment state: paid_date %s -> %s",
                invoice_id,
                current.paid_date,
                resolved.paid_date,
            )
        return invoice

    async def delete_invoice(self, db: AsyncSession, invoice_id: int) -> None:
        """
        Raises:
            NotFoundError: no invoice has this id
        """
        with translate_db_errors("delete invoice", invoice_id=invoice_id):
            result = await db.execute(
                delete(Invoice).where(Invoice.id == invoice_id).returning(Invoice.id)
            )
            deleted = result.scalar_one_or_none()

        if deleted is None:
            raise NotFoundError(resource="invoice", resource_id=str(invoice_id))

        logger.info("Invoice deleted: %s", invoice_id)


invoice_service = InvoiceService()
