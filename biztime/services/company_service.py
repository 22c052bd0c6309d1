"""
BizTime Backend — Company Service
===================================

What:  Reads and writes of the `companies` table.
How:   One statement per operation (two for detail: the company, then its
       invoice ids). Missing rows become NotFoundError; storage failures are
       translated by translate_db_errors().
Who:   Called by the /companies route handlers.

The service is stateless; the request's AsyncSession is passed to every
method and committed by the get_db_session dependency.
"""

import logging
from typing import List

from slugify import slugify
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.exceptions import BadRequestError, NotFoundError
from biztime.models.company import Company
from biztime.models.invoice import Invoice
from biztime.schemas.company import (
    CompanyCreate,
    CompanyDetail,
    CompanyOut,
    CompanySummary,
    CompanyUpdate,
)
from biztime.services.db_errors import translate_db_errors

logger = logging.getLogger(__name__)


def company_code_for(payload: CompanyCreate) -> str:
    """
    Code for a new company: the supplied code, else the lower-cased slug of
    the name. Raises BadRequestError when neither yields a usable slug.
    """
    code = slugify(payload.code or payload.name, lowercase=True)
    if not code:
        raise BadRequestError(
            message="Cannot derive a company code from the given name",
            field="code" if payload.code else "name",
        )
    return code


class CompanyService:
    """CRUD operations for companies."""

    async def list_companies(self, db: AsyncSession) -> List[CompanySummary]:
        """All companies as {code, name}, ordered by name."""
        with translate_db_errors("list companies"):
            result = await db.execute(
                select(Company.code, Company.name).order_by(Company.name)
            )
            rows = result.mappings().all()
        return [CompanySummary(**row) for row in rows]

    async def get_company(self, db: AsyncSession, code: str) -> CompanyDetail:
        """
        A company with the ids of its invoices.

        Raises:
            NotFoundError: no company has this code
        """
        with translate_db_errors("get company", code=code):
            result = await db.execute(
                select(Company.code, Company.name, Company.description)
                .where(Company.code == code)
            )
            company = result.mappings().one_or_none()
            if company is None:
                raise NotFoundError(resource="company", resource_id=code)

            inv_result = await db.execute(
                select(Invoice.id)
                .where(Invoice.comp_code == code)
                .order_by(Invoice.id)
            )
            invoice_ids = list(inv_result.scalars().all())

        return CompanyDetail(**company, invoices=invoice_ids)

    async def create_company(self, db: AsyncSession, payload: CompanyCreate) -> CompanyOut:
        """
        Insert a company.

        Raises:
            BadRequestError: no usable code could be derived
            ConflictError:   the code or name is already taken
        """
        code = company_code_for(payload)
        company = Company(code=code, name=payload.name, description=payload.description)

        with translate_db_errors(
            "create company",
            conflict_message=f"A company with code '{code}' or name '{payload.name}' already exists",
            code=code,
        ):
            db.add(company)
            await db.flush()

        logger.info("Company created: %s", code)
        return CompanyOut.model_validate(company)

    async def update_company(
        self, db: AsyncSession, code: str, payload: CompanyUpdate
    ) -> CompanyOut:
        """
        Replace name and description of an existing company.

        Raises:
            NotFoundError: no company has this code
            ConflictError: the new name belongs to another company
        """
        with translate_db_errors(
            "update company",
            conflict_message=f"A company named '{payload.name}' already exists",
            code=code,
        ):
            result = await db.execute(
                update(Company)
                .where(Company.code == code)
                .values(name=payload.name, description=payload.description)
                .returning(Company.code, Company.name, Company.description)
            )
            row = result.mappings().one_or_none()

        if row is None:
            raise NotFoundError(resource="company", resource_id=code)

        logger.info("Company updated: %s", code)
        return CompanyOut(**row)

    async def delete_company(self, db: AsyncSession, code: str) -> None:
        """
        Delete a company. Its invoices are removed by the database
        (ON DELETE CASCADE), not here.

        Raises:
            NotFoundError: no company has this code
        """
        with translate_db_errors("delete company", code=code):
            result = await db.execute(
                delete(Company).where(Company.code == code).returning(Company.code)
            )
            deleted = result.scalar_one_or_none()

        if deleted is None:
            raise NotFoundError(resource="company", resource_id=code)

        logger.info("Company deleted: %s", code)


company_service = CompanyService()
