"""
BizTime Backend — Company Route Handlers
==========================================

    GET    /companies          → {companies: [{code, name}, ...]}
    GET    /companies/{code}   → {company: {code, name, description, invoices: [id, ...]}}
    POST   /companies          → 201 {company: {code, name, description}}
    PUT    /companies/{code}   → {company: {code, name, description}}
    DELETE /companies/{code}   → {status: "deleted"}
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import get_db_session
from biztime.schemas.common import ErrorResponse, StatusResponse
from biztime.schemas.company import (
    CompanyCreate,
    CompanyDetailResponse,
    CompanyListResponse,
    CompanyResponse,
    CompanyUpdate,
)
from biztime.services.company_service import company_service

router = APIRouter(prefix="/companies", tags=["Companies"])

_NOT_FOUND = {404: {"description": "Company not found", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Missing or invalid body", "model": ErrorResponse}}


@router.get("", response_model=CompanyListResponse, summary="List companies")
async def list_companies(
    db: AsyncSession = Depends(get_db_session),
) -> CompanyListResponse:
    """All companies, ordered by name."""
    companies = await company_service.list_companies(db)
    return CompanyListResponse(companies=companies)


@router.get(
    "/{code}",
    response_model=CompanyDetailResponse,
    responses=_NOT_FOUND,
    summary="Get a company and its invoice ids",
)
async def get_company(
    code: str,
    db: AsyncSession = Depends(get_db_session),
) -> CompanyDetailResponse:
    company = await company_service.get_company(db, code)
    return CompanyDetailResponse(company=company)


@router.post(
    "",
    status_code=201,
    response_model=CompanyResponse,
    responses={
        **_BAD_REQUEST,
        409: {"description": "Code or name already taken", "model": ErrorResponse},
    },
    summary="Create a company",
)
async def create_company(
    payload: CompanyCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CompanyResponse:
    """
    Create a company. When `code` is omitted it is the lower-cased slug of
    `name`, e.g. {"name": "Big Blue"} → code "big-blue".
    """
    company = await company_service.create_company(db, payload)
    return CompanyResponse(company=company)


@router.put(
    "/{code}",
    response_model=CompanyResponse,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
    summary="Update a company's name and description",
)
async def update_company(
    code: str,
    payload: CompanyUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> CompanyResponse:
    company = await company_service.update_company(db, code, payload)
    return CompanyResponse(company=company)


@router.delete(
    "/{code}",
    response_model=StatusResponse,
    responses=_NOT_FOUND,
    summary="Delete a company",
)
async def delete_company(
    code: str,
    db: AsyncSession = Depends(get_db_session),
) -> StatusResponse:
    await company_service.delete_company(db, code)
    return StatusResponse(status="deleted")
