"""
BizTime Backend — Company Request/Response Schemas
====================================================

What:  Pydantic models for the /companies API contract.

Envelopes:
    Every response wraps its payload in a single key, {"company": {...}} or
    {"companies": [...]}, so clients can tell resources apart without
    inspecting fields.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class _CompanyNameMixin(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Display name")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Trims surrounding whitespace so "Apple " and "Apple" collide on UNIQUE(name)."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped


class CompanyCreate(_CompanyNameMixin):
    """
    Body of POST /companies.

    `code` is optional; when omitted the service derives it from `name`
    (lower-cased slug, e.g. "Big Blue" → "big-blue").
    """
    description: Optional[str] = Field(default=None, description="Free-text description")
    code: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Slug identifier; derived from name when omitted",
    )


class CompanyUpdate(_CompanyNameMixin):
    """Body of PUT /companies/{code}."""
    description: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CompanySummary(BaseModel):
    code: str
    name: str

    model_config = {"from_attributes": True}


class CompanyOut(BaseModel):
    code: str
    name: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class CompanyDetail(CompanyOut):
    """Company with the ids of its invoices, ordered by id."""
    invoices: List[int] = Field(default_factory=list)


class CompanyListResponse(BaseModel):
    companies: List[CompanySummary]


class CompanyResponse(BaseModel):
    company: CompanyOut


class CompanyDetailResponse(BaseModel):
    company: CompanyDetail
