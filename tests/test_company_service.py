"""
BizTime Backend — Company Service Unit Tests
==============================================

What:  CompanyService against a mocked AsyncSession.

What we test:
    ✅ Code derivation: explicit code wins, otherwise slug of the name
    ✅ Duplicate inserts surface as ConflictError
    ✅ Missing companies raise NotFoundError on get/update/delete
    ✅ Company detail lists invoice ids
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from biztime.exceptions import BadRequestError, ConflictError, NotFoundError
from biztime.schemas.company import CompanyCreate, CompanyUpdate
from biztime.services.company_service import CompanyService, company_code_for


class TestCompanyCode:
    """Tests for company_code_for()."""

    def test_slug_from_name(self):
        assert company_code_for(CompanyCreate(name="Big Blue Corp")) == "big-blue-corp"

    def test_slug_strips_punctuation(self):
        assert company_code_for(CompanyCreate(name="Acme, Inc.")) == "acme-inc"

    def test_explicit_code_wins(self):
        payload = CompanyCreate(name="International Business Machines", code="ibm")
        assert company_code_for(payload) == "ibm"

    def test_unsluggable_name_rejected(self):
        with pytest.raises(BadRequestError):
            company_code_for(CompanyCreate(name="!!!"))

    def test_blank_name_rejected_by_schema(self):
        with pytest.raises(ValueError):
            CompanyCreate(name="   ")

    def test_update_name_trimmed_like_create(self):
        assert CompanyUpdate(name=" Apple ").name == "Apple"
        with pytest.raises(ValueError):
            CompanyUpdate(name="   ")


class TestCompanyServiceCreate:

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_create_company(self, mock_db_session):
        result = await self.service.create_company(
            mock_db_session, CompanyCreate(name="Big Blue", description="IBM again")
        )

        assert result.code == "big-blue"
        assert result.name == "Big Blue"
        assert result.description == "IBM again"
        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_company_raises_conflict(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        )

        with pytest.raises(ConflictError, match="already exists"):
            await self.service.create_company(mock_db_session, CompanyCreate(name="Apple"))


class TestCompanyServiceRead:

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_get_company_with_invoice_ids(self, mock_db_session):
        company_result = MagicMock()
        company_result.mappings.return_value.one_or_none.return_value = {
            "code": "apple", "name": "Apple", "description": "Maker of OSX.",
        }
        invoices_result = MagicMock()
        invoices_result.scalars.return_value.all.return_value = [1, 2]
        mock_db_session.execute = AsyncMock(side_effect=[company_result, invoices_result])

        result = await self.service.get_company(mock_db_session, "apple")

        assert result.code == "apple"
        assert result.invoices == [1, 2]

    @pytest.mark.asyncio
    async def test_get_missing_company(self, mock_db_session):
        result = MagicMock()
        result.mappings.return_value.one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=result)

        with pytest.raises(NotFoundError, match="No such company: nope"):
            await self.service.get_company(mock_db_session, "nope")

        # No invoice lookup for a company that does not exist
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_list_companies(self, mock_db_session):
        result = MagicMock()
        result.mappings.return_value.all.return_value = [
            {"code": "apple", "name": "Apple"},
            {"code": "ibm", "name": "IBM"},
        ]
        mock_db_session.execute = AsyncMock(return_value=result)

        companies = await self.service.list_companies(mock_db_session)

        assert [c.code for c in companies] == ["apple", "ibm"]


class TestCompanyServiceWrite:

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_update_missing_company(self, mock_db_session):
        result = MagicMock()
        result.mappings.return_value.one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=result)

        with pytest.raises(NotFoundError):
            await self.service.update_company(
                mock_db_session, "nope", CompanyUpdate(name="Nope")
            )

    @pytest.mark.asyncio
    async def test_delete_missing_company(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=result)

        with pytest.raises(NotFoundError):
            await self.service.delete_company(mock_db_session, "nope")
