"""
BizTime Backend — Company Endpoint Tests
==========================================

What:  /companies endpoints end to end against the seeded SQLite database.
"""

import pytest


class TestListAndGet:

    @pytest.mark.asyncio
    async def test_list_companies_ordered_by_name(self, test_client):
        response = await test_client.get("/companies")

        assert response.status_code == 200
        assert response.json() == {
            "companies": [
                {"code": "apple", "name": "Apple"},
                {"code": "ibm", "name": "IBM"},
            ]
        }

    @pytest.mark.asyncio
    async def test_get_company_with_invoice_ids(self, test_client):
        response = await test_client.get("/companies/apple")

        assert response.status_code == 200
        assert response.json() == {
            "company": {
                "code": "apple",
                "name": "Apple",
                "description": "Maker of OSX.",
                "invoices": [1, 2],
            }
        }

    @pytest.mark.asyncio
    async def test_get_missing_company(self, test_client):
        response = await test_client.get("/companies/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_company_slugs_name(self, test_client):
        response = await test_client.post(
            "/companies", json={"name": "Big Blue Corp", "description": "Blue."}
        )

        assert response.status_code == 201
        assert response.json() == {
            "company": {
                "code": "big-blue-corp",
                "name": "Big Blue Corp",
                "description": "Blue.",
            }
        }

        response = await test_client.get("/companies/big-blue-corp")
        assert response.status_code == 200
        assert response.json()["company"]["invoices"] == []

    @pytest.mark.asyncio
    async def test_create_company_with_explicit_code(self, test_client):
        response = await test_client.post(
            "/companies", json={"code": "msft", "name": "Microsoft"}
        )

        assert response.status_code == 201
        assert response.json()["company"]["code"] == "msft"

    @pytest.mark.asyncio
    async def test_create_duplicate_company(self, test_client):
        response = await test_client.post("/companies", json={"name": "Apple"})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_create_without_body(self, test_client):
        response = await test_client.post("/companies")

        assert response.status_code == 400


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_company(self, test_client):
        response = await test_client.put(
            "/companies/ibm", json={"name": "IBM Corp", "description": "Still blue."}
        )

        assert response.status_code == 200
        assert response.json() == {
            "company": {"code": "ibm", "name": "IBM Corp", "description": "Still blue."}
        }

    @pytest.mark.asyncio
    async def test_update_missing_company(self, test_client):
        response = await test_client.put("/companies/nope", json={"name": "Nope"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_without_body(self, test_client):
        response = await test_client.put("/companies/ibm")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_blank_name_rejected(self, test_client):
        response = await test_client.put(
            "/companies/ibm", json={"name": "   ", "description": "x"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"

        response = await test_client.get("/companies/ibm")
        assert response.json()["company"]["name"] == "IBM"

    @pytest.mark.asyncio
    async def test_update_trims_name(self, test_client):
        response = await test_client.put("/companies/ibm", json={"name": "  Big Blue "})

        assert response.status_code == 200
        assert response.json()["company"]["name"] == "Big Blue"

    @pytest.mark.asyncio
    async def test_update_padded_name_collides_with_existing(self, test_client):
        response = await test_client.put("/companies/ibm", json={"name": " Apple "})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_company(self, test_client):
        response = await test_client.delete("/companies/ibm")

        assert response.status_code == 200
        assert response.json() == {"status": "deleted"}

        response = await test_client.get("/companies/ibm")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_company(self, test_client):
        response = await test_client.delete("/companies/nope")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_company_removes_its_invoices(self, test_client):
        response = await test_client.delete("/companies/apple")
        assert response.status_code == 200

        response = await test_client.get("/invoices")
        assert response.json() == {"invoices": [{"id": 3, "comp_code": "ibm"}]}

        response = await test_client.get("/invoices/1")
        assert response.status_code == 404
