"""HTTP API tests: auth, envelopes, CRUD and conversion over the wire."""

import pytest
from sqlalchemy.exc import OperationalError

from invoicedesk.routers import invoices as invoices_router

from conftest import make_token

INVOICE_BODY = {
    "invoiceNumber": "0001",
    "date": "2026-03-02",
    "clientName": "Acme Traders",
    "clientContact": "0300 1234567",
    "clientAddress": "12 Mall Road, Lahore",
    "items": [
        {"description": "Structure fabrication", "quantity": 2, "rate": 500},
        {"description": "Wiring", "quantity": 1, "rate": 250.5},
    ],
    "advance": 300,
    "paymentTerms": "50% upfront",
}

QUOTATION_BODY = {
    "quotationNumber": "0012",
    "date": "2026-03-02",
    "clientName": "Beta Foods",
    "items": [{"description": "Solar panels install", "quantity": 2, "rate": 500}],
    "quotationTerms": "Valid for 30 days",
}


@pytest.mark.api
@pytest.mark.asyncio
class TestAuth:

    async def test_missing_token(self, client):
        response = await client.get("/api/invoices/")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_wrong_signature(self, client):
        token = make_token(secret="not-the-secret")
        response = await client.get(
            "/api/invoices/", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    async def test_wrong_audience(self, client):
        token = make_token(aud="someone-else")
        response = await client.get(
            "/api/invoices/", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    async def test_health_is_public(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_readiness(self, client):
        response = await client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "ok"


@pytest.mark.api
@pytest.mark.asyncio
class TestInvoiceEndpoints:

    async def test_create_and_get(self, client, auth_headers):
        response = await client.post("/api/invoices/", json=INVOICE_BODY, headers=auth_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["invoiceNumber"] == "0001"
        assert body["total"] == 1250.5
        assert body["remainingBalance"] == 950.5
        assert body["items"][0]["amount"] == 1000

        fetched = await client.get(f"/api/invoices/{body['id']}", headers=auth_headers)
        assert fetched.status_code == 200
        assert fetched.json()["clientName"] == "Acme Traders"

    async def test_missing_client_name(self, client, auth_headers):
        response = await client.post(
            "/api/invoices/", json={**INVOICE_BODY, "clientName": "  "}, headers=auth_headers
        )
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Please fill in all required fields"

    async def test_empty_items_rejected(self, client, auth_headers):
        response = await client.post(
            "/api/invoices/", json={**INVOICE_BODY, "items": []}, headers=auth_headers
        )
        assert response.status_code == 422

    async def test_advance_over_total(self, client, auth_headers):
        response = await client.post(
            "/api/invoices/", json={**INVOICE_BODY, "advance": 5000}, headers=auth_headers
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "ADVANCE_EXCEEDS_TOTAL"

    async def test_duplicate_number(self, client, auth_headers):
        await client.post("/api/invoices/", json=INVOICE_BODY, headers=auth_headers)
        response = await client.post("/api/invoices/", json=INVOICE_BODY, headers=auth_headers)
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "DUPLICATE_RECORD"

    async def test_not_found(self, client, auth_headers):
        response = await client.get("/api/invoices/missing", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    async def test_update_and_delete(self, client, auth_headers):
        created = (await client.post(
            "/api/invoices/", json=INVOICE_BODY, headers=auth_headers
        )).json()

        update = {
            **INVOICE_BODY,
            "items": [{"description": "Maintenance", "quantity": 3, "rate": 100}],
            "advance": 0,
        }
        response = await client.put(
            f"/api/invoices/{created['id']}", json=update, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["total"] == 300
        assert len(response.json()["items"]) == 1

        response = await client.delete(f"/api/invoices/{created['id']}", headers=auth_headers)
        assert response.status_code == 204
        response = await client.delete(f"/api/invoices/{created['id']}", headers=auth_headers)
        assert response.status_code == 404

    async def test_list_search_and_summary(self, client, auth_headers):
        await client.post("/api/invoices/", json=INVOICE_BODY, headers=auth_headers)
        await client.post(
            "/api/invoices/",
            json={**INVOICE_BODY, "invoiceNumber": "0002", "clientName": "Zenith"},
            headers=auth_headers,
        )

        listed = (await client.get("/api/invoices/", headers=auth_headers)).json()
        assert [i["invoiceNumber"] for i in listed] == ["0002", "0001"]

        found = (await client.get(
            "/api/invoices/", params={"search": "zenith"}, headers=auth_headers
        )).json()
        assert [i["clientName"] for i in found] == ["Zenith"]

        summary = (await client.get("/api/invoices/summary", headers=auth_headers)).json()
        assert summary["invoiceCount"] == 2
        assert summary["totalRevenue"] == 2501
        assert summary["totalPaid"] == 600

    async def test_new_invoice_when_database_unavailable(self, client, auth_headers, monkeypatch):
        async def unavailable(db, kind):
            raise OperationalError("SELECT invoice_number FROM invoices", {}, ConnectionError("connection refused"))

        monkeypatch.setattr(invoices_router, "generate_document_number", unavailable)

        response = await client.get("/api/invoices/new", headers=auth_headers)
        assert response.status_code == 503
        assert response.json()["error"]["code"] == "DATABASE_UNAVAILABLE"

    async def test_new_invoice_template(self, client, auth_headers):
        await client.post("/api/invoices/", json=INVOICE_BODY, headers=auth_headers)
        template = (await client.get("/api/invoices/new", headers=auth_headers)).json()
        assert template["invoiceNumber"] == "0002"
        assert template["clientName"] == ""
        assert len(template["items"]) == 1


@pytest.mark.api
@pytest.mark.asyncio
class TestQuotationEndpoints:

    async def _create(self, client, auth_headers) -> dict:
        response = await client.post(
            "/api/quotations/", json=QUOTATION_BODY, headers=auth_headers
        )
        assert response.status_code == 201
        return response.json()

    async def test_create(self, client, auth_headers):
        body = await self._create(client, auth_headers)
        assert body["status"] == "draft"
        assert body["total"] == 1000
        assert body["expiryDate"] == "2026-04-01"
        assert body["canEdit"] is True
        assert body["canConvert"] is True

    async def test_status_endpoints(self, client, auth_headers):
        quotation = await self._create(client, auth_headers)
        qid = quotation["id"]

        response = await client.post(f"/api/quotations/{qid}/accept", headers=auth_headers)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

        response = await client.post(f"/api/quotations/{qid}/send", headers=auth_headers)
        assert response.json()["status"] == "sent"
        response = await client.post(f"/api/quotations/{qid}/reject", headers=auth_headers)
        assert response.json()["status"] == "rejected"
        assert response.json()["canConvert"] is False

    async def test_convert(self, client, auth_headers):
        quotation = await self._create(client, auth_headers)

        response = await client.post(
            f"/api/quotations/{quotation['id']}/convert", headers=auth_headers
        )
        assert response.status_code == 201
        invoice = response.json()
        assert invoice["invoiceNumber"] == "0001"
        assert invoice["total"] == 1000
        assert invoice["advance"] == 0
        assert invoice["remainingBalance"] == 1000
        assert invoice["paymentTerms"] == "Valid for 30 days"
        assert invoice["sourceQuotationId"] == quotation["id"]

        converted = (await client.get(
            f"/api/quotations/{quotation['id']}", headers=auth_headers
        )).json()
        assert converted["status"] == "converted"
        assert converted["canEdit"] is False

        invoices = (await client.get("/api/invoices/", headers=auth_headers)).json()
        assert len(invoices) == 1

    async def test_convert_with_overrides(self, client, auth_headers):
        quotation = await self._create(client, auth_headers)
        response = await client.post(
            f"/api/quotations/{quotation['id']}/convert",
            json={"invoiceNumber": "0500", "date": "2026-04-10"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["invoiceNumber"] == "0500"
        assert response.json()["date"] == "2026-04-10"

    async def test_converted_is_read_only(self, client, auth_headers):
        quotation = await self._create(client, auth_headers)
        await client.post(f"/api/quotations/{quotation['id']}/convert", headers=auth_headers)

        response = await client.put(
            f"/api/quotations/{quotation['id']}", json=QUOTATION_BODY, headers=auth_headers
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DOCUMENT_LOCKED"

    async def test_convert_missing(self, client, auth_headers):
        response = await client.post("/api/quotations/missing/convert", headers=auth_headers)
        assert response.status_code == 404

    async def test_delete(self, client, auth_headers):
        quotation = await self._create(client, auth_headers)
        response = await client.delete(
            f"/api/quotations/{quotation['id']}", headers=auth_headers
        )
        assert response.status_code == 204
        response = await client.get(f"/api/quotations/{quotation['id']}", headers=auth_headers)
        assert response.status_code == 404

    async def test_new_quotation_template(self, client, auth_headers):
        template = (await client.get("/api/quotations/new", headers=auth_headers)).json()
        assert template["quotationNumber"] == "0001"
        assert template["status"] == "draft"


@pytest.mark.api
@pytest.mark.asyncio
class TestCompanyEndpoints:

    async def test_not_configured(self, client, auth_headers):
        response = await client.get("/api/company/", headers=auth_headers)
        assert response.status_code == 404

    async def test_save_and_get(self, client, auth_headers):
        body = {"name": "Sun Works", "address": "Lahore", "phone": "042 111"}
        response = await client.put("/api/company/", json=body, headers=auth_headers)
        assert response.status_code == 200

        fetched = (await client.get("/api/company/", headers=auth_headers)).json()
        assert fetched["name"] == "Sun Works"
        assert fetched["phone"] == "042 111"

    async def test_name_required(self, client, auth_headers):
        response = await client.put(
            "/api/company/", json={"name": "", "address": "Lahore"}, headers=auth_headers
        )
        assert response.status_code == 422
