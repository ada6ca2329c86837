"""Document numbering tests."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from invoicedesk.services.documents import InvoiceGateway, QuotationGateway
from invoicedesk.utils.numbering import generate_document_number, next_number, parse_leading_int

from conftest import invoice_data, quotation_data


@pytest.mark.unit
class TestNextNumber:

    def test_skips_non_numeric(self):
        assert next_number(["0004", "0006", "abc"]) == "0007"

    def test_empty(self):
        assert next_number([]) == "0001"

    def test_only_non_numeric(self):
        assert next_number(["draft", "", None]) == "0001"

    def test_grows_past_width(self):
        assert next_number(["9999"]) == "10000"

    def test_custom_width(self):
        assert next_number(["7"], width=6) == "000008"

    def test_negative_numbers_do_not_go_below_one(self):
        assert next_number(["-5"]) == "0001"

    @pytest.mark.parametrize("value, expected", [
        ("0012", 12),
        ("12abc", 12),
        ("  42", 42),
        ("INV-7", 0),
        ("", 0),
        (None, 0),
    ])
    def test_parse_leading_int(self, value, expected):
        assert parse_leading_int(value) == expected


class UnavailableSession:
    """Session stand-in whose queries fail like a dropped connection."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT invoice_number FROM invoices", {}, ConnectionError("connection refused"))


@pytest.mark.integration
@pytest.mark.asyncio
class TestGenerateDocumentNumber:

    async def test_first_invoice(self, db_session):
        assert await generate_document_number(db_session, "invoice") == "0001"

    async def test_follows_existing(self, db_session):
        gateway = InvoiceGateway(db_session)
        for number in ("0004", "0006", "abc"):
            await gateway.create(invoice_data(invoice_number=number))
        assert await generate_document_number(db_session, "invoice") == "0007"

    async def test_kinds_are_independent(self, db_session):
        await QuotationGateway(db_session).create(quotation_data(quotation_number="0030"))
        assert await generate_document_number(db_session, "quotation") == "0031"
        assert await generate_document_number(db_session, "invoice") == "0001"

    async def test_duplicate_number_rejected_at_write(self, db_session):
        gateway = InvoiceGateway(db_session)
        await gateway.create(invoice_data(invoice_number="0001"))
        with pytest.raises(IntegrityError):
            await gateway.create(invoice_data(invoice_number="0001"))

    async def test_load_failure_propagates(self):
        """A failed lookup raises instead of handing out "0001"."""
        with pytest.raises(OperationalError):
            await generate_document_number(UnavailableSession(), "invoice")
