"""
Tests for lazy invoice amount reconciliation.

After reconciliation every invoice satisfies:
    invoice_header.invoice_amount == sum(line.line_amount)
"""

import pytest

from backend.services.filters import INVOICE_NUM_PATH
from backend.services.reconciliation import (
    compute_invoice_total,
    needs_reconciliation,
    reconcile_invoice,
    reconcile_invoices,
)


class TestComputeInvoiceTotal:

    def test_sums_line_amounts(self):
        lines = [{"line_amount": 60.0}, {"line_amount": 40.0}]

        assert compute_invoice_total(lines) == 100.0

    def test_missing_amounts_count_as_zero(self):
        lines = [{"line_amount": 10.0}, {"line_amount": None}, {}]

        assert compute_invoice_total(lines) == 10.0

    def test_no_lines_is_zero(self):
        assert compute_invoice_total([]) == 0.0
        assert compute_invoice_total(None) == 0.0


class TestReconcileInvoice:

    @pytest.mark.asyncio
    async def test_consistent_invoice_is_not_written(self, supabase_mock, invoice_factory):
        client, query = supabase_mock()
        invoice = invoice_factory(line_amounts=(60.0, 40.0))

        result = await reconcile_invoice(client, invoice)

        assert result["invoice_header"]["invoice_amount"] == 100.0
        query.update.assert_not_called()
        assert not needs_reconciliation(result)

    @pytest.mark.asyncio
    async def test_stale_amount_is_corrected_and_persisted(
        self, supabase_mock, invoice_factory, response_factory
    ):
        client, query = supabase_mock(response_factory())
        invoice = invoice_factory(invoice_num="INV-9", line_amounts=(60.0, 40.0), invoice_amount=90.0)

        result = await reconcile_invoice(client, invoice)

        assert result is invoice
        assert invoice["invoice_header"]["invoice_amount"] == 100.0

        update_payload = query.update.call_args[0][0]
        assert update_payload["invoice_header"]["invoice_amount"] == 100.0
        assert update_payload["invoice_header"]["vendor_name"] == "BuildSmart"
        query.eq.assert_called_with(INVOICE_NUM_PATH, "INV-9")

    @pytest.mark.asyncio
    async def test_invoice_without_lines_reconciles_to_zero(
        self, supabase_mock, invoice_factory, response_factory
    ):
        client, query = supabase_mock(response_factory())
        invoice = invoice_factory(line_amounts=(), invoice_amount=250.0)

        await reconcile_invoice(client, invoice)

        assert invoice["invoice_header"]["invoice_amount"] == 0.0
        query.update.assert_called_once()


class TestReconcileInvoices:

    @pytest.mark.asyncio
    async def test_only_stale_invoices_are_written(
        self, supabase_mock, invoice_factory, response_factory
    ):
        client, query = supabase_mock(response_factory())
        invoices = [
            invoice_factory(invoice_num="INV-1", line_amounts=(10.0,)),
            invoice_factory(invoice_num="INV-2", line_amounts=(5.0, 5.0), invoice_amount=0.0),
            invoice_factory(invoice_num="INV-3", line_amounts=(1.5,)),
        ]

        result = await reconcile_invoices(client, invoices)

        assert result is invoices
        assert query.update.call_count == 1
        for invoice in invoices:
            assert invoice["invoice_header"]["invoice_amount"] == compute_invoice_total(
                invoice["invoice_lines"]
            )
