"""
Tests for the bulk invoice import script.
"""

import importlib.util
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from backend.services.invoice_service import InvoiceAlreadyExistsError

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "import_invoices.py"


@pytest.fixture(scope="module")
def import_script():
    spec = importlib.util.spec_from_file_location("import_invoices", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _document(invoice_factory, invoice_num):
    row = invoice_factory(invoice_num=invoice_num)
    return {"invoice_header": row["invoice_header"], "invoice_lines": row["invoice_lines"]}


class TestImportInvoices:

    @pytest.mark.asyncio
    async def test_imports_with_imported_source(self, import_script, invoice_factory):
        documents = [_document(invoice_factory, "INV-1"), _document(invoice_factory, "INV-2")]

        with patch.object(import_script, "get_supabase_client", return_value=MagicMock()), \
             patch.object(import_script, "create_invoice", new=AsyncMock()) as mock_create:
            counts = await import_script.import_invoices(documents, user_id="google-sub-1")

        assert counts == {"imported": 2, "skipped": 0, "invalid": 0}
        kwargs = mock_create.await_args.kwargs
        assert kwargs["source"] == "imported"
        assert kwargs["user_id"] == "google-sub-1"

    @pytest.mark.asyncio
    async def test_duplicates_and_invalid_documents_are_counted(self, import_script, invoice_factory):
        documents = [
            _document(invoice_factory, "INV-1"),
            {"invoice_header": {"invoice_num": "broken"}},
        ]

        with patch.object(import_script, "get_supabase_client", return_value=MagicMock()), \
             patch.object(
                 import_script,
                 "create_invoice",
                 new=AsyncMock(side_effect=InvoiceAlreadyExistsError("INV-1")),
             ):
            counts = await import_script.import_invoices(documents)

        assert counts == {"imported": 0, "skipped": 1, "invalid": 1}

    @pytest.mark.asyncio
    async def test_dry_run_writes_nothing(self, import_script, invoice_factory):
        with patch.object(import_script, "get_supabase_client") as mock_client, \
             patch.object(import_script, "create_invoice", new=AsyncMock()) as mock_create:
            counts = await import_script.import_invoices(
                [_document(invoice_factory, "INV-1")], dry_run=True
            )

        assert counts["imported"] == 1
        mock_client.assert_not_called()
        mock_create.assert_not_awaited()


def test_load_documents_accepts_single_object(import_script, tmp_path, invoice_factory):
    path = tmp_path / "one.json"
    path.write_text(json.dumps(_document(invoice_factory, "INV-1")), encoding="utf-8")

    documents = import_script.load_documents(str(path))

    assert len(documents) == 1
    assert documents[0]["invoice_header"]["invoice_num"] == "INV-1"
