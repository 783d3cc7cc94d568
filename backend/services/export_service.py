"""
Spreadsheet export of invoices.

Builds an .xlsx workbook with two sheets:
- "Invoice Headers": one row per invoice
- "Invoice Lines": one row per line item, keyed by invoice number

Invoices passed in are expected to be reconciled already, so the header
amount column always equals the sum of that invoice's line rows.
"""

from datetime import date
from io import BytesIO
from typing import Any, Dict, List, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

HEADER_SHEET_TITLE = "Invoice Headers"
LINES_SHEET_TITLE = "Invoice Lines"

# (column title, invoice_header key)
HEADER_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Invoice Number", "invoice_num"),
    ("Invoice Date", "invoice_date"),
    ("Vendor Name", "vendor_name"),
    ("Vendor Site Code", "vendor_site_code"),
    ("Organization Code", "organization_code"),
    ("Invoice Amount", "invoice_amount"),
    ("Currency", "currency_code"),
    ("Payment Term", "payment_term"),
    ("Invoice Type", "invoice_type"),
)

# (column title, invoice_lines[] key); the invoice number is prepended
LINE_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Line Number", "line_number"),
    ("Line Type", "line_type"),
    ("Description", "description"),
    ("Quantity", "quantity"),
    ("Unit Price", "unit_price"),
    ("Line Amount", "line_amount"),
)


def _write_sheet(ws: Worksheet, headers: Sequence[str], rows: List[List[Any]]) -> None:
    """Write a bold header row, the data rows, and size the columns."""
    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row_idx, row_data in enumerate(rows, 2):
        for col_idx, value in enumerate(row_data, 1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    for column in ws.columns:
        column_letter = column[0].column_letter
        max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)


def header_rows(invoices: List[Dict[str, Any]]) -> List[List[Any]]:
    rows = []
    for invoice in invoices:
        header = invoice.get("invoice_header") or {}
        rows.append([header.get(key) for _, key in HEADER_COLUMNS])
    return rows


def line_rows(invoices: List[Dict[str, Any]]) -> List[List[Any]]:
    rows = []
    for invoice in invoices:
        invoice_num = (invoice.get("invoice_header") or {}).get("invoice_num")
        for line in invoice.get("invoice_lines") or []:
            rows.append([invoice_num] + [line.get(key) for _, key in LINE_COLUMNS])
    return rows


def build_invoice_workbook(invoices: List[Dict[str, Any]]) -> BytesIO:
    """
    Build the two-sheet export workbook.

    Args:
        invoices: Reconciled invoices to export

    Returns:
        BytesIO positioned at 0 containing the .xlsx bytes
    """
    wb = Workbook()

    headers_ws = wb.active
    headers_ws.title = HEADER_SHEET_TITLE
    _write_sheet(headers_ws, [title for title, _ in HEADER_COLUMNS], header_rows(invoices))

    lines_ws = wb.create_sheet(LINES_SHEET_TITLE)
    _write_sheet(
        lines_ws,
        ["Invoice Number"] + [title for title, _ in LINE_COLUMNS],
        line_rows(invoices),
    )

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def export_filename(today: date | None = None) -> str:
    """Attachment filename, e.g. invoices_export_2023-01-31.xlsx."""
    today = today or date.today()
    return f"invoices_export_{today.isoformat()}.xlsx"
