#!/usr/bin/env python3
"""
Bulk Invoice Import Script

Loads invoices from a JSON file into the invoices table. The file holds a
list of documents, each with an "invoice_header" and "invoice_lines":

    [
        {
            "invoice_header": {"invoice_num": "INV-2023-001", ...},
            "invoice_lines": [{"line_number": 1, ...}]
        }
    ]

Every document is validated with the API schemas and stored with
source="imported" and a header amount computed from its lines. Invoices
whose number already exists are skipped.

Usage:
    python scripts/import_invoices.py data/invoices.json
    python scripts/import_invoices.py data/invoices.json --dry-run
    python scripts/import_invoices.py data/invoices.json --user-id <google-sub>
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv()

from backend.db.client import get_supabase_client
from backend.schemas.invoices import InvoiceCreateRequest
from backend.services.invoice_service import InvoiceAlreadyExistsError, create_invoice
from backend.utils.constants import INVOICE_SOURCES


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def load_documents(path: str) -> List[Dict[str, Any]]:
    """Read the import file; a single object is treated as a one-item list."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        return [data]
    return data


async def import_invoices(
    documents: List[Dict[str, Any]],
    user_id: Optional[str] = None,
    dry_run: bool = False,
) -> Dict[str, int]:
    """
    Validate and insert documents one by one.

    Returns:
        Counts of imported, skipped (duplicate) and invalid documents
    """
    counts = {"imported": 0, "skipped": 0, "invalid": 0}
    supabase_client = None if dry_run else get_supabase_client()

    for index, document in enumerate(documents, 1):
        try:
            request = InvoiceCreateRequest.model_validate(document)
        except ValidationError as e:
            logger.warning(f"Document {index} is invalid: {e.error_count()} errors")
            counts["invalid"] += 1
            continue

        invoice_num = request.invoice_header.invoice_num

        if dry_run:
            logger.info(f"[dry-run] Would import invoice {invoice_num}")
            counts["imported"] += 1
            continue

        try:
            await create_invoice(
                supabase_client=supabase_client,
                invoice_header=request.invoice_header.model_dump(),
                invoice_lines=[line.model_dump() for line in request.invoice_lines],
                user_id=user_id,
                source=INVOICE_SOURCES["IMPORTED"],
                message_id=request.message_id,
            )
        except InvoiceAlreadyExistsError:
            logger.info(f"Invoice {invoice_num} already exists, skipping")
            counts["skipped"] += 1
            continue

        counts["imported"] += 1

    return counts


def main() -> int:
    parser = argparse.ArgumentParser(description="Import invoices from a JSON file")
    parser.add_argument("path", help="JSON file with a list of invoice documents")
    parser.add_argument("--user-id", default=None, help="Owner (Google subject id) for all imported invoices")
    parser.add_argument("--dry-run", action="store_true", help="Validate only, do not write")
    args = parser.parse_args()

    documents = load_documents(args.path)
    logger.info(f"Loaded {len(documents)} documents from {args.path}")

    counts = asyncio.run(import_invoices(documents, user_id=args.user_id, dry_run=args.dry_run))

    print()
    print("=" * 60)
    print(f"Imported: {counts['imported']}")
    print(f"Skipped (duplicates): {counts['skipped']}")
    print(f"Invalid: {counts['invalid']}")
    print("=" * 60)

    return 1 if counts["invalid"] else 0


if __name__ == "__main__":
    sys.exit(main())
