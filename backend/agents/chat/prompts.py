"""
Invoice chat prompt templates.

The chat runner sends ONE user turn to Gemini, on top of a fixed two-turn
preamble. That turn concatenates:
1. System context: dataset statistics, vendor list and the invoice shape
2. Invoice context: summaries of at most MAX_CONTEXT_INVOICES matches
3. The user's question, quoted, plus answering instructions
"""

from typing import Any, Dict, List, Sequence

MAX_CONTEXT_INVOICES = 5

CHAT_APOLOGY = (
    "Sorry, I encountered an error processing your question. "
    "Please try again or rephrase your question."
)

# Fixed conversation preamble (role, text)
CHAT_PREAMBLE = (
    ("user", "You are an AI assistant for invoice data. Be concise and helpful."),
    (
        "model",
        "I understand that I am an AI assistant specializing in invoice data. "
        "I will be concise and helpful in my responses.",
    ),
)

INVOICE_SHAPE_DESCRIPTION = """The invoice data structure includes:
- Invoice header: Contains invoice number, date, vendor name, invoice amount, currency, payment terms, and invoice type.
- Invoice lines: Contains line items with details like description, quantity, unit price, and line amount."""

FALLBACK_SYSTEM_CONTEXT = """You are an AI assistant specializing in invoice data analysis.
You can help users find invoices, analyze invoice data, and answer questions about specific invoices.
When a user asks for invoice data, try to determine what they're looking for and provide concise, accurate information."""


def build_system_context(
    total_invoices: int,
    total_amount: float,
    vendors: Sequence[str],
) -> str:
    """
    Describe the available data to the model.

    Args:
        total_invoices: Number of invoices in the store
        total_amount: Sum of all (reconciled) invoice amounts
        vendors: Distinct vendor names
    """
    return f"""You are an AI assistant specializing in invoice data analysis.
You have access to the following invoice data:

Total invoices in the system: {total_invoices}
Total invoice amount across all invoices: {total_amount}
Available vendors: {', '.join(vendors)}

{INVOICE_SHAPE_DESCRIPTION}

You can help users find invoices, analyze invoice data, and answer questions about specific invoices.

When a user asks for invoice data, try to determine what they're looking for and provide concise, accurate information.
If you're not sure about something, acknowledge what you don't know and suggest an alternative."""


def format_invoice_summary(index: int, invoice: Dict[str, Any]) -> str:
    header = invoice.get("invoice_header") or {}
    lines = invoice.get("invoice_lines") or []

    summary = [
        f"Invoice {index}:",
        f"- Invoice Number: {header.get('invoice_num')}",
        f"- Date: {header.get('invoice_date')}",
        f"- Vendor: {header.get('vendor_name')}",
        f"- Amount: {header.get('invoice_amount')} {header.get('currency_code')}",
        f"- Type: {header.get('invoice_type')}",
    ]
    if lines:
        summary.append(f"- Line Items: {len(lines)}")

    return "\n".join(summary)


def build_invoice_context(invoices: List[Dict[str, Any]]) -> str:
    """
    Summarise the matched invoices for the model.

    Only the first MAX_CONTEXT_INVOICES are described; the remainder is
    reported as a count.
    """
    if not invoices:
        return "I could not find any invoices matching the user query."

    parts = [f"Based on the user's query, I found {len(invoices)} relevant invoices:"]

    for index, invoice in enumerate(invoices[:MAX_CONTEXT_INVOICES], 1):
        parts.append(format_invoice_summary(index, invoice))

    hidden = len(invoices) - MAX_CONTEXT_INVOICES
    if hidden > 0:
        parts.append(f"Note: There are {hidden} more matching invoices not shown here.")

    return "\n\n".join(parts)


def build_chat_prompt(system_context: str, invoice_context: str, user_message: str) -> str:
    """Combine context, matches and the question into the outbound prompt."""
    return f"""{system_context}

{invoice_context}

User query: "{user_message}"

Answer the user's query based on the invoice data provided. Be concise and accurate.
If you don't have enough information, acknowledge that and suggest what additional information might help."""
