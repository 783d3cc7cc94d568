"""
Query intent extraction for the invoice chat.

Reads a free-text question and turns it into either a direct invoice-number
lookup or an InvoiceFilter. This is a keyword heuristic, not a language
model: no negation, one vendor at most, literal month names only.

Rule precedence:
1. Invoice number ("invoice #X", "invoice X", "number X"). Exclusive: when
   it matches, every other signal in the text is ignored.
2. Vendor, month and type rules (INTENT_RULES), each contributing its own
   filter fields; their results are combined into one filter.
"""

import calendar
import re
from typing import Callable, Dict, Optional, Sequence, Tuple

from backend.agents.chat.types import IntentContext, QueryIntent
from backend.services.filters import InvoiceFilter
from backend.utils.constants import INVOICE_TYPES, MONTH_NAMES

IntentRule = Callable[[str, IntentContext], Dict[str, str]]

_TOKEN = r"([A-Za-z0-9]+(?:-[A-Za-z0-9]+)*)"

INVOICE_NUMBER_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\binvoice\s*(?:#|no\.|number)?\s*#?\s*" + _TOKEN, re.IGNORECASE),
    re.compile(r"\bnumber\s*#?\s*" + _TOKEN, re.IGNORECASE),
)

VENDOR_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\bvendor\s+(\w+)", re.IGNORECASE),
    re.compile(r"\bfrom\s+(\w+)", re.IGNORECASE),
    re.compile(r"\bby\s+(\w+)", re.IGNORECASE),
)

# "BuildSmart invoices" - case-sensitive on purpose, vendors are proper nouns
NAMED_INVOICES_PATTERN = re.compile(r"\b([A-Z][\w&.-]*)\s+invoices?\b")

MONTH_PATTERN = re.compile(r"\b(" + "|".join(MONTH_NAMES) + r")\b", re.IGNORECASE)

_TYPE_WORDS = "|".join(t.lower() for t in INVOICE_TYPES)
TYPE_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\btype\s+(" + _TYPE_WORDS + r")\b", re.IGNORECASE),
    re.compile(r"\b(" + _TYPE_WORDS + r")\s+invoices?\b", re.IGNORECASE),
)

# Words that follow "from"/"by"/"vendor" in ordinary questions but are never vendors
STOP_WORDS = frozenset({
    "a", "all", "an", "any", "each", "every", "last", "me", "my", "our",
    "the", "these", "this", "those", "that", "us", "your",
    "amount", "date", "month", "name", "type", "vendor", "vendors", "year",
    "find", "get", "give", "list", "show", "tell", "what", "which", "how",
    "invoice", "invoices", "total",
})


def _is_candidate_vendor(word: str) -> bool:
    lowered = word.lower()
    return not (
        lowered in STOP_WORDS
        or lowered in MONTH_NAMES
        or lowered in _TYPE_WORDS.split("|")
        or word.isdigit()
    )


def _canonical_vendor(word: str, known_vendors: Sequence[str]) -> str:
    for vendor in known_vendors:
        if vendor.lower() == word.lower():
            return vendor
    return word


def extract_invoice_number(text: str) -> Optional[str]:
    """
    Find an explicit invoice number in the text.

    Only tokens containing at least one digit count, so "invoices from X"
    or "invoice number" alone never trigger a lookup.

    Example:
        >>> extract_invoice_number("Find invoice INV-2023-004")
        'INV-2023-004'
    """
    for pattern in INVOICE_NUMBER_PATTERNS:
        for match in pattern.finditer(text):
            token = match.group(1)
            if any(ch.isdigit() for ch in token):
                return token
    return None


def extract_vendor(text: str, context: IntentContext) -> Dict[str, str]:
    """
    Vendor rule.

    Order: a known vendor named anywhere in the text; then "vendor X",
    "from X", "by X"; then a capitalised word right before "invoice(s)".
    """
    for vendor in sorted(context.known_vendors, key=len, reverse=True):
        if re.search(r"(?<!\w)" + re.escape(vendor) + r"(?!\w)", text, re.IGNORECASE):
            return {"vendor": vendor}

    for pattern in VENDOR_PATTERNS:
        for match in pattern.finditer(text):
            word = match.group(1)
            if _is_candidate_vendor(word):
                return {"vendor": _canonical_vendor(word, context.known_vendors)}

    for match in NAMED_INVOICES_PATTERN.finditer(text):
        word = match.group(1)
        if _is_candidate_vendor(word):
            return {"vendor": _canonical_vendor(word, context.known_vendors)}

    return {}


def extract_month_range(text: str, context: IntentContext) -> Dict[str, str]:
    """
    Month rule: a month name maps to that whole month of the current year.

    Example:
        "from January" in 2025 -> start_date=2025-01-01, end_date=2025-01-31
    """
    match = MONTH_PATTERN.search(text)
    if not match:
        return {}

    month = MONTH_NAMES.index(match.group(1).lower()) + 1
    year = context.today.year
    last_day = calendar.monthrange(year, month)[1]

    return {
        "start_date": f"{year:04d}-{month:02d}-01",
        "end_date": f"{year:04d}-{month:02d}-{last_day:02d}",
    }


def extract_invoice_type(text: str, context: IntentContext) -> Dict[str, str]:
    """Type rule: "type credit" or "credit invoices" -> invoice_type="Credit"."""
    for pattern in TYPE_PATTERNS:
        match = pattern.search(text)
        if match:
            return {"invoice_type": match.group(1).capitalize()}
    return {}


# Combined (non-exclusive) rules, applied in this order
INTENT_RULES: Tuple[IntentRule, ...] = (
    extract_vendor,
    extract_month_range,
    extract_invoice_type,
)


def extract_query_intent(
    text: str,
    known_vendors: Sequence[str] = (),
    context: Optional[IntentContext] = None,
) -> QueryIntent:
    """
    Turn a chat question into a QueryIntent.

    Args:
        text: The user's message
        known_vendors: Vendor names present in the store
        context: Optional explicit context (overrides known_vendors; used
                 to pin "today" in tests)

    Returns:
        QueryIntent with either invoice_num or a combined InvoiceFilter
    """
    if context is None:
        context = IntentContext(known_vendors=tuple(known_vendors))

    invoice_num = extract_invoice_number(text)
    if invoice_num:
        return QueryIntent(invoice_num=invoice_num)

    params: Dict[str, str] = {}
    for rule in INTENT_RULES:
        params.update(rule(text, context))

    return QueryIntent(filters=InvoiceFilter.from_params(**params))
