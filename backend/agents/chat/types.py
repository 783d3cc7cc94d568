"""
Invoice chat type definitions.

Typed contracts shared by the intent extractor and the chat runner.
All types are JSON-serializable and compatible with Pydantic.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, TypedDict

from backend.services.filters import InvoiceFilter


@dataclass(frozen=True)
class IntentContext:
    """Inputs the extraction rules may consult besides the message text."""
    known_vendors: Sequence[str] = ()
    today: date = field(default_factory=date.today)


@dataclass(frozen=True)
class QueryIntent:
    """
    Structured reading of a chat question.

    Exactly one of the two shapes is meaningful:
    - invoice_num set: direct lookup, `filters` is ignored
    - invoice_num None: list every invoice matching `filters`
    """
    invoice_num: Optional[str] = None
    filters: InvoiceFilter = field(default_factory=InvoiceFilter)

    @property
    def is_direct_lookup(self) -> bool:
        return self.invoice_num is not None


class ChatAgentOutput(TypedDict):
    """Output of the chat runner."""
    answer: str  # Model answer, or the apology on failure
    invoices: Optional[List[Dict[str, Any]]]  # All matched invoices; None on failure
