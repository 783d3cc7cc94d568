"""
Invoice chat package.

Answers natural-language questions about the invoice store using Google
Gemini with a single prompt built from heuristically extracted filters.

Main Components:
- types: intent and output contracts
- intent: ordered keyword rules (invoice number > vendor/month/type)
- prompts: preamble, context builders and apology text
- agent: runner that fetches invoices and calls Gemini

Usage:
    from backend.agents.chat import process_user_message

    result = await process_user_message(supabase_client, "Show me credit invoices")
"""

from backend.agents.chat.agent import process_user_message
from backend.agents.chat.intent import extract_query_intent
from backend.agents.chat.prompts import CHAT_APOLOGY
from backend.agents.chat.types import ChatAgentOutput, IntentContext, QueryIntent

__all__ = [
    "process_user_message",
    "extract_query_intent",
    "CHAT_APOLOGY",
    "ChatAgentOutput",
    "IntentContext",
    "QueryIntent",
]
