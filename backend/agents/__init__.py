"""
AI Components for the invoice analytics backend.

1. Invoice chat (single-prompt Gemini workflow)
   - Keyword intent extraction narrows the invoice set
   - One Gemini chat turn answers the question with that context
   - NOT an ADK agent - uses the Google Gen AI SDK directly
"""

from backend.agents.chat import (
    ChatAgentOutput,
    QueryIntent,
    extract_query_intent,
    process_user_message,
)

__all__ = [
    "process_user_message",
    "extract_query_intent",
    "ChatAgentOutput",
    "QueryIntent",
]
