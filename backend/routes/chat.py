"""
Invoice chat endpoint.

POST /api/chat answers a natural-language question about the invoices.

Flow:
1. Validate the message (400 if missing or empty)
2. Hand it to the chat agent (intent extraction + one Gemini turn)
3. Return the answer and the matched invoices

The agent never raises: on any failure it returns an apology and no
invoices, and the response then omits the "invoices" key. Matched rows
that fail validation are treated the same way.
"""

import logging

from fastapi import APIRouter, status
from pydantic import ValidationError

from backend.agents.chat import CHAT_APOLOGY, process_user_message
from backend.db.client import get_supabase_client
from backend.schemas.chat import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="Ask a question about invoices",
)
async def chat(request: ChatRequest) -> ChatResponse:
    logger.info("Processing chat message")

    try:
        supabase_client = get_supabase_client()
    except ValueError as e:
        logger.error(f"Database unavailable for chat: {e}")
        return ChatResponse(answer=CHAT_APOLOGY)

    result = await process_user_message(supabase_client, request.message)

    if result["invoices"] is None:
        return ChatResponse(answer=result["answer"])

    try:
        return ChatResponse(answer=result["answer"], invoices=result["invoices"])
    except ValidationError as e:
        # stored rows that no longer fit the invoice model
        logger.error(f"Chat matched malformed invoices: {e}")
        return ChatResponse(answer=CHAT_APOLOGY)
