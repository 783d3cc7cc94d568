"""
Invoice chat runner.

Answers a natural-language question about the invoice store with a single
Gemini call:
1. Extract a QueryIntent from the question (keyword heuristics)
2. Fetch the matching invoices (direct lookup or filtered listing)
3. Build system context, invoice context and the final prompt
4. Send the prompt through a chat seeded with a fixed preamble
5. Return the answer with every matched invoice

Any failure at any step yields the apology answer with no invoices.
There are no retries.
"""

import logging
from typing import Any, Dict, List

from google import genai
from google.genai import types
from supabase import Client

from backend.agents.chat.intent import extract_query_intent
from backend.agents.chat.prompts import (
    CHAT_APOLOGY,
    CHAT_PREAMBLE,
    FALLBACK_SYSTEM_CONTEXT,
    build_chat_prompt,
    build_invoice_context,
    build_system_context,
)
from backend.agents.chat.types import ChatAgentOutput
from backend.config import settings
from backend.services.analytics_service import get_analytics_summary
from backend.services.invoice_service import get_invoice_by_number, get_vendor_list, list_invoices

logger = logging.getLogger(__name__)

_gemini_client: genai.Client | None = None

CHAT_SAFETY_SETTINGS = [
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        threshold=types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    ),
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        threshold=types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    ),
]


def get_gemini_client() -> genai.Client:
    """
    Lazy initialization of the Gemini client.

    Raises:
        ValueError: If GOOGLE_API_KEY is not configured
    """
    global _gemini_client

    if _gemini_client is None:
        if not settings.GOOGLE_API_KEY:
            logger.error("GOOGLE_API_KEY not configured")
            raise ValueError(
                "GOOGLE_API_KEY is not configured. "
                "Please set it in your .env file to use the invoice chat."
            )
        _gemini_client = genai.Client(api_key=settings.GOOGLE_API_KEY)
        logger.info("Gemini client initialized for invoice chat")

    return _gemini_client


def build_chat_history() -> List[types.Content]:
    return [
        types.Content(role=role, parts=[types.Part(text=text)])
        for role, text in CHAT_PREAMBLE
    ]


async def find_relevant_invoices(
    supabase_client: Client,
    message: str,
) -> List[Dict[str, Any]]:
    """
    Resolve the question to the list of matching invoices.

    An explicit invoice number yields at most one invoice; otherwise every
    invoice matching the extracted filter is returned (no pagination).
    """
    vendors = await get_vendor_list(supabase_client)
    intent = extract_query_intent(message, known_vendors=vendors)

    if intent.is_direct_lookup:
        logger.info(f"Chat intent: direct lookup of invoice {intent.invoice_num}")
        invoice = await get_invoice_by_number(supabase_client, intent.invoice_num)
        return [invoice] if invoice else []

    logger.info(f"Chat intent: filtered listing {intent.filters}")
    invoices, _ = await list_invoices(
        supabase_client=supabase_client,
        filters=intent.filters,
        page=1,
        limit=0,
    )
    return invoices


async def load_system_context(supabase_client: Client) -> str:
    """System context with live statistics, or the fallback text if they cannot be read."""
    try:
        summary = await get_analytics_summary(supabase_client)
        vendors = await get_vendor_list(supabase_client)
    except Exception as e:
        logger.error(f"Error generating system context: {e}", exc_info=True)
        return FALLBACK_SYSTEM_CONTEXT

    return build_system_context(summary.total_invoices, summary.total_amount, vendors)


async def ask_gemini(prompt: str) -> str:
    """
    Send the prompt through a preamble-seeded chat and return the answer text.

    Raises:
        ValueError: If the client is not configured or the answer is empty
    """
    client = get_gemini_client()

    config = types.GenerateContentConfig(
        temperature=0.2,
        max_output_tokens=1000,
        safety_settings=CHAT_SAFETY_SETTINGS,
    )

    chat = client.aio.chats.create(
        model=settings.GEMINI_MODEL,
        config=config,
        history=build_chat_history(),
    )

    response = await chat.send_message(prompt)
    answer = (response.text or "").strip()

    if not answer:
        raise ValueError("Model returned an empty answer")

    return answer


async def process_user_message(
    supabase_client: Client,
    message: str,
) -> ChatAgentOutput:
    """
    Answer one chat message.

    Args:
        supabase_client: Supabase client
        message: The user's question

    Returns:
        ChatAgentOutput with the model answer and all matched invoices, or
        the apology answer and invoices=None if anything failed.
    """
    try:
        invoices = await find_relevant_invoices(supabase_client, message)
        system_context = await load_system_context(supabase_client)

        prompt = build_chat_prompt(
            system_context=system_context,
            invoice_context=build_invoice_context(invoices),
            user_message=message,
        )

        answer = await ask_gemini(prompt)

        logger.info(f"Chat message answered with {len(invoices)} matched invoices")

        return {"answer": answer, "invoices": invoices}

    except Exception as e:
        logger.error(f"Error processing chat message: {e}", exc_info=True)
        return {"answer": CHAT_APOLOGY, "invoices": None}
