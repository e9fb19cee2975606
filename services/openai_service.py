# services/openai_service.py
import logging
from typing import Dict, List, Optional
from openai import OpenAI

from config import settings

logger = logging.getLogger(__name__)


def create_openai_client(api_key: Optional[str] = None) -> OpenAI:
    """
    Build a fresh OpenAI client. Callers own it and pass it where it is needed;
    nothing here is cached at module level.
    """
    return OpenAI(api_key=api_key or settings.OPENAI_API_KEY)


def run_json_completion(
    client: OpenAI,
    *,
    prompt: str,
    model: Optional[str] = None,
    temperature: float = 0.2,
    max_tokens: Optional[int] = None,
) -> str:
    """
    Send a single user prompt and return the raw content string.

    - prompt: the full rendered prompt, sent as the only user message
    - model: override model if needed; otherwise uses default from settings
    - max_tokens: completion cap; defaults to OPENAI_ANALYSIS_MAX_TOKENS

    The response is requested in JSON mode but returned as plain text; parsing
    is the caller's problem. API errors are not caught here.
    """
    m = model or settings.OPENAI_ANALYSIS_MODEL
    cap = settings.OPENAI_ANALYSIS_MAX_TOKENS if max_tokens is None else max_tokens

    messages: List[Dict[str, str]] = [
        {"role": "user", "content": prompt},
    ]

    completion = client.chat.completions.create(
        model=m,
        messages=messages,
        temperature=temperature,
        max_tokens=cap,
        response_format={"type": "json_object"},
    )

    if not completion.choices:
        logger.warning(f"Completion from {m} had no choices")
        return "{}"
    return completion.choices[0].message.content or "{}"
