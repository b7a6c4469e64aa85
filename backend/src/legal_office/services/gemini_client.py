"""
Gemini integration through the google-genai SDK.
"""

import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from legal_office.core import messages
from legal_office.core.config import get_config
from legal_office.core.constants import GEMINI_PREAMBLE, GEMINI_TEMPERATURE, GEMINI_MAX_OUTPUT_TOKENS
from legal_office.core.security import SecureLogger
from legal_office.services.ai_client import AIError

config = get_config()
logger = logging.getLogger(__name__)


def build_gemini_client(api_key: str, timeout_seconds: Optional[float] = None) -> genai.Client:
    """Create a GenAI client bound to an API key."""
    timeout_ms = int((timeout_seconds or config.ai.timeout_seconds) * 1000)
    return genai.Client(api_key=api_key, http_options=types.HttpOptions(timeout=timeout_ms))


def _first_candidate_text(response: Any) -> Optional[str]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return None
    return getattr(parts[0], "text", None)


def send_to_gemini(
    prompt: str,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    client: Optional[genai.Client] = None,
) -> str:
    """
    Ask Gemini to answer ``prompt`` as an expert on Egyptian law.

    Returns the first candidate's text, or a fixed Arabic notice when the
    model produced no candidate.

    Raises:
        AIError: NOT_CONFIGURED without a key, TIMEOUT, NETWORK_ERROR or API_ERROR otherwise
    """
    api_key = api_key if api_key is not None else config.ai.gemini_api_key
    if client is None:
        if not api_key:
            raise AIError(messages.AI_NOT_CONFIGURED, AIError.NOT_CONFIGURED)
        client = build_gemini_client(api_key)

    model = model or config.ai.gemini_model
    logger.info(f"Sending prompt to Gemini ({model}): {SecureLogger.sanitize_log_message(prompt, 80)}")

    try:
        response = client.models.generate_content(
            model=model,
            contents=GEMINI_PREAMBLE.format(prompt=prompt),
            config=types.GenerateContentConfig(
                temperature=GEMINI_TEMPERATURE,
                max_output_tokens=GEMINI_MAX_OUTPUT_TOKENS,
            ),
        )
    except genai_errors.APIError as e:
        logger.error(f"Gemini API error: {e}")
        raise AIError(f"Gemini API Error: {e.message or e}", AIError.API_ERROR, e.code) from e
    except httpx.TimeoutException as e:
        raise AIError(messages.AI_TIMEOUT, AIError.TIMEOUT) from e
    except httpx.HTTPError as e:
        logger.error(f"Gemini transport error: {e}")
        raise AIError(f"Gemini API Error: {e}", AIError.NETWORK_ERROR) from e

    return _first_candidate_text(response) or messages.NO_GEMINI_RESPONSE
