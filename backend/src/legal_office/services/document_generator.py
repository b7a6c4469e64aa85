"""
Legal document generation through Gemini.
"""

import logging
from typing import Any, Mapping, Optional

from legal_office.core.constants import DOCUMENT_TEMPLATE_TYPES, DOCUMENT_GENERATION_PROMPT
from legal_office.services.gemini_client import send_to_gemini

logger = logging.getLogger(__name__)

TEMPLATE_TYPES = DOCUMENT_TEMPLATE_TYPES


def build_generation_prompt(data: Mapping[str, Any]) -> str:
    """Render the Arabic drafting prompt for a defence memo, lawsuit, objection or notice."""
    template_type = data.get("type") or "defense"
    if template_type not in TEMPLATE_TYPES:
        raise ValueError(f"Unknown document type: {template_type}")

    return DOCUMENT_GENERATION_PROMPT.format(
        template_name=TEMPLATE_TYPES[template_type],
        opponent=data.get("opponent") or "",
        court=data.get("court") or "",
        case_number=data.get("case_number") or "",
        facts=data.get("facts") or "",
        requests=data.get("requests") or "",
        notes=data.get("notes") or "",
    )


def generate_document_text(data: Mapping[str, Any], api_key: Optional[str] = None) -> str:
    """
    Draft the document text.

    Raises:
        AIError: When Gemini is not configured or the call fails
    """
    prompt = build_generation_prompt(data)
    logger.info(f"Generating {data.get('type')} document")
    return send_to_gemini(prompt, api_key=api_key)
