"""
Validation of raw Gemini output. A None return means "treat as generation failure".
- Answers: any non-empty text, trimmed.
- Guidance: a JSON array of strings, optionally wrapped in a markdown code fence.
"""
import json
import logging
import re

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)


def parse_answer_text(raw: str | None) -> str | None:
    if raw is None:
        return None
    text = raw.strip()
    return text or None


def strip_code_fence(raw: str) -> str:
    """Remove ```json / ``` markers around (or inside) the payload."""
    return _FENCE_OPEN.sub("", raw).strip()


def parse_guidance_list(raw: str | None) -> list[str] | None:
    """
    Parse guidance as a list of strings, returned as-is. Mixed types (e.g. ["ok", 5]) and blank
    items are rejected as a whole, never partially accepted. An empty list is also a failure.
    """
    if not raw or not raw.strip():
        return None
    cleaned = strip_code_fence(raw)
    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError):
        logger.error("[AI Guidance] Response is not valid JSON: %.200s", cleaned)
        return None
    if not isinstance(data, list) or not data or not all(isinstance(item, str) and item.strip() for item in data):
        logger.error("[AI Guidance] Invalid response format: %.200s", cleaned)
        return None
    return data
