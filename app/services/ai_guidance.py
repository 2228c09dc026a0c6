"""
AI guidance for regional safety alerts.
Always returns a usable list: cache hit, fresh Gemini output, or the static fallback for the
alert type. Guidance is never persisted, only cached in-process.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from app.schemas.ai import AlertContext
from app.services.ai_response import parse_guidance_list
from app.services.content_cache import ContentCache
from app.services.gemini_client import GeminiClient
from app.services.prompt_builder import build_guidance_prompt

logger = logging.getLogger(__name__)

FALLBACK_GUIDANCE: dict[str, list[str]] = {
    "TICK": [
        "Check your dog thoroughly after outdoor activities",
        "Focus on ears, between toes, around eyes and neck",
        "Use veterinary-approved tick prevention products",
        "If you find a tick, remove carefully and seek vet advice",
    ],
    "SNAKE": [
        "Keep dogs on leash in snake-prone areas",
        "Avoid tall grass and rocky areas during warm hours",
        "If bitten, keep dog calm and get to vet immediately",
        "Do not attempt to catch or kill the snake",
    ],
    "DISEASE": [
        "Ensure vaccinations are up to date",
        "Avoid contact with unknown animals",
        "Consult your vet if symptoms appear",
        "Follow quarantine guidelines if advised",
    ],
    "HEATWAVE": [
        "Keep dogs indoors during peak heat (10am-4pm)",
        "Ensure fresh, cool water is always available",
        "Never leave dogs in parked cars",
        "Watch for signs of heat stroke",
    ],
    "UV": [
        "Limit outdoor time during peak UV hours (10am-2pm)",
        "Consider pet-safe sunscreen for exposed skin areas",
        "Provide shade and cool resting spots",
        "Watch for signs of sunburn on nose and ears",
    ],
    "OTHER": [
        "Monitor your local area for updates",
        "Follow advice from local authorities",
        "Keep emergency vet contact handy",
    ],
}
DEFAULT_FALLBACK_TYPE = "OTHER"

FINGERPRINT_TITLE_LENGTH = 50


def guidance_fingerprint(alert: AlertContext) -> str:
    return f"{alert.type}-{alert.severity}-{alert.title[:FINGERPRINT_TITLE_LENGTH]}"


def fallback_guidance(alert_type: str) -> list[str]:
    return list(FALLBACK_GUIDANCE.get(alert_type) or FALLBACK_GUIDANCE[DEFAULT_FALLBACK_TYPE])


@dataclass
class GuidanceResult:
    fingerprint: str
    guidance: list[str]
    source: str  # "ai" | "cache" | "fallback"


class AlertGuidanceService:
    def __init__(
        self,
        client: GeminiClient,
        cache: ContentCache,
        max_output_tokens: int = 500,
        batch_size: int = 5,
        batch_delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._client = client
        self._cache = cache
        self._max_output_tokens = max_output_tokens
        self._batch_size = max(1, batch_size)
        self._batch_delay = batch_delay
        self._sleep = sleep

    def generate(self, alert: AlertContext) -> GuidanceResult:
        key = guidance_fingerprint(alert)
        cached = self._cache.get(key)
        if cached is not None:
            return GuidanceResult(fingerprint=key, guidance=list(cached), source="cache")

        raw = self._client.generate(
            build_guidance_prompt(alert),
            max_output_tokens=self._max_output_tokens,
            label="AI Guidance",
        )
        guidance = parse_guidance_list(raw)
        if guidance:
            self._cache.put(key, guidance, model=self._client.model)
            return GuidanceResult(fingerprint=key, guidance=list(guidance), source="ai")

        logger.info("[AI Guidance] Using fallback guidance for %s", key)
        return GuidanceResult(fingerprint=key, guidance=fallback_guidance(alert.type), source="fallback")

    def generate_batch(self, alerts: list[AlertContext]) -> dict[str, list[str]]:
        """Guidance for many alerts: parallel within a batch, short pause between batches."""
        results: dict[str, list[str]] = {}
        for start in range(0, len(alerts), self._batch_size):
            batch = alerts[start:start + self._batch_size]
            with ThreadPoolExecutor(max_workers=len(batch)) as pool:
                for result in pool.map(self.generate, batch):
                    results[result.fingerprint] = result.guidance
            if start + self._batch_size < len(alerts):
                self._sleep(self._batch_delay)
        return results
