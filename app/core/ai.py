"""
Process-wide AI collaborators: one Gemini client (with its shared CallThrottle) and one
content cache per feature. Built lazily on first use; reset_ai_components() drops them.
"""
import logging
from functools import lru_cache

from app.config import get_settings
from app.database import SessionLocal
from app.services.ai_answer_service import AiAnswerGenerator, AiAnswerService
from app.services.ai_guidance import AlertGuidanceService
from app.services.ai_rate_limiter import CallThrottle, RetryPolicy
from app.services.content_cache import TTLContentCache
from app.services.gemini_client import GeminiClient, build_genai_client

logger = logging.getLogger(__name__)


@lru_cache
def get_gemini_client() -> GeminiClient:
    settings = get_settings()
    client = build_genai_client(settings)
    if client is None:
        logger.warning("Gemini credentials not configured; AI answers unavailable, guidance uses fallback")
    else:
        logger.info("Gemini client ready (model %s)", settings.gemini_model)
    return GeminiClient(
        client=client,
        model=settings.gemini_model,
        throttle=CallThrottle(min_interval=settings.ai_min_call_interval_seconds),
        retry_policy=RetryPolicy(
            max_retries=settings.ai_max_retries,
            base_delay=settings.ai_backoff_base_seconds,
            multiplier=settings.ai_backoff_multiplier,
        ),
        temperature=settings.ai_temperature,
    )


@lru_cache
def get_answer_cache() -> TTLContentCache:
    return TTLContentCache(ttl_seconds=get_settings().ai_content_cache_ttl_seconds)


@lru_cache
def get_guidance_cache() -> TTLContentCache:
    return TTLContentCache(ttl_seconds=get_settings().ai_content_cache_ttl_seconds)


def get_ai_answer_service() -> AiAnswerService:
    settings = get_settings()
    generator = AiAnswerGenerator(
        client=get_gemini_client(),
        cache=get_answer_cache(),
        max_output_tokens=settings.ai_answer_max_output_tokens,
        health_record_limit=settings.ai_health_record_limit,
    )
    return AiAnswerService(
        session_factory=SessionLocal,
        generator=generator,
        ai_user_id=settings.ai_system_user_id,
        ai_user_email=settings.ai_system_user_email,
        health_record_limit=settings.ai_health_record_limit,
    )


def get_alert_guidance_service() -> AlertGuidanceService:
    settings = get_settings()
    return AlertGuidanceService(
        client=get_gemini_client(),
        cache=get_guidance_cache(),
        max_output_tokens=settings.ai_guidance_max_output_tokens,
        batch_size=settings.ai_guidance_batch_size,
        batch_delay=settings.ai_guidance_batch_delay_seconds,
    )


def sweep_ai_caches() -> int:
    """Drop expired entries from both caches; returns the number removed."""
    removed = get_answer_cache().sweep_expired() + get_guidance_cache().sweep_expired()
    if removed:
        logger.info("Swept %d expired AI cache entries", removed)
    return removed


def reset_ai_components() -> None:
    get_gemini_client.cache_clear()
    get_answer_cache.cache_clear()
    get_guidance_cache.cache_clear()
