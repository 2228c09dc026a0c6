"""
Gemini call client for Ponnect AI features (expert-question answers, alert guidance).
Uses google-genai with either a Gemini API key or Vertex AI.

generate() never raises: a missing credential, a terminal API error, an empty response or
exhausted retries all return None. Transient errors (429, 5xx, quota exhausted) are retried
with exponential backoff (tenacity, schedule from RetryPolicy); every attempt goes through the
shared CallThrottle.
"""
import logging
from pathlib import Path
from typing import Any

from google import genai
from google.genai import errors, types
from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception

from app.config import Settings
from app.services.ai_rate_limiter import CallThrottle, RetryPolicy

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "your_gemini_api_key_here"

TRANSIENT_ERROR_MARKERS = ("resource_exhausted", "quota")

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"


def build_genai_client(settings: Settings) -> Any | None:
    """google-genai client from settings, or None when no credential is configured."""
    api_key = (settings.gemini_api_key or "").strip()
    if api_key and api_key != PLACEHOLDER_API_KEY:
        return genai.Client(api_key=api_key)

    if not settings.vertex_project_id:
        return None

    credentials = None
    if settings.vertex_credentials_path:
        from google.oauth2 import service_account

        path = Path(settings.vertex_credentials_path)
        if path.is_file():
            credentials = service_account.Credentials.from_service_account_file(
                str(path),
                scopes=["https://www.googleapis.com/auth/cloud-platform"],
            )
        else:
            logger.warning("Vertex credentials file not found: %s (falling back to ADC)", path)

    return genai.Client(
        vertexai=True,
        project=settings.vertex_project_id,
        location=settings.vertex_location,
        credentials=credentials,
    )


def is_transient_error(error: Exception) -> bool:
    """Rate limit, server error, or a quota message in the error body."""
    code = getattr(error, "code", None)
    if isinstance(code, int) and (code == 429 or code >= 500):
        return True
    body = " ".join(
        str(part) for part in (getattr(error, "status", None), getattr(error, "message", None), error) if part
    ).lower()
    return any(marker in body for marker in TRANSIENT_ERROR_MARKERS)


def extract_text(response: Any) -> str | None:
    """Text of the first candidate, or None for an empty/blocked response."""
    if not response or not getattr(response, "candidates", None):
        return None
    candidate = response.candidates[0]
    content = getattr(candidate, "content", None)
    if not content or not getattr(content, "parts", None):
        return None
    return getattr(response, "text", None) or getattr(content.parts[0], "text", None)


class GeminiClient:
    """One logical Gemini request per generate() call, throttled and retried."""

    def __init__(
        self,
        client: Any | None,
        model: str,
        throttle: CallThrottle,
        retry_policy: RetryPolicy | None = None,
        temperature: float = 0.7,
    ):
        self._client = client
        self.model = model
        self._throttle = throttle
        self._retry = retry_policy or RetryPolicy()
        self._temperature = temperature

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def _build_config(self, max_output_tokens: int) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self._temperature,
            top_k=40,
            top_p=0.95,
            max_output_tokens=max_output_tokens,
            safety_settings=[
                types.SafetySetting(category=category, threshold=SAFETY_THRESHOLD)
                for category in SAFETY_CATEGORIES
            ],
        )

    def _retrying(self, label: str) -> Retrying:
        """Transient API errors are retried; every attempt (retries included) passes the throttle first."""

        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            logger.warning(
                "[%s] Gemini transient error %s, retrying in %.0fs (attempt %d/%d)",
                label,
                getattr(error, "code", None),
                retry_state.next_action.sleep,
                retry_state.attempt_number,
                self._retry.max_retries,
            )

        return Retrying(
            stop=self._retry.stop(),
            wait=self._retry.wait(),
            retry=retry_if_exception(
                lambda e: isinstance(e, errors.APIError) and is_transient_error(e)
            ),
            sleep=self._throttle.sleep,
            before=lambda retry_state: self._throttle.wait(),
            before_sleep=before_sleep,
        )

    def generate(self, prompt: str, *, max_output_tokens: int = 1000, label: str = "AI") -> str | None:
        if self._client is None:
            logger.info("[%s] No valid Gemini credentials configured", label)
            return None

        config = self._build_config(max_output_tokens)
        try:
            for attempt in self._retrying(label):
                with attempt:
                    response = self._client.models.generate_content(
                        model=self.model,
                        contents=prompt,
                        config=config,
                    )
        except RetryError as e:
            error = e.last_attempt.exception()
            logger.error("[%s] Max retries exceeded (%s)", label, getattr(error, "code", None))
            return None
        except errors.APIError as e:
            logger.error("[%s] Gemini API error %s: %s", label, getattr(e, "code", None), e)
            return None
        except Exception:
            logger.exception("[%s] Gemini call failed", label)
            return None

        text = extract_text(response)
        if not text:
            logger.error("[%s] No response text from Gemini", label)
            return None
        return text
