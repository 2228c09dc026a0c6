from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./app.db"

    # Frontend URL for CORS
    frontend_url: str = "http://localhost:3000"

    log_level: str = "INFO"

    # Gemini: API key (Developer API) or Vertex AI project; neither = AI disabled
    gemini_api_key: str = ""
    vertex_project_id: str = ""
    vertex_location: str = "us-central1"
    vertex_credentials_path: str = ""  # path to service account JSON; empty = use ADC
    gemini_model: str = "gemini-2.0-flash"

    # Outbound call policy (shared by answers and guidance)
    ai_min_call_interval_seconds: float = 2.0
    ai_max_retries: int = 3
    ai_backoff_base_seconds: float = 5.0
    ai_backoff_multiplier: float = 3.0

    # Generation parameters
    ai_temperature: float = 0.7
    ai_answer_max_output_tokens: int = 1000
    ai_guidance_max_output_tokens: int = 500

    # In-process content cache TTL (1 day)
    ai_content_cache_ttl_seconds: int = 86400
    # 0 = stale entries are only superseded, never swept
    ai_cache_sweep_interval_seconds: int = 0

    # Prompt context
    ai_health_record_limit: int = 10

    # Owner of every AI-generated answer
    ai_system_user_id: str = "ponnect-ai-system"
    ai_system_user_email: str = "ai@ponnect.app"

    # Batch guidance
    ai_guidance_batch_size: int = 5
    ai_guidance_batch_delay_seconds: float = 0.5

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
