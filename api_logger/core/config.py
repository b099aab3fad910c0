import os
from typing import Optional
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Settings(BaseModel):
    # Public API being polled
    public_api_url: str = os.getenv(
        "PUBLIC_API_URL",
        "https://api.publicapis.org/random?auth=null",
    )
    public_api_timeout: float = float(os.getenv("PUBLIC_API_TIMEOUT", "30"))

    # Supabase (shared by the poller write path and the query read path)
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    attempt_log_table: str = os.getenv("ATTEMPT_LOG_TABLE", "api_attempt_log")
    attempt_log_page_size: int = int(os.getenv("ATTEMPT_LOG_PAGE_SIZE", "500"))
    payload_bucket: str = os.getenv("PAYLOAD_BUCKET", "payloadforsuccess")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Celery
    celery_broker_url: str = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    celery_result_backend: str = os.getenv("CELERY_RESULT_BACKEND", os.getenv("REDIS_URL", "redis://localhost:6379/0"))

    # Poll schedule
    poll_enabled: bool = _env_flag("POLL_ENABLED", "true")
    poll_cron_minute: str = os.getenv("POLL_CRON_MINUTE", "*")
    # At-most-one concurrent poll (Redis lock); off by default
    poll_exclusive: bool = _env_flag("POLL_EXCLUSIVE", "false")
    poll_lock_ttl: int = int(os.getenv("POLL_LOCK_TTL", "120"))

    # Request-scoped function key; unset means pass-through
    function_key: Optional[str] = os.getenv("FUNCTION_KEY") or None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
