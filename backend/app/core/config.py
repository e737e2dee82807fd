from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "Stream Catalog"
    VERSION: str = "1.0.0"
    API_STR: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:////db/catalog.db"

    # Redis / Celery
    REDIS_URL: str = "redis://localhost:6379/0"
    TIMEZONE: str = "Europe/Madrid"
    SESSION_CLEANUP_INTERVAL_SECONDS: float = 3600.0

    # Security
    SECRET_KEY: str = "changethis_to_a_secure_random_string_in_production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 7 days
    AUTH_COOKIE_NAME: str = "auth-token"
    COOKIE_SECURE: bool = False
    # Page navigation redirects unless the cookie is longer than this
    TOKEN_MIN_LENGTH: int = 50
    BCRYPT_ROUNDS: int = 12

    # Bootstrap admin, created on startup when no admin exists
    ADMIN_USER: str = "Administrador"
    ADMIN_PASS: str = "19801605"
    ADMIN_DEVICES: int = 3

    # Chat
    CHAT_POLL_INTERVAL_SECONDS: float = 2.0
    CHAT_POLL_BATCH: int = 50

    # Assistant (OpenAI-compatible chat completions endpoint)
    LLM_API_URL: str = "https://apps.abacus.ai/v1/chat/completions"
    LLM_API_KEY: Optional[str] = None
    LLM_MODEL: str = "gpt-4.1-mini"
    LLM_MAX_TOKENS: int = 300
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT_SECONDS: float = 30.0

    class Config:
        env_file = ".env"

settings = Settings()
