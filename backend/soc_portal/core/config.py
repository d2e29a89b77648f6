from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """CORS_ORIGINS from .env: a JSON array or a comma-separated list"""
    if isinstance(v, (list, tuple)):
        return [str(origin) for origin in v]
    if not isinstance(v, str):
        return []
    raw = v.strip()
    if raw.startswith('['):
        try:
            return [str(origin) for origin in json.loads(raw)]
        except json.JSONDecodeError:
            raw = raw.strip('[]')
    return [origin.strip().strip('"\'') for origin in raw.split(',') if origin.strip()]


class Settings(BaseSettings):
    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "SOC Portal"
    APP_VERSION: str = "1.0.0"
    API_VERSION: str = "v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    TESTING: bool = False
    FRONTEND_URL: str = "http://localhost:3000"
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    CORS_ORIGINS: Any = ["http://localhost:3000"]

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./soc_portal.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # ==========================================
    # Session & Authentication
    # ==========================================
    # Shared by the server gate and the client activity tracker
    SESSION_TIMEOUT_MINUTES: float = Field(
        default=15,
        validation_alias=AliasChoices("SOC_SESSION_TIMEOUT_MINUTES", "SESSION_TIMEOUT_MINUTES"),
    )
    SESSION_WARNING_RATIO: float = 0.8
    SESSION_COOKIE_MAX_AGE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10

    # ==========================================
    # Outbound Alerts (Telegram)
    # ==========================================
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_CHAT_ID: str = ""
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    ALERT_TIMEOUT_SECONDS: float = 5.0

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "5/minute"

    # ==========================================
    # Storage
    # ==========================================
    STORAGE_DIR: str = "./storage"
    MAX_PROFILE_PHOTO_BYTES: int = 5 * 1024 * 1024  # 5MB
    DEFAULT_PROFILE_PHOTO_URL: str = "/storage/user_dp/default_DP.png"

    # ==========================================
    # Feature Handlers
    # ==========================================
    WELCOME_CHECK_CACHE_SECONDS: float = 5.0
    ACTIVITY_LOG_PAGE_SIZE: int = 20

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def validate_cors_origins(cls, v):
        return parse_cors_origins(v)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def profile_photo_dir(self) -> Path:
        return Path(self.STORAGE_DIR) / "user_dp"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings
        populate_by_name = True


# Create settings instance
settings = Settings()
