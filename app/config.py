"""Application configuration settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Family Health Vault"
    API_V1_PREFIX: str = "/api/v1"
    PORT: int = 8000

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    # CORS - allow the web frontends
    BACKEND_CORS_ORIGINS: str = '["http://localhost:3000", "http://localhost:5173"]'

    # Record store: "memory" or "mongo"
    STORE_BACKEND: str = "memory"
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "family_health_vault"

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"

    # JWT issued by the identity provider
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Doctor sharing links are built on top of this URL
    PUBLIC_BASE_URL: str = "http://localhost:5173"

    # Documents owned by this id are visible to every account (demo household).
    # Leave empty to require one real owner per record.
    DEMO_OWNER_ID: str = "demo-user"
    SEED_DEMO_DATA: bool = True

    # Uploads
    AVATAR_BASE_URL: str = "https://i.pravatar.cc/150"
    MAX_UPLOAD_BYTES: int = 20 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from JSON string."""
        try:
            return json.loads(self.BACKEND_CORS_ORIGINS)
        except json.JSONDecodeError:
            return ["http://localhost:3000"]


settings = Settings()
