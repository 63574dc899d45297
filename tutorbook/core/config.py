# tutorbook/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Literal, Set

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"
    logger.info(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


PROD_ENVIRONMENTS: Set[str] = {"prod", "production", "live"}

_DEFAULT_SECRET_KEY = SecretStr("tutorbook-dev-secret-change-me")


class Settings(BaseSettings):
    # Auth
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours
    min_password_length: int = Field(
        default=6, description="Minimum accepted password length at registration"
    )
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt work factor")

    # Database
    database_url: str = Field(
        default="sqlite:///./tutorbook.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables on startup (use alembic outside local dev)",
    )

    # HTTP
    api_title: str = f"{BRAND_NAME} API"
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Tutor directory
    tutor_directory_default_limit: int = 50
    tutor_directory_max_limit: int = 100

    # Environment
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or "development"
        return value

    @property
    def is_production(self) -> bool:
        return self.environment in PROD_ENVIRONMENTS

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.lower().startswith("sqlite")

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def get_database_url(self) -> str:
        """Get the database URL, refusing the dev secret in production."""
        if self.is_production and (
            self.secret_key.get_secret_value() == _DEFAULT_SECRET_KEY.get_secret_value()
        ):
            raise RuntimeError("Refusing to start: SECRET_KEY must be set in production")
        return self.database_url


settings = Settings()
logger.info(
    "[CONFIG] environment=%s sqlite=%s",
    settings.environment,
    settings.is_sqlite,
)
