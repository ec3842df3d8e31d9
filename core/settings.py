from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, PostgresDsn, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["local", "dev", "prod"] = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=False)
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)


class PgDbSettings(CustomSettings):
    POSTGRES_ENGINE: str = Field(default="postgresql+asyncpg")
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: SecretStr = Field(default="postgres")
    POSTGRES_DB: str = Field(default="chat")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: PostgresDsn | str = Field(default="")
    DB_CONNECT_RETRIES: int = Field(default=3, ge=1)
    DB_CONNECT_BACKOFF_SECONDS: float = Field(default=1.0, ge=0)
    DB_AUTO_CREATE_TABLES: bool = Field(default=False)

    @model_validator(mode="before")
    def validate_postgres_dsn(cls, data: dict):
        if isinstance(data, dict) and not data.get("DATABASE_URL"):
            _built_uri = PostgresDsn.build(
                scheme=data.get("POSTGRES_ENGINE", "postgresql+asyncpg"),
                username=data.get("POSTGRES_USER", "postgres"),
                password=data.get("POSTGRES_PASSWORD", "postgres"),
                host=data.get("POSTGRES_HOST", "localhost"),
                port=int(data.get("POSTGRES_PORT", 5432)),
                path=data.get("POSTGRES_DB", "chat"),
            ).unicode_string()
            data["DATABASE_URL"] = _built_uri
        return data


class LLMSettings(CustomSettings):
    """Chat-completion provider used for assistant replies.

    Env vars:
    - LLM_PROVIDER_URL: full chat-completions endpoint URL
    - LLM_API_KEY
    - LLM_MODEL
    - LLM_REQUEST_TIMEOUT: seconds for the single outbound request

    Leaving the URL or model empty puts the gateway in "not configured" mode.
    """

    LLM_PROVIDER_URL: Optional[str] = Field(default=None)
    LLM_API_KEY: SecretStr = Field(default="")
    LLM_MODEL: Optional[str] = Field(default=None)
    LLM_REQUEST_TIMEOUT: float = Field(default=60.0, gt=0)


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    DATABASE: PgDbSettings = Field(default_factory=PgDbSettings)
    LLM: LLMSettings = Field(default_factory=LLMSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
