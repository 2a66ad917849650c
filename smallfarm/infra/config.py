from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    farm_store: str = Field(default="sqlite", validation_alias="FARM_STORE")
    farm_store_path: Optional[str] = Field(
        default=None, validation_alias="FARM_STORE_PATH"
    )
    auth_provider: str = Field(default="static", validation_alias="AUTH_PROVIDER")
    auth_session_url: Optional[str] = Field(
        default=None, validation_alias="AUTH_SESSION_URL"
    )
    auth_static_tokens: Optional[str] = Field(
        default=None, validation_alias="AUTH_STATIC_TOKENS"
    )
    auth_timeout_seconds: float = Field(
        default=10.0, validation_alias="AUTH_TIMEOUT_SECONDS"
    )
    llm_provider: str = Field(default="mock", validation_alias="LLM_PROVIDER")
    openai_api_key: Optional[str] = Field(default=None, validation_alias="OPENAI_API_KEY")
    openai_api_base: Optional[str] = Field(
        default=None, validation_alias="OPENAI_API_BASE"
    )
    llm_model: str = Field(default="gpt-4.1-mini", validation_alias="LLM_MODEL")
    llm_temperature: float = Field(default=0.2, validation_alias="LLM_TEMPERATURE")
    schedule_regenerate_mode: str = Field(
        default="replace", validation_alias="SCHEDULE_REGENERATE_MODE"
    )
    seed_system_crops: bool = Field(default=True, validation_alias="SEED_SYSTEM_CROPS")
    log_path: Optional[str] = Field(default=None, validation_alias="LOG_PATH")
    fastapi_port: int = Field(default=8000, validation_alias="FASTAPI_PORT")
    cors_allow_origins: str = Field(default="*", validation_alias="CORS_ALLOW_ORIGINS")

    @field_validator("llm_provider", mode="after")
    @classmethod
    def normalize_llm_provider(cls, value: str) -> str:
        return value.lower() if value else value

    @field_validator("farm_store", "auth_provider", mode="after")
    @classmethod
    def normalize_provider(cls, value: str) -> str:
        return value.lower() if value else value

    @field_validator("schedule_regenerate_mode", mode="after")
    @classmethod
    def validate_regenerate_mode(cls, value: str) -> str:
        value = (value or "replace").lower()
        if value not in {"replace", "append"}:
            raise ValueError("SCHEDULE_REGENERATE_MODE must be 'replace' or 'append'")
        return value

    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig()
