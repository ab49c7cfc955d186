from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MILLENNIUM_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    app_env: str = "dev"
    log_level: str = "info"
    cors_origins: str = (
        "http://localhost:3000,http://127.0.0.1:3000,"
        "http://localhost:5173,http://127.0.0.1:5173"
    )

    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MILLENNIUM_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    advisor_model: str = "gpt-4o-mini"
    advisor_timeout_seconds: float = 15.0
    advisor_fallback_message: str = "O tempo é o melhor amigo dos juros compostos."

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
