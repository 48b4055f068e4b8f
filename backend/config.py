from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Google AI Configuration (optional, enables the AI branch)
    google_ai_api_key: Optional[str] = Field(None, description="Google AI (Gemini) API key")
    google_ai_model: str = Field("gemini-2.5-flash", description="Default Gemini model")
    google_ai_base_url: str = Field("https://generativelanguage.googleapis.com/v1beta")
    google_ai_timeout: float = Field(60.0, description="Seconds to wait for the Google AI API")

    # Storage handle for agent state, declared for deployments that bind one
    agent_kv_namespace: Optional[str] = Field(None)

    # Application Configuration
    app_name: str = Field("Agent on Internet")
    app_version: str = Field("1.0.0")
    debug: bool = Field(False)
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field("INFO")

    # Server Configuration
    host: str = Field("0.0.0.0")
    port: int = Field(8000)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def has_api_key(self) -> bool:
        return bool(self.google_ai_api_key)


# Create global settings instance
settings = Settings()


def get_settings() -> Settings:
    return settings
