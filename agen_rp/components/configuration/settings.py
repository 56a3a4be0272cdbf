"""Application settings loaded from the environment and per-environment files."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgenRPSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AGEN_RP_", extra="ignore", protected_namespaces=()
    )

    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_level: str = "INFO"

    model_name: str = "gemini-3-pro-preview"
    temperature: float = 0.3

    sqlite_db_path: str = "agen_rp.db"
    persona_prompt_path: str = "agen_rp.prompt"

    # Key under which the remembered API key is kept in the local store
    credential_storage_key: str = "gemini_api_key"
    # Key baked in at build/deploy time
    build_api_key: str | None = None
    # Hosting environment variables consulted last, in order
    credential_env_vars: list[str] = Field(
        default_factory=lambda: ["GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"]
    )

    tracing_enabled: bool = False

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, level: str) -> str:
        return level.strip().upper()

    @field_validator("temperature", mode="after")
    @classmethod
    def check_temperature(cls, temperature: float) -> float:
        if not 0.0 <= temperature <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        return temperature
