"""Configuration objects and helpers for the court digest service."""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    playtomic_offset_minutes: int = 60
    timezone: str = "Europe/London"
    club_name: str = "Club"
    sport: str = "Padel"
    tenant_id: Optional[str] = None
    playtomic_base_url: HttpUrl = "https://api.playtomic.io/v1"
    playtomic_timeout_seconds: float = 10.0
    emulator_url: Optional[HttpUrl] = None
    emulator_timeout_seconds: float = 10.0
    whatsapp_groups: Annotated[list[str], NoDecode] = Field(default_factory=list)
    max_url_length: int = 1800
    environment: str = "production"

    model_config = SettingsConfigDict(
        env_prefix="COURT_DIGEST_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("whatsapp_groups", mode="before")
    @classmethod
    def split_groups(cls, value: object) -> object:
        """Accept a comma separated list of group names."""
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    def playtomic_endpoint(self, name: str) -> str:
        """Construct the Playtomic API URL for an endpoint name."""
        return f"{str(self.playtomic_base_url).rstrip('/')}/{name}"


class ServiceInfo(BaseModel):
    """Metadata returned by the API/CLI."""

    generated_at: str
    timezone: str
