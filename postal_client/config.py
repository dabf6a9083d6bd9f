"""Configuration for the Postal client and its command-line demo."""

from __future__ import annotations

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .client import PostalClient

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """Connection settings derived from environment variables."""

    postal_address: str = Field(..., alias="POSTAL_ADDRESS")
    postal_token: str = Field(..., alias="POSTAL_TOKEN")
    postal_timeout: float | None = Field(None, alias="POSTAL_TIMEOUT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("postal_address", "postal_token", mode="before")
    @classmethod
    def _reject_blank(cls, value):
        if isinstance(value, str) and value.strip() == "":
            raise ValueError("must not be empty")
        return value

    @field_validator("postal_timeout", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    def client(self) -> PostalClient:
        """Build a client for the configured Postal server."""
        return PostalClient(
            self.postal_address, self.postal_token, timeout=self.postal_timeout
        )
