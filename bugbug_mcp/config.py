"""Configuration for the BugBug MCP server."""

from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class BugBugConfig(BaseSettings):
    """Configuration read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr = Field(validation_alias=AliasChoices("API_KEY", "api_key"))
    api_base_url: str = Field(
        default="https://app.bugbug.io/api/v1/",
        validation_alias=AliasChoices("BUGBUG_API_BASE_URL", "api_base_url"),
    )
    docs_base_url: str = Field(
        default="https://docs.bugbug.io",
        validation_alias=AliasChoices("BUGBUG_DOCS_URL", "docs_base_url"),
    )
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("api_base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        # Request paths are joined relative to the base URL
        return value if value.endswith("/") else f"{value}/"
