"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level options for yamlsieve.

    Values are read from ``YAMLSIEVE_*`` environment variables and from a
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="YAMLSIEVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"

    # Used when no project config file is found
    config_file: str | None = None

    # Codec name forced on every linted file; bypasses BOM detection
    file_encoding: str | None = None
