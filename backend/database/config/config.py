"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- `extra="ignore"`: unknown env vars are ignored (not an error).
- The four database credentials default to empty strings on purpose: they are
  checked by the pool initializer, which reports every missing variable at once
  instead of failing at import time on the first one.

Usage
-----
from backend.database.config.config import settings

# Example
db_host = settings.DB_HOST
sender = settings.EMAIL_USER

Security
--------
- Never commit secrets or the `.env` file to source control.
- Prefer runtime environment variables in production (K8s/Secrets Manager/etc.).
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONTACT_ADDRESS = "D247Online@outlook.com"
"""Mailbox used both as the default sender and as the contact destination."""


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DB_HOST: str = Field("", description="Hostname or IP address of the database server.")
    DB_USER: str = Field("", description="Database username credential.")
    DB_PASSWORD: str = Field("", description="Database password credential.")
    DB_NAME: str = Field("", description="Name of the application’s database.")
    DB_PORT: Optional[int] = Field(None, description="Database port; the driver default is used when unset.")
    DB_DRIVER_NAME: str = Field("mysql+pymysql", description="SQLAlchemy driver name (e.g., `mysql+pymysql`).")

    # Mail
    EMAIL_USER: str = Field(DEFAULT_CONTACT_ADDRESS, description="Outbound sender address, also the SMTP login.")
    EMAIL_PASSWORD: Optional[str] = Field(None, description="SMTP password or app password for EMAIL_USER.")
    SMTP_HOST: Optional[str] = Field(None, description="SMTP host for the generic provider preset.")
    SMTP_PORT: Optional[int] = Field(None, description="SMTP port for the generic provider preset.")
    CONTACT_RECIPIENT: str = Field(DEFAULT_CONTACT_ADDRESS, description="Mailbox receiving contact form submissions.")

    # HTTP server
    FRONTEND_URL: str = Field("*", description="Allowed CORS origin of the frontend client application.")
    HOST: str = Field("0.0.0.0", description="Interface the API server binds to.")
    PORT: int = Field(5000, description="Port the API server listens on.")
    INIT_MODE: str = Field("runtime", description="Initialization mode; 'runtime' runs the database startup gate.")

    @field_validator("EMAIL_USER", mode="before")
    @classmethod
    def _default_blank_sender(cls, value):
        # An empty EMAIL_USER behaves like an unset one.
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CONTACT_ADDRESS
        return value

    @field_validator("SMTP_HOST", "EMAIL_PASSWORD", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("SMTP_PORT", "DB_PORT", mode="before")
    @classmethod
    def _lenient_port(cls, value):
        """Unparseable ports count as unset so the preset default applies."""
        if value is None or isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return None


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings object."""
    return settings
