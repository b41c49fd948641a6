"""
Configuration Management for RAM

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, collection keys and the authentication policy
are all visible in one place and validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value settings storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RAM_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    path: Path = Field(
        default=Path.home() / ".ram" / "settings.json",
        description="Path of the JSON settings file holding both collections"
    )

    # Collection keys within the settings file
    debts_key: str = Field(
        default="debts",
        min_length=1,
        description="Key under which the debts collection is stored"
    )
    credentials_key: str = Field(
        default="passwords",
        min_length=1,
        description="Key under which the credentials collection is stored"
    )

    @field_validator('path')
    @classmethod
    def expand_user(cls, v: Path) -> Path:
        """Allow '~' in configured paths."""
        return v.expanduser()


class AuthSettings(BaseSettings):
    """Authentication gate configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RAM_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    reason: str = Field(
        default="Authenticate to access passwords.",
        min_length=1,
        description="Justification shown to the user when authentication is requested"
    )
    # Hex SHA-256 digest of the device passcode. Unset means the
    # host has no passcode fallback and authentication is unavailable.
    passcode_sha256: Optional[SecretStr] = Field(
        default=None,
        description="SHA-256 hex digest of the unlock passcode"
    )
    authenticate_on_startup: bool = Field(
        default=True,
        description="Attempt authentication as soon as the app starts"
    )

    @field_validator('passcode_sha256')
    @classmethod
    def validate_digest(cls, v: Optional[SecretStr]) -> Optional[SecretStr]:
        """A digest must be 64 hex characters."""
        if v is None:
            return v
        digest = v.get_secret_value().strip().lower()
        if len(digest) != 64 or any(c not in "0123456789abcdef" for c in digest):
            raise ValueError("passcode_sha256 must be a 64 character hex SHA-256 digest")
        return SecretStr(digest)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for diagnostic output"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol used when rendering amounts"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an
    additional "<name>_error" entry for each failing section.
    """
    results = {}

    settings = get_settings()

    sections = {
        "storage": lambda: settings.storage,
        "auth": lambda: settings.auth,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
