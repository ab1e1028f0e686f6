"""
Configuration Management for Mi Billetera

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, biometric prompt wording and display defaults are
validated once at startup instead of being scattered across screens.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local ledger storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Storage medium: 'file' persists to disk, 'memory' is ephemeral"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per storage key"
    )
    storage_key: str = Field(
        default="@expenses_data",
        min_length=1,
        description="Namespaced key the expense collection is stored under"
    )

    @field_validator('data_dir', mode='before')
    @classmethod
    def expand_data_dir(cls, v) -> Path:
        """Expand ~ so users can point at their home directory."""
        return Path(v).expanduser()


class AuthSettings(BaseSettings):
    """Biometric gate configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    prompt_message: str = Field(
        default="Authenticate to open your wallet",
        description="Text shown by the biometric prompt"
    )
    cancel_label: str = Field(
        default="Cancel",
        description="Label of the prompt's cancel button"
    )
    fallback_label: str = Field(
        default="Use device passcode",
        description="Label of the device passcode fallback"
    )
    disable_device_fallback: bool = Field(
        default=False,
        description="Forbid the device passcode fallback"
    )

    # Desktop stand-in for platform hardware
    simulated_hardware: bool = Field(
        default=False,
        description="Pretend the device has biometric hardware"
    )
    simulated_enrolled: bool = Field(
        default=False,
        description="Pretend a fingerprint/face is enrolled"
    )
    simulated_approve: bool = Field(
        default=True,
        description="Whether simulated prompts succeed"
    )


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local logs"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol shown before amounts (no conversion is done)"
    )
    default_category: str = Field(
        default="Food",
        min_length=1,
        description="Category preselected in the new-expense form"
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

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the groups that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "auth", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
