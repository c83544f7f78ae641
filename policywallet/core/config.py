"""
Policy Wallet Configuration
Pydantic Settings for environment-based configuration
Source: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from functools import lru_cache
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class WalletSettings(BaseSettings):
    """
    Wallet settings loaded from environment variables.

    All variables are prefixed with ``WALLET_`` (e.g. ``WALLET_TZ``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="WALLET_",
    )

    # =========================================================================
    # Application
    # =========================================================================
    ENVIRONMENT: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment: development, staging, production, testing"
    )
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional log file path")
    JSON_LOGS: bool = Field(default=False, description="Emit logs as JSON lines")
    TZ: str = Field(
        default="Asia/Bangkok",
        description="Policyholder local zone used to decide what 'today' is",
    )

    # =========================================================================
    # Portfolio Rules
    # =========================================================================
    GRACE_PERIOD_DAYS: int = Field(
        default=30, ge=0, description="Days after the due date a lapsed policy stays recoverable"
    )
    RENEWAL_PREVIEW_LIMIT: int = Field(
        default=5, ge=1, description="Number of upcoming renewals shown in a summary"
    )

    # =========================================================================
    # Storage
    # =========================================================================
    STORAGE_BACKEND: Literal["memory", "redis"] = Field(
        default="memory", description="Key-value store backend"
    )
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", description="Redis URL used by the redis backend"
    )
    STORAGE_KEY_PREFIX: str = Field(default="pw_", description="Namespace prefix for keys")
    DATA_VERSION: str = Field(default="1.1.0", description="Current stored data schema version")

    # =========================================================================
    # Documents and Analysis
    # =========================================================================
    DOCUMENT_MAX_SIZE_MB: int = Field(default=10, ge=1, description="Max vault upload size (MB)")
    ANALYSIS_TIMEOUT_SECONDS: float = Field(
        default=10.0, gt=0, description="Timeout for the external analysis service"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any casing, reject unknown levels."""
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(VALID_LOG_LEVELS)}")
        return level

    @field_validator("TZ")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the zone exists in the tz database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return v

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.TZ)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.ENVIRONMENT == "production"

    @property
    def document_max_size_bytes(self) -> int:
        return self.DOCUMENT_MAX_SIZE_MB * 1024 * 1024


@lru_cache
def get_settings() -> WalletSettings:
    """
    Get cached settings instance.

    Uses lru_cache so settings are loaded once and reused.
    """
    return WalletSettings()
