# config/settings.py
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List, Dict, Any
from enum import Enum
from dotenv import load_dotenv

from cloudinventory.core.exceptions import ConfigurationException

# Load .env file explicitly
load_dotenv()


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class AdvisorSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GEMINI_")

    api_key: Optional[str] = Field(None, description="API key for the generative text service")
    model: str = Field("gemini-3-flash-preview", description="Model used for inventory analysis")
    base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the generateContent API"
    )
    timeout_seconds: float = Field(30.0, description="Request timeout in seconds")
    retry_attempts: int = Field(3, description="Number of attempts on transport errors")


class SyncSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SYNC_")

    auto_sync_enabled: bool = Field(False, description="Refresh the inventory on a timer")
    interval_minutes: float = Field(15, gt=0, description="Auto-sync interval in minutes")
    simulated_latency_seconds: float = Field(1.5, ge=0, description="Simulated snapshot fetch latency")
    account_label: str = Field("Production", description="Account label passed to snapshot fetches")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(Environment.DEVELOPMENT, description="Environment")
    debug: bool = Field(False, description="Debug mode")
    log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
    log_format: str = Field("text", description="Log format (json or text)")

    advisor: AdvisorSettings = Field(default_factory=lambda: AdvisorSettings())
    sync: SyncSettings = Field(default_factory=lambda: SyncSettings())

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @classmethod
    def create_from_env(cls) -> "Settings":
        """Create settings instance from environment variables."""
        try:
            return cls()
        except ValidationError as e:
            raise ConfigurationException(
                "Invalid configuration",
                {"errors": [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()]}
            ) from e


def validate_environment(settings: Settings) -> Dict[str, Any]:
    """Report configuration gaps that disable optional features."""
    warnings: List[str] = []

    if not settings.advisor.api_key:
        warnings.append("Gemini API key not found. AI Advisor features will be disabled.")

    return {
        "has_advisor_key": bool(settings.advisor.api_key),
        "warnings": warnings,
    }
