"""Configuration for barkbridge.

Pydantic-based settings, overridable from the environment or a ``.env`` file.

Environment Variables:
- BARKBRIDGE_BARK_ADDRESS: Base address of the ledger service REST API
- BARKBRIDGE_BARK_TIMEOUT_SECONDS: HTTP timeout (default: httpx default)
- BARKBRIDGE_LOG_LEVEL: Logging level (default: INFO)
- BARKBRIDGE_JSON_LOGS: Emit JSON logs (default: false)
- BARKBRIDGE_DEV_MODE: Console-friendly logs (default: true)
"""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from barkbridge.exceptions import ConfigurationError


class Settings(BaseSettings):
    """barkbridge settings.

    Example:
        >>> os.environ["BARKBRIDGE_BARK_ADDRESS"] = "http://bark.local:3000/"
        >>> Settings().bark_address
        'http://bark.local:3000'
    """

    model_config = SettingsConfigDict(
        env_prefix="BARKBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ledger service
    bark_address: str = Field(
        default="http://127.0.0.1:3000",
        description="Base address of the ledger service REST API",
    )

    bark_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="HTTP timeout in seconds (unset keeps the httpx default)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Emit JSON logs")
    dev_mode: bool = Field(default=True, description="Development-friendly console logs")

    @field_validator("bark_address")
    @classmethod
    def _normalize_address(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("bark_address must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


_settings: Settings | None = None


def _load() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        first = e.errors()[0]
        raise ConfigurationError(
            f"Invalid barkbridge configuration: {first['msg']}",
            setting=".".join(str(part) for part in first["loc"]),
            original_error=e,
        ) from e


def get_settings() -> Settings:
    """Get the process-wide settings instance.

    Raises:
        ConfigurationError: If the environment holds an invalid value
    """
    global _settings

    if _settings is None:
        _settings = _load()

    return _settings


def reload_settings() -> Settings:
    """Re-read settings from the environment."""
    global _settings

    _settings = _load()
    return _settings
