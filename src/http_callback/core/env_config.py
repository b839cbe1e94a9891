"""
Configuration loader from environment variables and .env files.

Example .env file:
    HTTP_CALLBACK_BASE_PATH=https://httpbin.org
    HTTP_CALLBACK_BASE_HEADERS={"foo": "bar"}
    HTTP_CALLBACK_BASE_PARAMS={"key": "value"}
    HTTP_CALLBACK_TIMEOUT_READ=10
    HTTP_CALLBACK_SUCCESS_STATUS_HIGH=399
    HTTP_CALLBACK_LOG_LEVEL=DEBUG
"""

from typing import Dict, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import (
    ClientConfig,
    ExecutorConfig,
    SecurityConfig,
    StatusRange,
    TimeoutConfig,
)
from .logging.config import LoggingConfig


class ClientSettings(BaseSettings):
    """
    Validated settings read from HTTP_CALLBACK_* variables.

    Priority (highest to lowest): environment variables, .env file, defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_CALLBACK_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_path: str = Field(default="", description="Base URL for relative paths")
    base_headers: Dict[str, str] = Field(default_factory=dict)
    base_params: Dict[str, str] = Field(default_factory=dict)

    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)

    verify_ssl: bool = Field(default=True)
    allow_redirects: bool = Field(default=True)
    max_response_size: int = Field(default=100 * 1024 * 1024, gt=0)

    max_workers: int = Field(default=8, ge=1)

    success_status_low: int = Field(default=200, ge=100, le=599)
    success_status_high: int = Field(default=299, ge=100, le=599)

    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    log_format: Literal["json", "text"] = Field(default="text")
    log_file_path: Optional[str] = None

    @field_validator('success_status_high')
    @classmethod
    def validate_status_range(cls, v: int, info) -> int:
        """Validate that high >= low."""
        low = info.data.get('success_status_low', 200)
        if v < low:
            raise ValueError(f"success_status_high ({v}) must be >= success_status_low ({low})")
        return v

    def to_logging_config(self) -> Optional[LoggingConfig]:
        """Logging is enabled only when a level is set."""
        if self.log_level is None:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_file=self.log_file_path is not None,
            file_path=self.log_file_path,
        )


def load_from_env(env_file: Optional[str] = None, **overrides) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Args:
        env_file: .env file path (default: ".env" in the working directory)
        **overrides: Explicit settings values, highest priority

    Raises:
        pydantic.ValidationError: invalid values

    Example:
        >>> config = load_from_env(base_path="https://httpbin.org")
    """
    if env_file is not None:
        settings = ClientSettings(_env_file=env_file, **overrides)
    else:
        settings = ClientSettings(**overrides)

    return ClientConfig(
        base_path=settings.base_path or None,
        base_headers=settings.base_headers,
        base_params=tuple(settings.base_params.items()),
        success_status=StatusRange(settings.success_status_low, settings.success_status_high),
        timeout=TimeoutConfig(connect=settings.timeout_connect, read=settings.timeout_read),
        security=SecurityConfig(
            max_response_size=settings.max_response_size,
            verify_ssl=settings.verify_ssl,
            allow_redirects=settings.allow_redirects,
        ),
        executor=ExecutorConfig(max_workers=settings.max_workers),
        logging=settings.to_logging_config(),
    )
