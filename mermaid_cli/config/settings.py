"""
Application Settings
===================

Renderer settings and environment configuration using Pydantic Settings.
Every value can be overridden with a ``MERMAID_CLI_`` prefixed environment
variable or a ``.env`` file in the working directory.
"""

from typing import Optional, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
from pathlib import Path


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Asset Server Configuration
    server_host: str = Field(default="127.0.0.1", description="Asset server bind address")
    assets_dir: Optional[Path] = Field(
        default=None, description="Directory overriding the packaged default assets"
    )

    # Rendering Configuration
    default_width: int = Field(default=1960, description="Default render width")
    default_height: int = Field(default=2160, description="Default render height")
    render_timeout_ms: int = Field(
        default=30000, description="Timeout for navigation and element waits in milliseconds"
    )
    poll_interval_ms: int = Field(
        default=100, description="Polling interval for element waits in milliseconds"
    )

    # Browser Configuration
    browser_headless: bool = Field(default=True, description="Run browser in headless mode")
    browser_executable_path: Optional[Path] = Field(
        default=None, description="Chromium executable to use instead of the Playwright build"
    )
    browser_args: List[str] = Field(
        default=[
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
        ],
        description="Extra Chromium command line switches",
    )

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="console", description="Log format: console or json")
    log_file: Optional[Path] = Field(default=None, description="Optional rotating log file")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = {"console", "json"}
        if v.lower() not in allowed:
            raise ValueError(f"Log format must be one of: {allowed}")
        return v.lower()

    @field_validator(
        "default_width", "default_height", "render_timeout_ms", "poll_interval_ms"
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Reject zero and negative sizes and durations."""
        if v <= 0:
            raise ValueError("Value must be a positive integer")
        return v

    @field_validator("browser_args", mode="before")
    @classmethod
    def parse_browser_args(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse browser switches from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string: ["--a", "--b"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "--a,--b"
            return [arg.strip() for arg in v.split(",") if arg.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="MERMAID_CLI_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
