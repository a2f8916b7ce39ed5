"""Environment configuration management."""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from sciter_typings.errors import SciterTypingsError
from sciter_typings.typings import TYPINGS_BASE_URL

load_dotenv()

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(SciterTypingsError):
    """Raised when an environment variable holds an unusable value."""

    pass


def _is_truthy(value: str | None) -> bool:
    return (value or "").lower() in ["true", "1", "yes"]


class TypingsSettings(BaseModel):
    """Runtime settings, read from SCITER_TYPINGS_* environment variables."""

    base_url: str = Field(TYPINGS_BASE_URL, description="Remote folder holding the .d.ts files")
    timeout: float = Field(15.0, description="HTTP timeout in seconds")
    state_file: Path = Field(
        default_factory=lambda: Path.home() / ".sciter_typings" / "state.json",
        description="Durable store for freshness tokens",
    )
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    debug: bool = Field(False, description="Also log to a file")
    log_file: Path = Field(Path("sciter_typings.log"), description="Log file used in debug mode")

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than 0")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid log level: {value}. Using INFO.")
            return "INFO"
        return level

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "TypingsSettings":
        """Build settings from the environment.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            TypingsSettings: Validated settings

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        data: dict = {}
        if env.get("SCITER_TYPINGS_BASE_URL"):
            data["base_url"] = env["SCITER_TYPINGS_BASE_URL"]
        if env.get("SCITER_TYPINGS_TIMEOUT"):
            data["timeout"] = env["SCITER_TYPINGS_TIMEOUT"]
        if env.get("SCITER_TYPINGS_STATE_FILE"):
            data["state_file"] = Path(env["SCITER_TYPINGS_STATE_FILE"]).expanduser()
        if env.get("SCITER_TYPINGS_LOG_LEVEL"):
            data["log_level"] = env["SCITER_TYPINGS_LOG_LEVEL"]
        if env.get("SCITER_TYPINGS_LOG_FILE"):
            data["log_file"] = Path(env["SCITER_TYPINGS_LOG_FILE"])
        data["debug"] = _is_truthy(env.get("SCITER_TYPINGS_DEBUG"))

        try:
            return cls(**data)
        except ValidationError as error:
            raise ConfigurationError(f"Invalid sciter-typings configuration: {error}") from error


_settings: TypingsSettings | None = None


def get_settings() -> TypingsSettings:
    """Get the singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = TypingsSettings.from_env()
    return _settings
