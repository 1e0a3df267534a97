"""Engine settings.

Settings are read once from the environment and can be overridden in
code with configure(). All other modules read them through the getters.

Environment::

    SIMPLE_ERROR_EAGER_COMPILE=true|false     (default: true)
    SIMPLE_ERROR_VALIDATE_VALUES=true|false   (default: true)
    SIMPLE_ERROR_LOG_LEVEL=debug|info|warning|error|critical (default: warning)
"""

import logging
import threading

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "SIMPLE_ERROR_"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class EngineSettings(BaseSettings):
    """Runtime options for template compilation and rendering.

    Constructor arguments take priority over SIMPLE_ERROR_* variables.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, frozen=True, extra="forbid")

    # Compile descriptors at class definition; otherwise on first render
    eager_compile: bool = True
    # Check hex-rendered field values when a variant is constructed
    validate_values: bool = True
    log_level: str = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = str(value).strip().upper()
        if level == "WARN":
            level = "WARNING"
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


_settings: EngineSettings | None = None
_lock = threading.Lock()


def get_settings() -> EngineSettings:
    """Get current settings, loading from the environment on first call."""
    global _settings
    if _settings is None:
        with _lock:
            if _settings is None:
                _settings = EngineSettings()
    return _settings


def configure(**overrides) -> EngineSettings:
    """Override settings in code. Unspecified options keep their value."""
    global _settings
    with _lock:
        current = _settings or EngineSettings()
        _settings = EngineSettings(**{**current.model_dump(), **overrides})
    return _settings


def reset_settings() -> None:
    """Forget overrides; the next get_settings() re-reads the environment."""
    global _settings
    with _lock:
        _settings = None


def get_eager_compile() -> bool:
    return get_settings().eager_compile


def get_validate_values() -> bool:
    return get_settings().validate_values


def get_log_level() -> int:
    return get_settings().log_level_value
