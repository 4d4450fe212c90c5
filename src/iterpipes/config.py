"""
Runtime configuration for iterpipes.

Settings are read once from the environment and can be replaced at runtime:

- ITERPIPES_VALIDATE_ITEMS: "1" to validate items crossing constrained pipes
- ITERPIPES_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
- ITERPIPES_LOG_FORMAT: "text" or "json"
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from iterpipes.telemetry.logger import LogLevel, PipeLogger


@dataclass
class PipeConfig:
    """Configuration for pipe construction and logging.

    Attributes:
        validate_items: Default for ``Pipe.constrain(validate=None)``
        log_level: Level for iterpipes loggers
        log_format: Log output format ('text' or 'json')
    """

    validate_items: bool = False
    log_level: LogLevel = LogLevel.WARNING
    log_format: str = "text"

    @classmethod
    def default(cls) -> PipeConfig:
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls) -> PipeConfig:
        """Create configuration from environment variables."""
        validate_items = os.getenv("ITERPIPES_VALIDATE_ITEMS", "0").lower() in (
            "1",
            "true",
            "yes",
        )
        level_name = os.getenv("ITERPIPES_LOG_LEVEL", LogLevel.WARNING.value).upper()
        try:
            log_level = LogLevel(level_name)
        except ValueError:
            log_level = LogLevel.WARNING
        log_format = os.getenv("ITERPIPES_LOG_FORMAT", "text").lower()
        if log_format not in ("text", "json"):
            log_format = "text"

        return cls(
            validate_items=validate_items,
            log_level=log_level,
            log_format=log_format,
        )

    def apply_logging(self) -> None:
        """Install this configuration's level and format on all loggers."""
        PipeLogger.configure(level=self.log_level, format=self.log_format)


_config: PipeConfig | None = None


def get_config() -> PipeConfig:
    """Get the active configuration, loading it from the environment once.

    The first load also installs the configured log level and format.
    """
    global _config
    if _config is None:
        _config = PipeConfig.from_env()
        _config.apply_logging()
    return _config


def set_config(config: PipeConfig, *, apply_logging: bool = True) -> None:
    """Replace the active configuration.

    Args:
        config: New configuration
        apply_logging: Whether to reconfigure loggers immediately
    """
    global _config
    _config = config
    if apply_logging:
        config.apply_logging()


def reset_config() -> None:
    """Forget the active configuration so the next read hits the environment."""
    global _config
    _config = None
