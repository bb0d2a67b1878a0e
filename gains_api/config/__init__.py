"""Configuration package."""

from gains_api.config.settings import (
    ConfigurationError,
    Settings,
    settings,
    validate_startup_settings,
)

__all__ = [
    "ConfigurationError",
    "Settings",
    "settings",
    "validate_startup_settings",
]
