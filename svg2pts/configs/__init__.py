"""Conversion configuration loading and validation."""

from svg2pts.configs.loader import (
    ConfigError,
    ConversionConfig,
    LoggingConfig,
    load_config,
    resolve_accuracy,
)

__all__ = [
    "ConfigError",
    "ConversionConfig",
    "LoggingConfig",
    "load_config",
    "resolve_accuracy",
]
