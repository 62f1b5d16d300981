"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import (
    SUPPORTED_BROWSER_NAMES,
    ConfigurationError,
    default_configuration,
    load_configuration,
)
from .runtime_settings import BrowserSettings, Configuration, ReportSettings, ScreenshotSettings

__all__ = [
    "BrowserSettings",
    "Configuration",
    "ReportSettings",
    "ScreenshotSettings",
    "SUPPORTED_BROWSER_NAMES",
    "ConfigurationError",
    "default_configuration",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
