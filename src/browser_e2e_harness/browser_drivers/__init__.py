"""Browser driver exports."""

from .driver_factory import (
    SUPPORTED_BROWSERS,
    BrowserDriverError,
    build_chrome_options,
    build_edge_options,
    build_firefox_options,
    create_webdriver,
    dismiss_open_alert,
)

__all__ = [
    "SUPPORTED_BROWSERS",
    "BrowserDriverError",
    "build_chrome_options",
    "build_edge_options",
    "build_firefox_options",
    "create_webdriver",
    "dismiss_open_alert",
]
