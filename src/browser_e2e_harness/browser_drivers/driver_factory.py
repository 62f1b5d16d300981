"""Selenium WebDriver construction for the configured browser."""

from __future__ import annotations

import logging
from typing import Any

from selenium import webdriver
from selenium.common.exceptions import NoAlertPresentException, WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from browser_e2e_harness.configuration import SUPPORTED_BROWSER_NAMES, BrowserSettings

_LOGGER = logging.getLogger(__name__)

SUPPORTED_BROWSERS = SUPPORTED_BROWSER_NAMES

_CHROMIUM_ARGUMENTS = (
    "--disable-popup-blocking",
    "--disable-notifications",
    "--disable-extensions",
    "--disable-password-manager",
    "--disable-save-password-bubble",
    "--disable-autofill-keyboard-accessory-view",
    "--disable-features=TranslateUI",
    "--disable-client-side-phishing-detection",
    "--disable-sync",
    "--no-first-run",
    "--no-default-browser-check",
)
_CHROME_ONLY_ARGUMENTS = (
    "--disable-infobars",
    "--remote-allow-origins=*",
    "--disable-ipc-flooding-protection",
    "--disable-background-timer-throttling",
    "--disable-renderer-backgrounding",
    "--disable-backgrounding-occluded-windows",
    "--disable-default-apps",
)
_CHROMIUM_PREFERENCES: dict[str, Any] = {
    "credentials_enable_service": False,
    "password_manager_enabled": False,
    "profile.password_manager_enabled": False,
    "profile.default_content_setting_values.notifications": 2,
}
_FIREFOX_PREFERENCES: dict[str, Any] = {
    "dom.disable_beforeunload": True,
    "dom.popup_maximum": 0,
    "dom.disable_open_during_load": False,
    "signon.rememberSignons": False,
    "signon.autofillForms": False,
    "signon.generation.enabled": False,
    "signon.management.page.breach-alerts.enabled": False,
    "privacy.trackingprotection.enabled": False,
    "browser.safebrowsing.enabled": False,
    "browser.safebrowsing.malware.enabled": False,
    "browser.safebrowsing.phishing.enabled": False,
}


class BrowserDriverError(Exception):
    """Raised when a browser driver cannot be created."""


def build_chrome_options(headless: bool) -> webdriver.ChromeOptions:
    options = webdriver.ChromeOptions()
    _apply_chromium_options(options, headless, _CHROMIUM_ARGUMENTS + _CHROME_ONLY_ARGUMENTS)
    return options


def build_edge_options(headless: bool) -> webdriver.EdgeOptions:
    options = webdriver.EdgeOptions()
    _apply_chromium_options(options, headless, _CHROMIUM_ARGUMENTS)
    return options


def build_firefox_options(headless: bool) -> webdriver.FirefoxOptions:
    options = webdriver.FirefoxOptions()
    if headless:
        options.add_argument("-headless")
    for name, value in _FIREFOX_PREFERENCES.items():
        options.set_preference(name, value)
    return options


def create_webdriver(settings: BrowserSettings) -> WebDriver:
    """Start the configured browser with popup and password-manager prompts disabled.

    Raises:
      BrowserDriverError: If the browser is unsupported or fails to start.
    """
    name = settings.name.lower()
    _LOGGER.info("Starting %s WebDriver (headless=%s)", name, settings.headless)
    driver: WebDriver
    try:
        if name == "chrome":
            driver = webdriver.Chrome(options=build_chrome_options(settings.headless))
        elif name == "firefox":
            driver = webdriver.Firefox(options=build_firefox_options(settings.headless))
        elif name == "edge":
            driver = webdriver.Edge(options=build_edge_options(settings.headless))
        else:
            allowed = ", ".join(SUPPORTED_BROWSERS)
            raise BrowserDriverError(
                f"Unsupported browser '{settings.name}'. Expected one of: {allowed}."
            )
    except WebDriverException as exc:
        raise BrowserDriverError(f"Failed to start {name} WebDriver: {exc.msg}") from exc

    driver.implicitly_wait(settings.implicit_wait_seconds)
    try:
        driver.maximize_window()
    except WebDriverException:
        _LOGGER.debug("Window maximisation not supported by %s", name, exc_info=True)
    return driver


def dismiss_open_alert(driver: WebDriver) -> bool:
    """Dismiss a pending JavaScript alert; returns whether one was open."""
    try:
        alert = driver.switch_to.alert
        alert.dismiss()
    except NoAlertPresentException:
        return False
    _LOGGER.info("Dismissed open browser alert")
    return True


def _apply_chromium_options(
    options: webdriver.ChromeOptions | webdriver.EdgeOptions,
    headless: bool,
    arguments: tuple[str, ...],
) -> None:
    if headless:
        options.add_argument("--headless=new")
    for argument in arguments:
        options.add_argument(argument)
    options.add_experimental_option("prefs", dict(_CHROMIUM_PREFERENCES))
