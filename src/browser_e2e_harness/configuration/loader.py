"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from browser_e2e_harness.artifact_storage import DEFAULT_CAPTURE_POLICY, parse_capture_policy
from browser_e2e_harness.report_building import (
    DEFAULT_REPORT_TITLE,
    DEFAULT_SCENARIOS,
    REPORT_FILENAME,
    ScenarioDefinition,
)

from .runtime_settings import BrowserSettings, Configuration, ReportSettings, ScreenshotSettings

DEFAULT_SCREENSHOT_DIRECTORY = Path("target/screenshots")
DEFAULT_REPORT_DIRECTORY = Path("target/reports")
DEFAULT_BROWSER = "chrome"
SUPPORTED_BROWSER_NAMES = ("chrome", "firefox", "edge")


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file.

    Missing sections fall back to defaults; relative directories are
    resolved against the directory holding the configuration file.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    return _build_configuration(parsed, path=path, base_path=path.parent.resolve())


def default_configuration(base_path: Path | str | None = None) -> Configuration:
    """Configuration used when no file is given; directories relative to ``base_path``."""
    base = Path(base_path) if base_path is not None else Path.cwd()
    return _build_configuration({}, path=None, base_path=base.resolve())


def _build_configuration(
    parsed: Mapping[str, Any], *, path: Path | None, base_path: Path
) -> Configuration:
    return Configuration(
        path=path,
        screenshots=_parse_screenshots_section(parsed.get("screenshots"), base_path),
        report=_parse_report_section(parsed.get("report"), base_path),
        browser=_parse_browser_section(parsed.get("browser")),
    )


def _parse_screenshots_section(value: Any, base_path: Path) -> ScreenshotSettings:
    section = _optional_mapping(value, "screenshots")
    raw_mode = section.get("mode", DEFAULT_CAPTURE_POLICY.value)
    mode_name = _require_non_empty_string(raw_mode, "screenshots.mode")
    try:
        mode = parse_capture_policy(mode_name)
    except ValueError as exc:
        raise ConfigurationError(f"screenshots.mode: {exc}") from exc
    directory = _require_non_empty_string(
        section.get("directory", str(DEFAULT_SCREENSHOT_DIRECTORY)), "screenshots.directory"
    )
    return ScreenshotSettings(
        mode=mode,
        directory=_resolve_path(base_path, directory),
        manifest=_require_bool(section.get("manifest", True), "screenshots.manifest"),
    )


def _parse_report_section(value: Any, base_path: Path) -> ReportSettings:
    section = _optional_mapping(value, "report")
    directory = _require_non_empty_string(
        section.get("directory", str(DEFAULT_REPORT_DIRECTORY)), "report.directory"
    )
    filename = _require_non_empty_string(
        section.get("filename", REPORT_FILENAME), "report.filename"
    )
    if Path(filename).name != filename:
        raise ConfigurationError("report.filename must be a file name, not a path.")
    title = _require_non_empty_string(section.get("title", DEFAULT_REPORT_TITLE), "report.title")
    scenarios = DEFAULT_SCENARIOS
    if section.get("scenarios") is not None:
        scenarios = _parse_scenarios(section["scenarios"])
    return ReportSettings(
        directory=_resolve_path(base_path, directory),
        filename=filename,
        title=title,
        scenarios=scenarios,
    )


def _parse_scenarios(value: Any) -> tuple[ScenarioDefinition, ...]:
    if not isinstance(value, list) or not value:
        raise ConfigurationError("report.scenarios must be a non-empty list.")
    scenarios = []
    for index, entry in enumerate(value):
        label = f"report.scenarios[{index}]"
        item = _require_mapping(entry, label)
        marker = _require_non_empty_string(item.get("marker"), f"{label}.marker")
        title = _require_non_empty_string(item.get("title"), f"{label}.title")
        default_description = _optional_string(
            item.get("default_description"), f"{label}.default_description"
        )
        steps = item.get("steps") or {}
        if not isinstance(steps, Mapping):
            raise ConfigurationError(f"{label}.steps must be a mapping.")
        step_descriptions = {
            _require_non_empty_string(str(key), f"{label}.steps key"): _require_non_empty_string(
                description, f"{label}.steps.{key}"
            )
            for key, description in steps.items()
        }
        scenarios.append(
            ScenarioDefinition(
                marker=marker,
                title=title,
                step_descriptions=step_descriptions,
                default_description=default_description,
            )
        )
    return tuple(scenarios)


def _parse_browser_section(value: Any) -> BrowserSettings:
    section = _optional_mapping(value, "browser")
    name = _require_non_empty_string(section.get("name", DEFAULT_BROWSER), "browser.name").lower()
    if name not in SUPPORTED_BROWSER_NAMES:
        allowed = ", ".join(SUPPORTED_BROWSER_NAMES)
        raise ConfigurationError(
            f"browser.name '{name}' is not supported. Expected one of: {allowed}."
        )
    return BrowserSettings(
        name=name,
        headless=_require_bool(section.get("headless", False), "browser.headless"),
        implicit_wait_seconds=_require_non_negative_int(
            section.get("implicit_wait_seconds", 5), "browser.implicit_wait_seconds"
        ),
        explicit_wait_seconds=_require_positive_int(
            section.get("explicit_wait_seconds", 10), "browser.explicit_wait_seconds"
        ),
    )


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    return _require_mapping(value, section_name)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value


def _require_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return value
