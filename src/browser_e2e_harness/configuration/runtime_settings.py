"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from browser_e2e_harness.artifact_storage import CapturePolicy
from browser_e2e_harness.report_building import ScenarioDefinition


@dataclass(frozen=True)
class ScreenshotSettings:
    """Where and when screenshots are persisted."""

    mode: CapturePolicy
    directory: Path
    manifest: bool


@dataclass(frozen=True)
class ReportSettings:
    """HTML report output settings."""

    directory: Path
    filename: str
    title: str
    scenarios: tuple[ScenarioDefinition, ...]

    @property
    def path(self) -> Path:
        return self.directory / self.filename


@dataclass(frozen=True)
class BrowserSettings:
    """Browser driver selection passed through to the driver factory."""

    name: str
    headless: bool
    implicit_wait_seconds: int
    explicit_wait_seconds: int


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path | None
    screenshots: ScreenshotSettings
    report: ReportSettings
    browser: BrowserSettings
