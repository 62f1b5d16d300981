"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "e2e-harness.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Harness configuration for browser-e2e-harness.
# Every key is optional; the values below are the defaults.
# Relative directories are resolved against the folder holding this file.

screenshots:
  # "failure-only" keeps screenshots from the first failure of a test onwards.
  # "all" keeps a screenshot for every step.
  mode: failure-only
  directory: target/screenshots
  # Sidecar artifact-manifest.jsonl with step names and failure context.
  manifest: true

report:
  directory: target/reports
  filename: test-report-with-screenshots.html
  title: Selenium Test Execution Report
  # Replaces the built-in scenario catalog when present.
  # scenarios:
  #   - marker: Checkout_Flow
  #     title: Checkout Flow Test
  #     default_description: "Checkout step '{step}' executed successfully."
  #     steps:
  #       "01 cart page": "Cart page loaded with the selected items."

browser:
  # chrome | firefox | edge
  name: chrome
  headless: false
  implicit_wait_seconds: 5
  explicit_wait_seconds: 10
"""


def build_placeholder_configuration() -> str:
    """Build a YAML harness configuration with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the harness configuration scaffold to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
