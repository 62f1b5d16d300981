"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from browser_e2e_harness.configuration import load_configuration
from browser_e2e_harness.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)


def test_build_placeholder_configuration_contains_all_supported_sections() -> None:
    scaffold = build_placeholder_configuration()

    assert "Harness configuration" in scaffold
    assert "screenshots:" in scaffold
    assert "report:" in scaffold
    assert "browser:" in scaffold
    assert "# scenarios:" in scaffold
    assert "failure-only" in scaffold


def test_write_placeholder_configuration_writes_loadable_file(tmp_path: Path) -> None:
    output_path = tmp_path / "nested" / "e2e-harness.yaml"

    written_path = write_placeholder_configuration(output_path)

    assert written_path == output_path.resolve()
    configuration = load_configuration(written_path)
    assert configuration.browser.name == "chrome"


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "e2e-harness.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(output_path)

    assert output_path.read_text(encoding="utf-8") == "existing"
