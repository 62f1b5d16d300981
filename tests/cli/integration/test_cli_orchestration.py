"""CLI orchestration integration tests."""

from __future__ import annotations

from pathlib import Path

from browser_e2e_harness.cli import cli
from click.testing import CliRunner

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
_CURRENT = "exec_20240305_140709_a1b2c3d4_2"
_STALE = "exec_20240305_120000_deadbeef_1"


def _populate(directory: Path) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in (
        f"step_01_Inventory_Flow_01_login_page_{_STALE}.png",
        f"step_01_Inventory_Flow_01_login_page_{_CURRENT}.png",
        f"step_02_FAILURE_Inventory_Flow_02_credentials_entered_{_CURRENT}.png",
    ):
        (directory / name).write_bytes(PNG_BYTES)


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "e2e-harness.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0
    assert output_path.exists()
    assert str(output_path.resolve()) in result.output


def test_report_command_renders_without_pruning(tmp_path: Path) -> None:
    runner = CliRunner()
    shots = tmp_path / "shots"
    _populate(shots)
    report_path = tmp_path / "out" / "report.html"

    result = runner.invoke(
        cli,
        [
            "report",
            "--screenshot-dir",
            str(shots),
            "--report-path",
            str(report_path),
            "--title",
            "Nightly",
        ],
    )

    assert result.exit_code == 0, result.output
    assert len(list(shots.glob("*.png"))) == 3
    document = report_path.read_text(encoding="utf-8")
    assert "<h1>Nightly</h1>" in document
    assert "E-commerce Inventory Flow Test" in document


def test_report_command_with_execution_id_keeps_only_that_run(tmp_path: Path) -> None:
    runner = CliRunner()
    shots = tmp_path / "shots"
    _populate(shots)
    report_path = tmp_path / "report.html"

    result = runner.invoke(
        cli,
        [
            "report",
            "--screenshot-dir",
            str(shots),
            "--report-path",
            str(report_path),
            "--execution-id",
            _CURRENT,
        ],
    )

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in shots.glob("*.png")) == [
        f"step_01_Inventory_Flow_01_login_page_{_CURRENT}.png",
        f"step_02_FAILURE_Inventory_Flow_02_credentials_entered_{_CURRENT}.png",
    ]
    assert "SOME TESTS FAILED" in report_path.read_text(encoding="utf-8")


def test_report_command_reads_configuration(tmp_path: Path) -> None:
    runner = CliRunner()
    _populate(tmp_path / "artifacts")
    config_path = tmp_path / "e2e.yaml"
    config_path.write_text(
        "screenshots:\n  directory: artifacts\nreport:\n  directory: html\n  filename: run.html\n",
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["report", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "html" / "run.html").exists()


def test_prune_command_reports_deleted_count(tmp_path: Path) -> None:
    runner = CliRunner()
    _populate(tmp_path)

    result = runner.invoke(
        cli, ["prune", "--screenshot-dir", str(tmp_path), "--execution-id", _CURRENT]
    )

    assert result.exit_code == 0
    assert result.output.strip() == "1"
    assert len(list(tmp_path.glob("*.png"))) == 2


def test_list_runs_command_counts_artifacts_per_execution(tmp_path: Path) -> None:
    runner = CliRunner()
    _populate(tmp_path)

    result = runner.invoke(cli, ["list-runs", "--screenshot-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert result.output.splitlines() == [f"{_STALE}\t1", f"{_CURRENT}\t2"]


def test_list_runs_command_fails_for_missing_directory(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["list-runs", "--screenshot-dir", str(tmp_path / "absent")])

    assert result.exit_code != 0
