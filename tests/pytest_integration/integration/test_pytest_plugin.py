"""pytest plugin integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

PLUGIN = "browser_e2e_harness.pytest_integration.plugin"

_CONFTEST = """
import pytest


class FakeScreenshotSource:
    def get_screenshot_as_png(self):
        return b"\\x89PNG fake"


@pytest.fixture
def e2e_screenshot_source():
    return FakeScreenshotSource()
"""

_CONFIG = """
screenshots:
  directory: out/screenshots
report:
  directory: out/reports
"""


def _prepare(pytester: pytest.Pytester) -> Path:
    pytester.makeconftest(_CONFTEST)
    config_path = pytester.path / "e2e.yaml"
    config_path.write_text(_CONFIG, encoding="utf-8")
    return config_path


def _screenshots(pytester: pytest.Pytester) -> list[str]:
    return sorted(path.name for path in (pytester.path / "out" / "screenshots").glob("*.png"))


def test_failing_step_is_captured_and_reported(pytester: pytest.Pytester) -> None:
    config_path = _prepare(pytester)
    pytester.makepyfile(
        test_inventory="""
        def _fail():
            raise TimeoutError("login button missing")


        def test_inventory_flow(e2e_steps):
            e2e_steps.run_action("Inventory_Flow_01_login_page", "Open login", lambda: None)
            e2e_steps.capture("Inventory_Flow_01_login_page")
            e2e_steps.run_action("Inventory_Flow_02_credentials_entered", "Login", _fail)


        def test_passes(e2e_steps):
            e2e_steps.run_action("testWindows_01_open", "Open window", lambda: None)
        """
    )

    result = pytester.runpytest("-p", PLUGIN, "--e2e-config", str(config_path))

    result.assert_outcomes(passed=1, failed=1)
    shots = _screenshots(pytester)
    assert len(shots) == 1
    assert shots[0].startswith("step_01_FAILURE_Inventory_Flow_02_credentials_entered_exec_")
    result.stdout.fnmatch_lines(
        [
            "*browser e2e harness*",
            "Test Execution Summary:",
            "Total Tests: 2",
            "Failed Tests: 1",
            "*test_inventory_flow*FAILED*Step: Inventory_Flow_02_credentials_entered*",
            "HTML report: *test-report-with-screenshots.html",
        ]
    )
    report = pytester.path / "out" / "reports" / "test-report-with-screenshots.html"
    assert "E-commerce Inventory Flow Test" in report.read_text(encoding="utf-8")


def test_fault_outside_steps_is_recorded_at_teardown(pytester: pytest.Pytester) -> None:
    config_path = _prepare(pytester)
    pytester.makepyfile(
        test_checkout="""
        class TestCheckout:
            def test_total(self, e2e_steps):
                e2e_steps.run_action("01_cart", "Open cart", lambda: None)
                assert 1 + 1 == 3
        """
    )

    result = pytester.runpytest("-p", PLUGIN, "--e2e-config", str(config_path))

    result.assert_outcomes(failed=1)
    shots = _screenshots(pytester)
    assert len(shots) == 1
    assert "_FAILURE_TestCheckout_test_total_AssertionError_Failure_exec_" in shots[0]
    result.stdout.fnmatch_lines(["*Step: TestCheckout_test_total_AssertionError_Failure*"])


def test_screenshot_mode_option_overrides_configuration(pytester: pytest.Pytester) -> None:
    config_path = _prepare(pytester)
    pytester.makepyfile(
        test_forms="""
        def test_form(e2e_steps):
            e2e_steps.capture("testFormAutomation_01_fill")
            e2e_steps.capture("testFormAutomation_02_submit")
        """
    )

    result = pytester.runpytest(
        "-p", PLUGIN, "--e2e-config", str(config_path), "--e2e-screenshot-mode", "all"
    )

    result.assert_outcomes(passed=1)
    shots = _screenshots(pytester)
    assert [name[:8] for name in shots] == ["step_01_", "step_02_"]


def test_invalid_screenshot_mode_is_a_usage_error(pytester: pytest.Pytester) -> None:
    _prepare(pytester)
    pytester.makepyfile("def test_nothing():\n    pass\n")

    result = pytester.runpytest("-p", PLUGIN, "--e2e-screenshot-mode", "sometimes")

    assert result.ret == pytest.ExitCode.USAGE_ERROR
    result.stderr.fnmatch_lines(["*Unknown screenshot mode 'sometimes'*"])


def test_sessions_without_tracked_tests_write_no_report(pytester: pytest.Pytester) -> None:
    config_path = _prepare(pytester)
    pytester.makepyfile("def test_plain():\n    assert True\n")

    result = pytester.runpytest("-p", PLUGIN, "--e2e-config", str(config_path))

    result.assert_outcomes(passed=1)
    assert not (pytester.path / "out" / "reports").exists()
