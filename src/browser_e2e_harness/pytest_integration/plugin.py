"""pytest plugin binding test lifecycle, failures and the final report.

Enable with ``-p browser_e2e_harness.pytest_integration.plugin`` or by
listing the module in ``pytest_plugins``. Tests request ``e2e_steps`` to get
a step runner bound to the current test; override ``e2e_screenshot_source``
to capture from something other than the configured browser.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Generator, Iterator
from pathlib import Path
from typing import Any

import pytest

from browser_e2e_harness.artifact_storage import ScreenshotSource, parse_capture_policy
from browser_e2e_harness.browser_drivers import create_webdriver, dismiss_open_alert
from browser_e2e_harness.configuration import (
    Configuration,
    ConfigurationError,
    default_configuration,
    load_configuration,
)
from browser_e2e_harness.failure_coordination import StepRunner
from browser_e2e_harness.report_building import ReportOutcome
from browser_e2e_harness.run_context import HarnessContext

_LOGGER = logging.getLogger(__name__)

harness_key = pytest.StashKey[HarnessContext]()
report_outcome_key = pytest.StashKey[ReportOutcome | None]()
call_fault_key = pytest.StashKey[BaseException]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("browser-e2e-harness")
    group.addoption(
        "--e2e-config",
        action="store",
        default=None,
        metavar="PATH",
        help="Harness YAML configuration file.",
    )
    group.addoption(
        "--e2e-screenshot-mode",
        action="store",
        default=None,
        metavar="MODE",
        help="Override the screenshot mode: 'all' or 'failure-only'.",
    )


def pytest_configure(config: pytest.Config) -> None:
    configuration = _load_plugin_configuration(config)
    config.stash[harness_key] = HarnessContext.build(configuration)


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    harness = session.config.stash.get(harness_key, None)
    if harness is None or not harness.tracker.records():
        return
    _LOGGER.info("Generating report after session (exit status %s)", exitstatus)
    session.config.stash[report_outcome_key] = harness.generate_report()


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[None]
) -> Generator[None, Any, None]:
    """Keep the fault of a failed test call for the ``e2e_steps`` teardown."""
    outcome = yield
    report = outcome.get_result()
    if report.when == "call" and report.failed and call.excinfo is not None:
        item.stash[call_fault_key] = call.excinfo.value


def pytest_terminal_summary(terminalreporter: Any, exitstatus: int, config: pytest.Config) -> None:
    harness = config.stash.get(harness_key, None)
    if harness is None or not harness.tracker.records():
        return
    terminalreporter.section("browser e2e harness")
    for line in harness.tracker.execution_summary().splitlines():
        terminalreporter.write_line(line)
    outcome = config.stash.get(report_outcome_key, None)
    if outcome is not None:
        terminalreporter.write_line(f"HTML report: {outcome.report_path}")


@pytest.fixture(scope="session")
def e2e_harness(pytestconfig: pytest.Config) -> HarnessContext:
    return pytestconfig.stash[harness_key]


@pytest.fixture
def e2e_browser(e2e_harness: HarnessContext) -> Iterator[Any]:
    """WebDriver for one test, started from the browser configuration."""
    driver = create_webdriver(e2e_harness.configuration.browser)
    dismiss_open_alert(driver)
    try:
        yield driver
    finally:
        driver.quit()


@pytest.fixture
def e2e_screenshot_source(e2e_browser: Any) -> ScreenshotSource:
    return e2e_browser


@pytest.fixture
def e2e_steps(
    request: pytest.FixtureRequest,
    e2e_harness: HarnessContext,
    e2e_screenshot_source: ScreenshotSource,
) -> Iterator[StepRunner]:
    """Step runner tracking the requesting test from setup to teardown."""
    test_name = request.node.name
    runner = e2e_harness.step_runner(e2e_screenshot_source)
    e2e_harness.begin_test(test_name)
    try:
        yield runner
    finally:
        fault = request.node.stash.get(call_fault_key, None)
        if fault is not None:
            runner.handle_test_fault(_test_class_name(request), request.function.__name__, fault)
        e2e_harness.end_test(test_name)


def _test_class_name(request: pytest.FixtureRequest) -> str:
    if request.cls is not None:
        return request.cls.__name__
    return Path(str(request.node.path)).stem


def _load_plugin_configuration(config: pytest.Config) -> Configuration:
    config_path = config.getoption("--e2e-config")
    screenshot_mode = config.getoption("--e2e-screenshot-mode")
    try:
        if config_path:
            configuration = load_configuration(config_path)
        else:
            configuration = default_configuration(config.rootpath)
        if screenshot_mode:
            configuration = dataclasses.replace(
                configuration,
                screenshots=dataclasses.replace(
                    configuration.screenshots, mode=parse_capture_policy(screenshot_mode)
                ),
            )
    except (ConfigurationError, ValueError) as exc:
        raise pytest.UsageError(f"browser-e2e-harness: {exc}") from exc
    return configuration
