"""Scenario markers and step descriptions used to structure the report."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

UNKNOWN_SCENARIO_TITLE = "Unknown Test Scenario"
FAILURE_STEP_DESCRIPTION = (
    "Test failure occurred at this step. Screenshot captured for debugging purposes."
)
GENERIC_STEP_DESCRIPTION = "Test step executed successfully with screenshot captured."

_WHITESPACE = re.compile(r"\s+")
_FAILURE_PREFIX = "FAILURE_"


def normalize_step_label(label: str) -> str:
    """Lower-case a label and turn underscores into single spaces."""
    return _WHITESPACE.sub(" ", label.replace("_", " ")).strip().lower()


@dataclass(frozen=True)
class ScenarioDefinition:
    """A report scenario recognised by a marker substring in artifact labels.

    ``default_description`` may contain ``{step}``, replaced by the
    normalized step label when no entry of ``step_descriptions`` matches.
    """

    marker: str
    title: str
    step_descriptions: Mapping[str, str] = field(default_factory=dict)
    default_description: str | None = None

    def matches(self, text: str) -> bool:
        return self.marker in text

    def describe(self, step_label: str) -> str:
        normalized = normalize_step_label(step_label)
        step = normalize_step_label(self.strip_marker(step_label))
        for key, description in self.step_descriptions.items():
            if normalize_step_label(key) in (step, normalized):
                return description
        if self.default_description is None:
            return GENERIC_STEP_DESCRIPTION
        return self.default_description.replace("{step}", normalized)

    def strip_marker(self, step_label: str) -> str:
        """Drop a leading ``FAILURE_`` and the scenario marker from a label."""
        label = step_label.removeprefix(_FAILURE_PREFIX)
        before, marker, after = label.partition(self.marker)
        if not marker:
            return label
        return "_".join(part for part in (before.strip("_"), after.strip("_")) if part)


DEFAULT_SCENARIOS: tuple[ScenarioDefinition, ...] = (
    ScenarioDefinition(
        marker="Inventory_Flow",
        title="E-commerce Inventory Flow Test",
        step_descriptions={
            "01 login page": (
                "Initial login page loaded successfully. "
                "User can see the login form with username and password fields."
            ),
            "02 credentials entered": (
                "Login credentials (standard_user / secret_sauce) have been entered "
                "into the form fields."
            ),
            "03 inventory page loaded": (
                "Successfully logged in and navigated to the inventory page. "
                "Product list is visible."
            ),
            "04 before add to cart click": (
                "Located the first 'Add to cart' button. Ready to add product to shopping cart."
            ),
            "05 after add to cart click": (
                "Successfully clicked 'Add to cart' button. Button text changed to 'Remove' "
                "indicating item was added."
            ),
            "06 cart badge shows 1": (
                "Shopping cart badge now displays '1', confirming the item was successfully "
                "added to cart."
            ),
            "07 product detail page": (
                "Navigated to the product detail page. Product information and details "
                "are visible."
            ),
            "08 returned to inventory": (
                "Successfully navigated back to the inventory page using browser back button."
            ),
            "09 final cart verification": (
                "Final verification: Cart badge still shows '1', confirming cart state "
                "persistence across navigation."
            ),
        },
        default_description="E-commerce flow test step executed successfully.",
    ),
    ScenarioDefinition(
        marker="testWindows",
        title="Window Handling Test",
        default_description="Window handling test step: {step}",
    ),
    ScenarioDefinition(
        marker="testAlerts",
        title="JavaScript Alerts Test",
        default_description="JavaScript alerts test step: {step}",
    ),
    ScenarioDefinition(
        marker="testFrames",
        title="iFrame Handling Test",
        default_description="iFrame handling test step: {step}",
    ),
    ScenarioDefinition(
        marker="testFormAutomation",
        title="Form Automation Test",
        default_description="Form automation test step: {step}",
    ),
    ScenarioDefinition(
        marker="testFailureOnlyScreenshots",
        title="Failure-Only Screenshot Demo",
        step_descriptions={
            "element not found": (
                "Intentionally triggered failure by looking for non-existent element. "
                "Screenshot captured."
            ),
            "after failure": (
                "Screenshot captured after failure occurred (failure-only mode active)."
            ),
        },
        default_description="Failure demonstration test step.",
    ),
    ScenarioDefinition(
        marker="FAILURE_",
        title="Test Failure Scenarios",
    ),
)


def resolve_scenario(
    candidates: Sequence[str], scenarios: Sequence[ScenarioDefinition]
) -> ScenarioDefinition | None:
    """Return the first scenario whose marker occurs in any candidate text.

    Candidates are the artifact label and, when known, the owning test name.
    Scenario order decides, so a catch-all marker placed last only applies
    when no specific scenario claims the artifact.
    """
    texts = [text for text in candidates if text]
    for scenario in scenarios:
        if any(scenario.matches(text) for text in texts):
            return scenario
    return None


def describe_step(step_label: str, scenario: ScenarioDefinition | None) -> str:
    if "failure" in step_label.lower():
        return FAILURE_STEP_DESCRIPTION
    if scenario is None:
        return GENERIC_STEP_DESCRIPTION
    return scenario.describe(step_label)
