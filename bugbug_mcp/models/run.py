"""Models for BugBug test runs and suite runs."""

from collections.abc import Sequence
from datetime import datetime
from typing import Literal

from pydantic import Field

from bugbug_mcp.models.base import Model

type RunKind = Literal["test", "suite"]

type RunStatus = Literal[
    "queued",
    "initializing",
    "running",
    "passed",
    "failed",
    "stopped",
]

type TriggerSource = Literal["user", "api", "scheduler", "github", "cli"]

TERMINAL_STATUSES: frozenset[RunStatus] = frozenset(["passed", "failed", "stopped"])

# Step and sub-test statuses are free-form strings on the API side.
FAILURE_STATUSES: frozenset[str] = frozenset(["failed", "error"])


def is_terminal(status: RunStatus) -> bool:
    """Return whether a run in this status will never transition again."""
    return status in TERMINAL_STATUSES


def is_failure(status: str | None) -> bool:
    """Return whether a run, step or sub-test status means failure."""
    return status is not None and status.lower() in FAILURE_STATUSES


class RunStatusResponse(Model):
    """Response from the run status endpoint."""

    id: str
    status: RunStatus
    modified: datetime | None = None
    webapp_url: str | None = None
    progress: float | None = None
    current_step: str | None = None
    error_code: str | None = None
    error_message: str | None = None


class Screenshot(Model):
    """A screenshot captured during a step."""

    id: str
    url: str
    timestamp: datetime | None = None
    description: str | None = None


class StepDetail(Model):
    """Result of a single step, or of a single test inside a suite run."""

    id: str
    step_id: str | None = None
    name: str | None = None
    status: str
    duration: str | None = None
    error_code: str | None = None
    screenshots: Sequence[Screenshot] = Field(default_factory=tuple)


class Variable(Model):
    """A run variable override sent to the API."""

    key: str
    value: str


class VariableInput(Model):
    """A run variable override as supplied by a caller; value may be absent."""

    key: str
    value: str | None = None


class RunDetail(Model):
    """Full record of a test run or suite run."""

    id: str
    name: str | None = None
    status: RunStatus
    started: datetime | None = None
    finished: datetime | None = None
    queued: datetime | None = None
    modified: datetime | None = None
    duration: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    sequence: str | int | None = None
    profile_name: str | None = None
    triggered_by: str | None = None
    webapp_url: str | None = None
    test_id: str | None = None
    suite_id: str | None = None
    variables: Sequence[Variable] = Field(default_factory=tuple)
    details: Sequence[StepDetail] = Field(default_factory=tuple)
    steps_runs: Sequence[StepDetail] = Field(default_factory=tuple)
    test_runs: Sequence[StepDetail] = Field(default_factory=tuple)
    screenshots: Sequence[str] = Field(default_factory=tuple)


class StepScreenshots(Model):
    """Screenshots of one step."""

    id: str
    step_id: str | None = None
    name: str | None = None
    status: str | None = None
    screenshot_url: str | None = None
    screenshots: Sequence[Screenshot] = Field(default_factory=tuple)

    @property
    def urls(self) -> Sequence[str]:
        """All screenshot URLs of the step, in order."""
        urls = [screenshot.url for screenshot in self.screenshots]
        if self.screenshot_url and self.screenshot_url not in urls:
            urls.insert(0, self.screenshot_url)
        return urls


class TestScreenshots(Model):
    """Screenshots of one test inside a suite run."""

    __test__ = False

    id: str
    name: str | None = None
    status: str | None = None
    steps_runs: Sequence[StepScreenshots] = Field(default_factory=tuple)


class ScreenshotsResponse(Model):
    """Response from the run screenshots endpoint.

    Test runs fill ``steps_runs``; suite runs fill ``tests_runs``.
    """

    id: str
    steps_runs: Sequence[StepScreenshots] = Field(default_factory=tuple)
    tests_runs: Sequence[TestScreenshots] = Field(default_factory=tuple)
