"""Payload helpers for BugBug API responses in tests."""

from collections.abc import Sequence
from typing import Any

TEST_ID = "5b1f0f9c-1f7e-4d2a-9a53-7c4a9d1e2b10"
SUITE_ID = "8c2d1e0a-3b4f-4c5d-8e6f-9a0b1c2d3e4f"
RUN_ID = "0f8e7d6c-5b4a-4392-8170-6f5e4d3c2b1a"


def run_status(
    *,
    run_id: str = RUN_ID,
    status: str = "running",
    modified: str = "2099-01-01T12:00:00Z",
    webapp_url: str | None = None,
) -> dict[str, Any]:
    """Create a run status payload.

    This is the response from GET testruns/:id/status/ and suiteruns/:id/status/.
    """
    return {
        "id": run_id,
        "status": status,
        "modified": modified,
        "webappUrl": webapp_url or f"https://app.bugbug.io/runs/{run_id}/",
    }


def screenshot(
    *,
    screenshot_id: str = "shot-1",
    url: str = "https://storage.bugbug.io/screenshots/shot-1.png",
) -> dict[str, Any]:
    return {
        "id": screenshot_id,
        "url": url,
        "timestamp": "2099-01-01T12:00:30Z",
        "description": None,
    }


def step(
    *,
    step_id: str = "step-1",
    name: str | None = "Click login button",
    status: str = "passed",
    duration: str = "00:00:01.200",
    error_code: str | None = None,
    screenshots: Sequence[dict[str, Any]] = (),
) -> dict[str, Any]:
    """Create a step run (or suite sub-test run) payload."""
    return {
        "id": f"{step_id}-run",
        "stepId": step_id,
        "name": name,
        "status": status,
        "duration": duration,
        "errorCode": error_code,
        "screenshots": list(screenshots),
    }


def run_detail(
    *,
    run_id: str = RUN_ID,
    name: str = "Login flow",
    status: str = "passed",
    error_code: str | None = None,
    error_message: str | None = None,
    steps_runs: Sequence[dict[str, Any]] = (),
    test_runs: Sequence[dict[str, Any]] = (),
    details: Sequence[dict[str, Any]] = (),
    screenshots: Sequence[str] = (),
    variables: Sequence[dict[str, Any]] = (),
) -> dict[str, Any]:
    """Create a run detail payload.

    This is the response from GET testruns/:id/ and suiteruns/:id/.
    """
    return {
        "id": run_id,
        "name": name,
        "status": status,
        "started": "2099-01-01T12:00:00Z",
        "finished": "2099-01-01T12:01:00Z",
        "queued": "2099-01-01T11:59:58Z",
        "modified": "2099-01-01T12:01:00Z",
        "duration": "00:01:00",
        "errorCode": error_code,
        "errorMessage": error_message,
        "sequence": 42,
        "profileName": "Default",
        "triggeredBy": "api",
        "webappUrl": f"https://app.bugbug.io/runs/{run_id}/",
        "variables": list(variables),
        "details": list(details),
        "stepsRuns": list(steps_runs),
        "testRuns": list(test_runs),
        "screenshots": list(screenshots),
    }


def descriptor(
    *,
    descriptor_id: str = TEST_ID,
    name: str = "Login flow",
    is_active: bool = True,
    tests_count: int | None = None,
) -> dict[str, Any]:
    """Create a test or suite payload."""
    return {
        "id": descriptor_id,
        "name": name,
        "isActive": is_active,
        "isRecording": False,
        "lastResult": "passed",
        "testsCount": tests_count,
        "created": "2099-01-01T10:00:00Z",
        "modified": "2099-01-01T11:00:00Z",
        "webappUrl": f"https://app.bugbug.io/tests/{descriptor_id}/",
    }


def profile(
    *,
    profile_id: str = "profile-1",
    name: str = "Default",
    is_default: bool = True,
) -> dict[str, Any]:
    return {"id": profile_id, "name": name, "isDefault": is_default}


def page(
    results: Sequence[dict[str, Any]],
    *,
    count: int | None = None,
    page_number: int = 1,
) -> dict[str, Any]:
    """Wrap results in a paginated list payload."""
    return {
        "count": len(results) if count is None else count,
        "next": None,
        "previous": None,
        "page": page_number,
        "results": list(results),
    }
