"""Tests for run history tools."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.models.catalog import Page
from bugbug_mcp.models.result import ApiError
from bugbug_mcp.models.run import RunDetail
from bugbug_mcp.testing import payloads
from bugbug_mcp.tools import HistoryTools
from bugbug_mcp.tools.history import SUITE_HISTORY_UNSUPPORTED

NOW = datetime(2099, 1, 2, 12, 0, tzinfo=timezone.utc)


def runs_page(*statuses: str) -> Page[RunDetail]:
    return Page[RunDetail].model_validate(
        payloads.page(
            [
                payloads.run_detail(run_id=f"run-{index}", status=status)
                for index, status in enumerate(statuses)
            ]
        )
    )


@pytest.fixture
def client_mock() -> Mock:
    """Create mock BugBug client."""
    return Mock(spec=BugBugClient)


@pytest.fixture
def tools(client_mock: Mock) -> HistoryTools:
    return HistoryTools(client=client_mock, now=lambda: NOW)


async def test_lists_test_runs(tools: HistoryTools, client_mock: Mock) -> None:
    client_mock.get_test_runs.return_value = runs_page("passed")

    text = await tools.get_test_runs(ordering="-started")

    assert text.startswith("**BugBug Test Runs** (Page 1, Total: 1):")
    assert "- **passed** (ID: run-0) - Started: 2099-01-01T12:00:00+00:00" in text
    client_mock.get_test_runs.assert_called_once_with(
        None, None, "-started", None, None
    )


async def test_last_24_hours_summary(tools: HistoryTools, client_mock: Mock) -> None:
    client_mock.get_test_runs.return_value = runs_page(
        "passed", "failed", "running", "passed"
    )

    text = await tools.show_run_from_last_24(run_type="test", page_size=20)

    assert "- Total: 4\n- Passed: 2\n- Failed: 1\n- Running/Queued: 1" in text
    assert "*Showing up to 20 most recent runs*" in text
    assert SUITE_HISTORY_UNSUPPORTED not in text
    client_mock.get_test_runs.assert_called_once_with(
        1, 20, "-started", "2099-01-01T12:00:00+00:00"
    )


async def test_last_24_hours_suite_only_is_unsupported(
    tools: HistoryTools, client_mock: Mock
) -> None:
    text = await tools.show_run_from_last_24(run_type="suite")

    assert text.startswith("**No runs found in the last 24 hours**")
    assert SUITE_HISTORY_UNSUPPORTED in text
    client_mock.get_test_runs.assert_not_called()


async def test_last_24_hours_reports_api_error(
    tools: HistoryTools, client_mock: Mock
) -> None:
    client_mock.get_test_runs.return_value = ApiError(status=500, reason="Oops")

    text = await tools.show_run_from_last_24()

    assert text == "Error: 500 Oops"
