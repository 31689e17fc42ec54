"""Tools for browsing run history."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.models.result import ApiError
from bugbug_mcp.models.run import RunDetail
from bugbug_mcp.tools.formatting import format_api_error, na, tool_errors

SUITE_HISTORY_UNSUPPORTED = (
    "*Note: Suite run history is not supported by the BugBug API "
    "(no suite run listing with date filters).*"
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def render_run_line(run: RunDetail) -> str:
    """Render one historical test run."""
    started = run.started or run.modified
    error = ""
    if run.error_code not in (None, "None"):
        error = f" - Error: {run.error_code}"
    return (
        f"- **Test** {run.name or run.id} - **{run.status}** ({na(started)}) - "
        f"Duration: {na(run.duration)}{error}"
    )


@dataclass(frozen=True, kw_only=True)
class HistoryTools:
    """Run history tools."""

    client: BugBugClient
    now: Callable[[], datetime] = field(default=_utcnow, repr=False)

    def register(self, mcp: FastMCP) -> None:
        mcp.add_tool(
            self.get_test_runs,
            name="get_test_runs",
            description="Get list of historical BugBug test runs",
        )
        mcp.add_tool(
            self.show_run_from_last_24,
            name="show_run_from_last_24",
            description="Shows tests/suites runs from last 24 hours",
        )

    @tool_errors("fetching test runs")
    async def get_test_runs(
        self,
        page: Annotated[
            int | None, Field(description="Page number for pagination")
        ] = None,
        page_size: Annotated[
            int | None, Field(description="Number of results per page")
        ] = None,
        ordering: Annotated[
            Literal["-started", "started"] | None,
            Field(description="Sort order by start time"),
        ] = None,
        started_after: Annotated[
            str | None,
            Field(description="Filter runs started after this datetime (ISO format)"),
        ] = None,
        started_before: Annotated[
            str | None,
            Field(description="Filter runs started before this datetime (ISO format)"),
        ] = None,
    ) -> str:
        """List historical test runs."""
        runs = await self.client.get_test_runs(
            page, page_size, ordering, started_after, started_before
        )
        if isinstance(runs, ApiError):
            return format_api_error(runs)

        if runs.results:
            run_list = "\n".join(
                f"- **{run.status}** (ID: {run.id}) - Started: {na(run.started)} - "
                f"Duration: {na(run.duration)}"
                for run in runs.results
            )
        else:
            run_list = "No test runs found."

        return (
            f"**BugBug Test Runs** (Page {runs.page or 1}, Total: {runs.count}):\n\n"
            f"{run_list}"
        )

    @tool_errors("fetching runs from last 24 hours")
    async def show_run_from_last_24(
        self,
        run_type: Annotated[
            Literal["test", "suite", "both"],
            Field(description="Type of runs to show - test, suite, or both"),
        ] = "both",
        page_size: Annotated[
            int, Field(description="Number of results per page (default: 50)", gt=0)
        ] = 50,
    ) -> str:
        """List runs started in the last 24 hours, newest first."""
        now = self.now()
        since = now - timedelta(hours=24)
        notes = [SUITE_HISTORY_UNSUPPORTED] if run_type != "test" else []

        runs: list[RunDetail] = []
        if run_type != "suite":
            page = await self.client.get_test_runs(
                1, page_size, "-started", since.isoformat()
            )
            if isinstance(page, ApiError):
                return format_api_error(page)
            runs = list(page.results)

        if not runs:
            return "\n\n".join(
                [
                    "**No runs found in the last 24 hours**",
                    f"Searched for: {run_type} runs\n"
                    f"Time range: {since.isoformat()} to {now.isoformat()}",
                    *notes,
                ]
            )

        passed = sum(1 for run in runs if run.status == "passed")
        failed = sum(1 for run in runs if run.status == "failed")
        active = sum(
            1 for run in runs if run.status in ("queued", "initializing", "running")
        )
        run_list = "\n".join(render_run_line(run) for run in runs[:page_size])
        return "\n\n".join(
            [
                f"**Runs from Last 24 Hours** ({run_type} runs)",
                f"**Summary:**\n- Total: {len(runs)}\n- Passed: {passed}\n"
                f"- Failed: {failed}\n- Running/Queued: {active}",
                f"**Recent Runs:**\n{run_list}",
                f"*Showing up to {page_size} most recent runs*",
                *notes,
            ]
        )
