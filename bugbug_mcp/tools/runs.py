"""Tools for test runs and suite runs.

Test runs and suite runs expose the same operations; one ``RunTools``
instance is registered per kind.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.finalizer import select_steps, summarize_steps
from bugbug_mcp.launcher import filter_variables
from bugbug_mcp.models.result import ApiError, StepSummary
from bugbug_mcp.models.run import (
    RunKind,
    RunStatusResponse,
    ScreenshotsResponse,
    TriggerSource,
    VariableInput,
)
from bugbug_mcp.tools.formatting import format_api_error, na, tool_errors

STEP_HEADINGS = {"test": "Step Details", "suite": "Test Results"}


def render_step_summaries(kind: RunKind, summaries: Sequence[StepSummary]) -> str:
    """Render steps of a test run, or tests of a suite run, one per line."""
    if not summaries:
        if kind == "test":
            return "  No step details available"
        return "  No test details available"

    if kind == "test":
        return "\n".join(
            f"  - **Step {summary.identifier}:** {summary.status} - "
            f"{summary.name or 'N/A'} (Duration: {na(summary.duration)})"
            for summary in summaries
        )
    return "\n".join(
        f"  - **{summary.name or summary.identifier}** ({summary.status}) - "
        f"Duration: {na(summary.duration)} - Error: {summary.error_code or 'None'}"
        for summary in summaries
    )


def render_status(title: str, status: RunStatusResponse) -> str:
    """Render a run status response under a heading."""
    return (
        f"**{title}:**\n\n- **ID:** {status.id}\n- **Status:** {status.status}\n"
        f"- **Last Modified:** {na(status.modified)}\n"
        f"- **Web App URL:** {na(status.webapp_url)}"
    )


def render_screenshots(screenshots: ScreenshotsResponse) -> str:
    """Render screenshot URLs grouped by step, or by test and step."""
    if screenshots.tests_runs:
        groups = []
        for test_run in screenshots.tests_runs:
            steps = "\n".join(
                f"    - Step {step.step_id or step.id}: "
                f"{', '.join(step.urls) or 'No screenshot'}"
                for step in test_run.steps_runs
            )
            groups.append(
                f"  **Test {test_run.name or test_run.id}:**\n"
                f"{steps or '    No step screenshots'}"
            )
        return "\n\n".join(groups)

    if screenshots.steps_runs:
        return "\n".join(
            f"- **Step {step.step_id or step.id}:** "
            f"{step.urls[0] if step.urls else 'No screenshot'}"
            for step in screenshots.steps_runs
        )

    return "No screenshots available"


@dataclass(frozen=True, kw_only=True)
class RunTools:
    """Run tools for one kind of run."""

    client: BugBugClient
    kind: RunKind

    @property
    def label(self) -> str:
        return self.kind.capitalize()

    def register(self, mcp: FastMCP) -> None:
        kind = self.kind
        mcp.add_tool(
            self.create_run,
            name=f"create_{kind}_run",
            description=f"Execute a BugBug {kind}",
        )
        mcp.add_tool(
            self.get_run,
            name=f"get_{kind}_run",
            description=f"Get detailed results of a BugBug {kind} run",
        )
        mcp.add_tool(
            self.get_run_status,
            name=f"get_{kind}_run_status",
            description=f"Get current status of a BugBug {kind} run",
        )
        mcp.add_tool(
            self.get_run_screenshots,
            name=f"get_{kind}_run_screenshots",
            description=f"Get screenshots from a BugBug {kind} run",
        )
        mcp.add_tool(
            self.stop_run,
            name=f"stop_{kind}_run",
            description=f"Stop a running BugBug {kind} run",
        )

    @tool_errors("creating run")
    async def create_run(
        self,
        target_id: Annotated[
            str, Field(description="UUID of the test or suite to execute")
        ],
        profile_name: Annotated[
            str | None, Field(description="Profile name to use for execution")
        ] = None,
        variables: Annotated[
            list[VariableInput] | None,
            Field(description="Override variables for the run"),
        ] = None,
        triggered_by: Annotated[
            TriggerSource, Field(description="Who triggered the run")
        ] = "api",
    ) -> str:
        """Start a run of a test or suite given its id."""
        run = await self.client.create_run(
            target_id,
            self.kind,
            profile_name=profile_name,
            variables=filter_variables(variables),
            triggered_by=triggered_by,
        )
        if isinstance(run, ApiError):
            return format_api_error(run)

        return (
            f"**{self.label} Run Started:**\n\n- **Run ID:** {run.id}\n"
            f"- **Status:** {run.status}\n- **Modified:** {na(run.modified)}\n"
            f"- **Web App URL:** {na(run.webapp_url)}"
        )

    @tool_errors("fetching run")
    async def get_run(
        self,
        run_id: Annotated[str, Field(description="Run UUID")],
    ) -> str:
        """Show the full record of a run."""
        run = await self.client.get_detail(run_id, self.kind)
        if isinstance(run, ApiError):
            return format_api_error(run)

        summaries = summarize_steps(select_steps(run, self.kind))
        steps = render_step_summaries(self.kind, summaries)
        sequence = ""
        if self.kind == "test":
            sequence = f"- **Sequence:** {na(run.sequence)}\n"
        return (
            f"**{self.label} Run Details:**\n\n- **Name:** {na(run.name)}\n"
            f"- **ID:** {run.id}\n- **Status:** {run.status}\n"
            f"- **Duration:** {na(run.duration)}\n- **Queued:** {na(run.queued)}\n"
            f"- **Error Code:** {run.error_code or 'None'}\n{sequence}"
            f"- **Web App URL:** {na(run.webapp_url)}\n\n"
            f"**{STEP_HEADINGS[self.kind]}:**\n{steps}"
        )

    @tool_errors("fetching run status")
    async def get_run_status(
        self,
        run_id: Annotated[str, Field(description="Run UUID")],
    ) -> str:
        """Show the current status of a run."""
        status = await self.client.get_status(run_id, self.kind)
        if isinstance(status, ApiError):
            return format_api_error(status)
        return render_status(f"{self.label} Run Status", status)

    @tool_errors("fetching run screenshots")
    async def get_run_screenshots(
        self,
        run_id: Annotated[str, Field(description="Run UUID")],
    ) -> str:
        """List screenshots captured during a run."""
        screenshots = await self.client.get_screenshots(run_id, self.kind)
        if isinstance(screenshots, ApiError):
            return format_api_error(screenshots)

        return (
            f"**{self.label} Run Screenshots (ID: {screenshots.id}):**\n\n"
            f"{render_screenshots(screenshots)}"
        )

    @tool_errors("stopping run")
    async def stop_run(
        self,
        run_id: Annotated[str, Field(description="Run UUID to stop")],
    ) -> str:
        """Stop an in-flight run."""
        status = await self.client.stop_run(run_id, self.kind)
        if isinstance(status, ApiError):
            return format_api_error(status)
        return render_status(f"{self.label} Run Stopped", status)
