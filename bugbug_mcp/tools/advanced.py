"""Tools that wait for runs, start runs by name and explain errors."""

import logging
from dataclasses import dataclass
from typing import Annotated

import aiohttp
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from bugbug_mcp.docs import ErrorDocsClient, explain_common_error
from bugbug_mcp.models.result import (
    ApiError,
    CompletionPayload,
    Finished,
    LaunchFailed,
    Launched,
    LaunchOutcome,
    NotFound,
    SearchFailed,
    StatusCheckFailed,
    WaitReport,
)
from bugbug_mcp.models.run import RunKind, VariableInput
from bugbug_mcp.orchestrator import RunOrchestrator
from bugbug_mcp.poller import WaitRequest
from bugbug_mcp.service import RunService
from bugbug_mcp.tools.formatting import na, tool_errors
from bugbug_mcp.tools.runs import STEP_HEADINGS, render_step_summaries

log = logging.getLogger(__name__)

TROUBLESHOOTING_TIPS = (
    "**Troubleshooting Tips:**\n"
    "- Check the test steps and selectors\n"
    "- Verify page load times and network conditions\n"
    "- Review browser console logs if available\n"
    "- Consider increasing timeouts if applicable"
)


def render_completion(payload: CompletionPayload) -> str:
    """Render the completion payload of a finished run."""
    label = payload.kind.capitalize()
    if payload.detail is None:
        return (
            f"{label} run finished with status: {payload.status}, but failed to get "
            f"full details: {payload.detail_error}"
        )

    run = payload.detail
    sections = [
        f"**{label} Run Completed:**\n\n- **Name:** {na(run.name)}\n"
        f"- **ID:** {run.id}\n- **Final Status:** {payload.status}\n"
        f"- **Duration:** {na(run.duration)}\n- **Queued:** {na(run.queued)}\n"
        f"- **Started:** {na(run.started)}\n- **Finished:** {na(run.finished)}\n"
        f"- **Error Code:** {run.error_code or 'None'}\n"
        f"- **Web App URL:** {na(run.webapp_url)}",
        f"**{STEP_HEADINGS[payload.kind]}:**\n"
        f"{render_step_summaries(payload.kind, payload.step_summaries)}",
    ]

    variables = "\n".join(
        f"- {variable.key}={variable.value}" for variable in run.variables
    )
    sections.append(f"**Variables:**\n{variables or 'None'}")

    if (failure := payload.failure_context) is not None:
        lines = [f"- **Failed At:** {failure.step_name or 'Unknown step'}"]
        if failure.error_code:
            lines.append(f"- **Error Code:** {failure.error_code}")
        if failure.error_message:
            lines.append(f"- **Error Message:** {failure.error_message}")
        sections.append("**Failure:**\n" + "\n".join(lines))

    if payload.screenshots:
        sections.append(
            "**Screenshots:**\n" + "\n".join(f"- {url}" for url in payload.screenshots)
        )

    return "\n\n".join(sections)


def render_wait_report(
    report: WaitReport, kind: RunKind, timeout_minutes: float
) -> str:
    """Render the result of waiting for a run."""
    outcome = report.outcome
    if isinstance(outcome, StatusCheckFailed):
        return f"Error checking {kind} run status: {outcome.error}"

    if isinstance(outcome, Finished):
        if report.completion is None:
            return (
                f"{kind.capitalize()} run {outcome.run_id} finished with status: "
                f"{outcome.status}"
            )
        return render_completion(report.completion)

    return (
        f"**Timeout:** {kind.capitalize()} run {outcome.run_id} did not finish "
        f"within {timeout_minutes:g} minutes "
        f"(last status: {na(outcome.last_status)}). "
        f"Last known status can be checked with get_{kind}_run_status."
    )


def render_launch_failure(failure: LaunchFailed) -> str:
    """Render why a run could not be started."""
    kind = failure.kind
    resolution = failure.resolution

    if isinstance(resolution, SearchFailed):
        return (
            f"Error searching for {kind} \"{resolution.query}\": {resolution.error}"
        )

    if isinstance(resolution, NotFound):
        if not resolution.suggestions:
            return (
                f"❌ **No {kind} found** with name \"{resolution.query}\"\n\n"
                f"Try using the exact {kind} name or UUID. "
                f"Use `get_{kind}s` to list available {kind}s."
            )
        suggestions = "\n".join(
            f"- {descriptor.name} ({descriptor.id})"
            for descriptor in resolution.suggestions
        )
        more = resolution.total - len(resolution.suggestions)
        return (
            f"❌ **No exact match found** for \"{resolution.query}\"\n\n"
            f"**Similar {kind}s found:**\n{suggestions}"
            + (f"\n\n...and {more} more" if more > 0 else "")
        )

    return f"❌ **Error starting {kind} run**: {failure.error}"


def render_launched(launched: Launched) -> str:
    """Render the confirmation of a started run."""
    kind = launched.kind
    label = kind.capitalize()
    sections = []

    if launched.ambiguous:
        candidates = "\n".join(
            f"- {descriptor.name}"
            + (" ← **SELECTED**" if descriptor.id == launched.target_id else "")
            for descriptor in launched.candidates
        )
        more = launched.total_matches - len(launched.candidates)
        sections.append(
            f"⚠️ **Multiple {kind}s found** for \"{launched.name_or_id}\":\n\n"
            f"{candidates}"
            + (f"\n...and {more} more" if more > 0 else "")
            + f"\n\n**Selected:** {launched.display_name}\n\n"
            f"To run a specific {kind}, use its exact name or UUID."
        )

    sections.append(
        f"🚀 **{label} Run Started Successfully!**\n\n"
        f"- **{label}:** {launched.display_name}\n"
        f"- **{label} ID:** {launched.target_id}\n"
        f"- **Run ID:** {launched.run_id}\n"
        f"- **Status:** {launched.status}\n"
        f"- **Profile:** {launched.profile_name or 'Default'}\n"
        f"- **Web App URL:** {na(launched.webapp_url)}"
    )
    sections.append(
        f"💡 **Next steps:**\n"
        f"- Use `get_{kind}_run_status` with run ID `{launched.run_id}` "
        f"to check progress\n"
        f"- Use `wait_for_{kind}_run` with run ID `{launched.run_id}` "
        f"to wait for completion\n"
        f"- Use `get_{kind}_run` with run ID `{launched.run_id}` "
        f"to get detailed results"
    )
    return "\n\n".join(sections)


def render_launch(outcome: LaunchOutcome) -> str:
    if isinstance(outcome, Launched):
        return render_launched(outcome)
    return render_launch_failure(outcome)


@dataclass(frozen=True, kw_only=True)
class AdvancedTools:
    """Composite tools built on the wait and launch operations."""

    orchestrator: RunOrchestrator
    service: RunService
    docs: ErrorDocsClient

    def register(self, mcp: FastMCP) -> None:
        mcp.add_tool(
            self.wait_for_test_run,
            name="wait_for_test_run",
            description=(
                "Waits until test run finished, returns full test run data as result"
            ),
        )
        mcp.add_tool(
            self.wait_for_suite_run,
            name="wait_for_suite_run",
            description=(
                "Waits until suite run finished, returns full suite run data as result"
            ),
        )
        mcp.add_tool(
            self.explain_error,
            name="explain_error",
            description=(
                "Gets test run or suite run error code and checks in docs.bugbug.io "
                "details about the issue"
            ),
        )
        mcp.add_tool(
            self.run_test_by_name_or_id,
            name="run_test_by_name_or_id",
            description=(
                "Run test by name or ID - automatically finds test by name if not "
                "a UUID"
            ),
        )
        mcp.add_tool(
            self.run_suite_by_name_or_id,
            name="run_suite_by_name_or_id",
            description=(
                "Run suite by name or ID - automatically finds suite by name if not "
                "a UUID"
            ),
        )

    async def wait_for_run(
        self,
        run_id: str,
        kind: RunKind,
        timeout_minutes: float,
        poll_interval_seconds: float,
    ) -> str:
        request = WaitRequest.for_kind(
            run_id,
            kind,
            timeout=timeout_minutes * 60,
            poll_interval=poll_interval_seconds,
        )
        report = await self.orchestrator.wait_for_run(request)
        return render_wait_report(report, kind, timeout_minutes)

    @tool_errors("waiting for test run")
    async def wait_for_test_run(
        self,
        run_id: Annotated[str, Field(description="Test run UUID to wait for")],
        timeout_minutes: Annotated[
            float,
            Field(description="Maximum time to wait in minutes (default: 30)", gt=0),
        ] = 30,
        poll_interval_seconds: Annotated[
            float,
            Field(description="Polling interval in seconds (default: 10)", gt=0),
        ] = 10,
    ) -> str:
        """Block until a test run finishes and show its results."""
        return await self.wait_for_run(
            run_id, "test", timeout_minutes, poll_interval_seconds
        )

    @tool_errors("waiting for suite run")
    async def wait_for_suite_run(
        self,
        run_id: Annotated[str, Field(description="Suite run UUID to wait for")],
        timeout_minutes: Annotated[
            float,
            Field(description="Maximum time to wait in minutes (default: 60)", gt=0),
        ] = 60,
        poll_interval_seconds: Annotated[
            float,
            Field(description="Polling interval in seconds (default: 15)", gt=0),
        ] = 15,
    ) -> str:
        """Block until a suite run finishes and show its results."""
        return await self.wait_for_run(
            run_id, "suite", timeout_minutes, poll_interval_seconds
        )

    @tool_errors("running test")
    async def run_test_by_name_or_id(
        self,
        test_name_or_id: Annotated[
            str, Field(description="Test name or UUID to execute")
        ],
        profile_name: Annotated[
            str | None, Field(description="Profile name to use for execution")
        ] = None,
        variables: Annotated[
            list[VariableInput] | None,
            Field(description="Override variables for the test run"),
        ] = None,
    ) -> str:
        """Start a test run from a test name or id."""
        outcome = await self.orchestrator.launch(
            test_name_or_id, "test", profile_name, variables
        )
        return render_launch(outcome)

    @tool_errors("running suite")
    async def run_suite_by_name_or_id(
        self,
        suite_name_or_id: Annotated[
            str, Field(description="Suite name or UUID to execute")
        ],
        profile_name: Annotated[
            str | None, Field(description="Profile name to use for execution")
        ] = None,
        variables: Annotated[
            list[VariableInput] | None,
            Field(description="Override variables for the suite run"),
        ] = None,
    ) -> str:
        """Start a suite run from a suite name or id."""
        outcome = await self.orchestrator.launch(
            suite_name_or_id, "suite", profile_name, variables
        )
        return render_launch(outcome)

    @tool_errors("explaining error code")
    async def explain_error(
        self,
        run_id: Annotated[str, Field(description="Test run or suite run UUID")],
        run_type: Annotated[
            RunKind, Field(description="Type of run - test or suite")
        ],
    ) -> str:
        """Explain the error code of a failed run."""
        label = run_type.capitalize()
        run = await self.service.get_detail(run_id, run_type)
        if isinstance(run, ApiError):
            return f"Error fetching {run_type} run details: {run}"

        error_code = run.error_code
        if not error_code or error_code == "None":
            return (
                f"**No Error Found:**\n\n{label} run {run_id} does not have an error "
                f"code. Current status: {run.status}"
            )

        summary = (
            f"**Error Analysis for {label} Run:**\n\n- **Run ID:** {run_id}\n"
            f"- **Error Code:** {error_code}\n- **Status:** {run.status}\n"
            f"- **Common Explanation:** {explain_common_error(error_code)}"
        )
        if run.error_message:
            summary += f"\n- **Error Message:** {run.error_message}"

        try:
            docs = await self.docs.fetch(error_code)
        except (aiohttp.ClientError, TimeoutError) as exc:
            log.warning("Fetching docs for error code %s failed: %s", error_code, exc)
            return (
                f"{summary}\n\n**Note:** Could not fetch additional documentation due "
                f"to network error: {exc}\n\n**General Advice:** Check BugBug "
                f"documentation at {self.docs.base_url} for error code details."
            )

        if isinstance(docs, ApiError):
            documentation = (
                f"**Documentation:** No specific documentation found for error code "
                f"{error_code} at {self.docs.url_for(error_code)}"
            )
        elif docs.title or docs.description:
            documentation = (
                f"**Documentation Found:**\n- Title: {na(docs.title)}\n"
                f"- Description: {na(docs.description)}\n- Full docs: {docs.url}"
            )
        else:
            documentation = (
                f"**Documentation:** {docs.url} "
                f"(content available but couldn't extract details)"
            )

        return f"{summary}\n\n{documentation}\n\n{TROUBLESHOOTING_TIPS}"
