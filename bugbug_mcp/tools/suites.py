"""Tools for the BugBug suite catalog."""

from dataclasses import dataclass
from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.models.result import ApiError
from bugbug_mcp.tools.formatting import format_api_error, tool_errors

type SuiteOrdering = Literal["name", "-name", "created", "-created"]


@dataclass(frozen=True, kw_only=True)
class SuiteTools:
    """Suite catalog tools."""

    client: BugBugClient

    def register(self, mcp: FastMCP) -> None:
        mcp.add_tool(
            self.get_suites,
            name="get_suites",
            description="Get list of BugBug test suites",
        )
        mcp.add_tool(
            self.get_suite,
            name="get_suite",
            description="Get details of a specific BugBug test suite",
        )

    @tool_errors("fetching suites")
    async def get_suites(
        self,
        page: Annotated[
            int | None, Field(description="Page number for pagination")
        ] = None,
        page_size: Annotated[
            int | None, Field(description="Number of results per page")
        ] = None,
        query: Annotated[
            str | None, Field(description="Search query for suite names")
        ] = None,
        ordering: Annotated[
            SuiteOrdering | None, Field(description="Sort order")
        ] = None,
    ) -> str:
        """List or search suites."""
        suites = await self.client.search("suite", query, page, page_size, ordering)
        if isinstance(suites, ApiError):
            return format_api_error(suites)

        if suites.results:
            suite_list = "\n".join(
                f"- **{suite.name or 'Unnamed Suite'}** (ID: {suite.id}) - "
                f"{suite.tests_count or 0} tests"
                for suite in suites.results
            )
        else:
            suite_list = "No suites found."

        return (
            f"**BugBug Test Suites** (Page {suites.page or 1}, Total: {suites.count}):"
            f"\n\n{suite_list}"
        )

    @tool_errors("fetching suite")
    async def get_suite(
        self,
        suite_id: Annotated[str, Field(description="Suite UUID")],
    ) -> str:
        """Show a single suite."""
        suite = await self.client.get_descriptor("suite", suite_id)
        if isinstance(suite, ApiError):
            return format_api_error(suite)

        return (
            f"**Suite Details:**\n\n- **Name:** {suite.name or 'Unnamed Suite'}\n"
            f"- **ID:** {suite.id}\n- **Tests Count:** {suite.tests_count or 0}"
        )
