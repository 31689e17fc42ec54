"""Tools for the BugBug test catalog."""

from dataclasses import dataclass
from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.models.catalog import Descriptor
from bugbug_mcp.models.result import ApiError
from bugbug_mcp.tools.formatting import format_api_error, tool_errors, yes_no

type TestOrdering = Literal[
    "name", "-name", "created", "-created", "last_result", "-last_result"
]


def render_test(title: str, test: Descriptor) -> str:
    """Render a test's details under a heading."""
    return (
        f"**{title}:**\n\n- **Name:** {test.name}\n- **ID:** {test.id}\n"
        f"- **Is Active:** {yes_no(test.is_active)}\n"
        f"- **Is Recording:** {yes_no(test.is_recording)}"
    )


@dataclass(frozen=True, kw_only=True)
class TestTools:
    """Test catalog tools."""

    __test__ = False

    client: BugBugClient

    def register(self, mcp: FastMCP) -> None:
        mcp.add_tool(
            self.get_tests, name="get_tests", description="Get list of BugBug tests"
        )
        mcp.add_tool(
            self.get_test,
            name="get_test",
            description="Get details of a specific BugBug test",
        )
        mcp.add_tool(
            self.update_test,
            name="update_test",
            description="Update a BugBug test (full update)",
        )
        mcp.add_tool(
            self.partial_update_test,
            name="partial_update_test",
            description="Partially update a BugBug test",
        )

    @tool_errors("fetching tests")
    async def get_tests(
        self,
        page: Annotated[
            int | None, Field(description="Page number for pagination")
        ] = None,
        page_size: Annotated[
            int | None, Field(description="Number of results per page")
        ] = None,
        query: Annotated[
            str | None, Field(description="Search query for test names")
        ] = None,
        ordering: Annotated[
            TestOrdering | None, Field(description="Sort order")
        ] = None,
    ) -> str:
        """List or search tests."""
        tests = await self.client.search("test", query, page, page_size, ordering)
        if isinstance(tests, ApiError):
            return format_api_error(tests)

        if tests.results:
            test_list = "\n".join(
                f"- **{test.name}** (ID: {test.id}) - Active: {yes_no(test.is_active)}"
                + (" [RECORDING]" if test.is_recording else "")
                for test in tests.results
            )
        else:
            test_list = "No tests found."

        return (
            f"**BugBug Tests** (Page {tests.page or 1}, Total: {tests.count}):\n\n"
            f"{test_list}"
        )

    @tool_errors("fetching test")
    async def get_test(
        self,
        test_id: Annotated[str, Field(description="Test UUID")],
    ) -> str:
        """Show a single test."""
        test = await self.client.get_descriptor("test", test_id)
        if isinstance(test, ApiError):
            return format_api_error(test)
        return render_test("Test Details", test)

    @tool_errors("updating test")
    async def update_test(
        self,
        test_id: Annotated[str, Field(description="Test UUID")],
        name: Annotated[str, Field(description="Test name")],
        is_active: Annotated[bool, Field(description="Whether the test is active")],
    ) -> str:
        """Replace a test's name and active flag."""
        test = await self.client.update_test(test_id, name, is_active)
        if isinstance(test, ApiError):
            return format_api_error(test)
        return render_test("Test Updated", test)

    @tool_errors("partially updating test")
    async def partial_update_test(
        self,
        test_id: Annotated[str, Field(description="Test UUID")],
        name: Annotated[str | None, Field(description="Test name")] = None,
        is_active: Annotated[
            bool | None, Field(description="Whether the test is active")
        ] = None,
    ) -> str:
        """Update only the given fields of a test."""
        test = await self.client.partial_update_test(test_id, name, is_active)
        if isinstance(test, ApiError):
            return format_api_error(test)
        return render_test("Test Partially Updated", test)
