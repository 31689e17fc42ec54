"""Tools for BugBug run profiles."""

from dataclasses import dataclass
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.models.result import ApiError
from bugbug_mcp.tools.formatting import format_api_error, tool_errors, yes_no


@dataclass(frozen=True, kw_only=True)
class ProfileTools:
    """Run profile tools."""

    client: BugBugClient

    def register(self, mcp: FastMCP) -> None:
        mcp.add_tool(
            self.get_profiles,
            name="get_profiles",
            description="Get list of BugBug run profiles",
        )
        mcp.add_tool(
            self.get_profile,
            name="get_profile",
            description="Get details of a specific BugBug run profile",
        )

    @tool_errors("fetching profiles")
    async def get_profiles(
        self,
        page: Annotated[
            int | None, Field(description="Page number for pagination")
        ] = None,
        page_size: Annotated[
            int | None, Field(description="Number of results per page")
        ] = None,
    ) -> str:
        """List run profiles."""
        profiles = await self.client.get_profiles(page, page_size)
        if isinstance(profiles, ApiError):
            return format_api_error(profiles)

        if profiles.results:
            profile_list = "\n".join(
                f"- **{profile.name}** (ID: {profile.id})"
                + (" [DEFAULT]" if profile.is_default else "")
                for profile in profiles.results
            )
        else:
            profile_list = "No profiles found."

        return (
            f"**BugBug Run Profiles** (Page {profiles.page or 1}, "
            f"Total: {profiles.count}):\n\n{profile_list}"
        )

    @tool_errors("fetching profile")
    async def get_profile(
        self,
        profile_id: Annotated[str, Field(description="Profile UUID")],
    ) -> str:
        """Show a single run profile."""
        profile = await self.client.get_profile(profile_id)
        if isinstance(profile, ApiError):
            return format_api_error(profile)

        return (
            f"**Profile Details:**\n\n- **Name:** {profile.name}\n"
            f"- **ID:** {profile.id}\n- **Is Default:** {yes_no(profile.is_default)}"
        )
