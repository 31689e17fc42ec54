"""Tools for BugBug account configuration."""

from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.models.result import ApiError
from bugbug_mcp.tools.formatting import format_api_error, tool_errors


@dataclass(frozen=True, kw_only=True)
class ConfigTools:
    """Account-level configuration tools."""

    client: BugBugClient

    def register(self, mcp: FastMCP) -> None:
        mcp.add_tool(
            self.get_ip_addresses,
            name="get_ip_addresses",
            description="Get list of BugBug infrastructure IP addresses",
        )

    @tool_errors("fetching IP addresses")
    async def get_ip_addresses(self) -> str:
        """List the IP addresses BugBug runs tests from."""
        ips = await self.client.get_ip_addresses()
        if isinstance(ips, ApiError):
            return format_api_error(ips)

        ip_list = "\n".join(f"- {ip}" for ip in ips)
        return f"**BugBug Infrastructure IP Addresses:**\n\n{ip_list}"
