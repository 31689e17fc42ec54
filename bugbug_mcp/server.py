"""MCP server exposing the BugBug API as tools."""

from mcp.server.fastmcp import FastMCP

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.docs import ErrorDocsClient
from bugbug_mcp.orchestrator import RunOrchestrator
from bugbug_mcp.tools import register_all_tools

SERVER_NAME = "bugbug-mcp-server"


def create_server(client: BugBugClient, docs: ErrorDocsClient) -> FastMCP:
    """Create the MCP server with every tool bound to one API client."""
    mcp = FastMCP(SERVER_NAME)
    register_all_tools(
        mcp,
        client=client,
        orchestrator=RunOrchestrator.for_service(client),
        docs=docs,
    )
    return mcp
