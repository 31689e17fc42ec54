"""MCP tool groups for the BugBug API."""

from mcp.server.fastmcp import FastMCP

from bugbug_mcp.client import BugBugClient
from bugbug_mcp.docs import ErrorDocsClient
from bugbug_mcp.orchestrator import RunOrchestrator
from bugbug_mcp.tools.advanced import AdvancedTools
from bugbug_mcp.tools.config import ConfigTools
from bugbug_mcp.tools.history import HistoryTools
from bugbug_mcp.tools.profiles import ProfileTools
from bugbug_mcp.tools.runs import RunTools
from bugbug_mcp.tools.suites import SuiteTools
from bugbug_mcp.tools.tests import TestTools


def register_all_tools(
    mcp: FastMCP,
    client: BugBugClient,
    orchestrator: RunOrchestrator,
    docs: ErrorDocsClient,
) -> None:
    """Register every tool group on the server."""
    ConfigTools(client=client).register(mcp)
    ProfileTools(client=client).register(mcp)
    TestTools(client=client).register(mcp)
    SuiteTools(client=client).register(mcp)
    HistoryTools(client=client).register(mcp)
    RunTools(client=client, kind="test").register(mcp)
    RunTools(client=client, kind="suite").register(mcp)
    AdvancedTools(orchestrator=orchestrator, service=client, docs=docs).register(mcp)


__all__ = [
    "AdvancedTools",
    "ConfigTools",
    "HistoryTools",
    "ProfileTools",
    "RunTools",
    "SuiteTools",
    "TestTools",
    "register_all_tools",
]
