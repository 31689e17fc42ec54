"""Lookup of BugBug error code documentation."""

import html
import logging
import re
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import aiohttp

from bugbug_mcp.config import BugBugConfig
from bugbug_mcp.models.result import ApiError, ApiResult

log = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"<title>(.*?)</title>", re.IGNORECASE | re.DOTALL)
DESCRIPTION_PATTERN = re.compile(
    r'<meta\s+name="description"\s+content="(.*?)"', re.IGNORECASE | re.DOTALL
)

COMMON_ERRORS: Mapping[str, str] = {
    "timeout": "The test exceeded the maximum allowed execution time",
    "element_not_found": "A required element could not be located on the page",
    "network_error": "Network connectivity issues prevented test execution",
    "browser_crash": "The browser instance crashed during test execution",
    "assertion_failed": "One or more test assertions failed",
    "script_error": "JavaScript error occurred during test execution",
    "page_load_timeout": "Page failed to load within the specified timeout",
    "invalid_selector": "CSS or XPath selector is invalid or malformed",
}


def explain_common_error(error_code: str) -> str:
    """Return a short explanation for well-known error codes."""
    return COMMON_ERRORS.get(error_code.lower(), "Unknown error code")


@dataclass(frozen=True, kw_only=True)
class ErrorDocs:
    """What could be extracted from an error code's docs page."""

    url: str
    title: str | None = None
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class ErrorDocsClient:
    """Fetches error code pages from the BugBug documentation site."""

    base_url: str
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: BugBugConfig
    ) -> AsyncGenerator["ErrorDocsClient", None]:
        """Create client with managed session lifecycle."""
        async with aiohttp.ClientSession() as session:
            yield cls(base_url=config.docs_base_url.rstrip("/"), session=session)

    def url_for(self, error_code: str) -> str:
        """Docs page URL for an error code."""
        return f"{self.base_url}/error-codes/{error_code.lower()}"

    async def fetch(self, error_code: str) -> ApiResult[ErrorDocs]:
        """Fetch the docs page for an error code and extract its summary."""
        url = self.url_for(error_code)
        async with self.session.get(url) as response:
            if response.status != 200:
                log.info(
                    "No docs page for error code %s: %s", error_code, response.status
                )
                return ApiError(status=response.status, reason=response.reason or "")
            content = await response.text()

        title = TITLE_PATTERN.search(content)
        description = DESCRIPTION_PATTERN.search(content)
        return ErrorDocs(
            url=url,
            title=html.unescape(title.group(1).strip()) if title else None,
            description=html.unescape(description.group(1)) if description else None,
        )
