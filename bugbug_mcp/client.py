"""BugBug REST API client."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from bugbug_mcp.config import BugBugConfig
from bugbug_mcp.models.catalog import Descriptor, Page, Profile
from bugbug_mcp.models.result import ApiError, ApiResult
from bugbug_mcp.models.run import (
    RunDetail,
    RunKind,
    RunStatusResponse,
    ScreenshotsResponse,
    TriggerSource,
    Variable,
)
from bugbug_mcp.service import RunService

log = logging.getLogger(__name__)

CATALOG_PATHS: Mapping[RunKind, str] = {"test": "tests", "suite": "suites"}
RUN_PATHS: Mapping[RunKind, str] = {"test": "testruns", "suite": "suiteruns"}
TARGET_KEYS: Mapping[RunKind, str] = {"test": "testId", "suite": "suiteId"}


class ConnectionVerificationError(RuntimeError):
    """Raised when the API rejects the configured credentials at startup."""


def build_params(**values: str | int | None) -> dict[str, str]:
    """Build query parameters, dropping unset values."""
    return {key: str(value) for key, value in values.items() if value is not None}


@dataclass(frozen=True, kw_only=True)
class BugBugClient(RunService):
    """aiohttp implementation of the BugBug API.

    A response is a success only when its status is exactly 200; anything
    else is returned as an ``ApiError`` carrying the status and reason.
    """

    config: BugBugConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: BugBugConfig
    ) -> AsyncGenerator["BugBugClient", None]:
        """Create client with managed session lifecycle."""
        headers = {
            "Authorization": f"Token {config.api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
        ) as session:
            yield cls(config=config, session=session)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> ApiResult[Any]:
        """Issue a request and return the decoded body or an ApiError."""
        log.debug("BugBug API request: method=%s url=%s params=%s", method, url, params)

        async with self.session.request(
            method, url, params=params, json=payload
        ) as response:
            if response.status != 200:
                text = await response.text()
                log.warning(
                    "BugBug API request failed: method=%s url=%s status=%s body=%s",
                    method,
                    url,
                    response.status,
                    text[:500],
                )
                return ApiError(status=response.status, reason=response.reason or "")

            if response.content_type == "application/json":
                return await response.json()
            return await response.text()

    async def verify_connection(self) -> None:
        """Check that the API accepts the configured key.

        Raises:
            ConnectionVerificationError: If the API does not answer with 200

        """
        result = await self.get_ip_addresses()
        if isinstance(result, ApiError):
            raise ConnectionVerificationError(
                f"API verification failed: {result.status} {result.reason}"
            )
        log.info("BugBug API connection verified")

    async def get_ip_addresses(self) -> ApiResult[Sequence[str]]:
        """List the IP addresses BugBug runs tests from."""
        data = await self.request("GET", "config/ips/")
        if isinstance(data, ApiError):
            return data
        return [str(ip) for ip in data]

    async def get_profiles(
        self, page: int | None = None, page_size: int | None = None
    ) -> ApiResult[Page[Profile]]:
        """List run profiles."""
        data = await self.request(
            "GET", "profiles/", params=build_params(page=page, page_size=page_size)
        )
        if isinstance(data, ApiError):
            return data
        return Page[Profile].model_validate(data)

    async def get_profile(self, profile_id: str) -> ApiResult[Profile]:
        """Fetch a single run profile."""
        data = await self.request("GET", f"profiles/{profile_id}/")
        if isinstance(data, ApiError):
            return data
        return Profile.model_validate(data)

    async def search(
        self,
        kind: RunKind,
        query: str | None = None,
        page: int | None = None,
        page_size: int | None = None,
        ordering: str | None = None,
    ) -> ApiResult[Page[Descriptor]]:
        """List or search tests or suites."""
        params = build_params(
            page=page, page_size=page_size, query=query or None, ordering=ordering
        )
        data = await self.request("GET", f"{CATALOG_PATHS[kind]}/", params=params)
        if isinstance(data, ApiError):
            return data
        return Page[Descriptor].model_validate(data)

    async def get_descriptor(
        self, kind: RunKind, target_id: str
    ) -> ApiResult[Descriptor]:
        """Fetch a single test or suite."""
        data = await self.request("GET", f"{CATALOG_PATHS[kind]}/{target_id}/")
        if isinstance(data, ApiError):
            return data
        return Descriptor.model_validate(data)

    async def update_test(
        self, test_id: str, name: str, is_active: bool
    ) -> ApiResult[Descriptor]:
        """Replace a test's editable fields."""
        data = await self.request(
            "PUT", f"tests/{test_id}/", payload={"name": name, "isActive": is_active}
        )
        if isinstance(data, ApiError):
            return data
        return Descriptor.model_validate(data)

    async def partial_update_test(
        self, test_id: str, name: str | None = None, is_active: bool | None = None
    ) -> ApiResult[Descriptor]:
        """Update only the given fields of a test."""
        payload: dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if is_active is not None:
            payload["isActive"] = is_active

        data = await self.request("PATCH", f"tests/{test_id}/", payload=payload)
        if isinstance(data, ApiError):
            return data
        return Descriptor.model_validate(data)

    async def get_test_runs(
        self,
        page: int | None = None,
        page_size: int | None = None,
        ordering: str | None = None,
        started_after: str | None = None,
        started_before: str | None = None,
    ) -> ApiResult[Page[RunDetail]]:
        """List historical test runs."""
        params = build_params(
            page=page,
            page_size=page_size,
            ordering=ordering,
            started_after=started_after,
            started_before=started_before,
        )
        data = await self.request("GET", "testruns/", params=params)
        if isinstance(data, ApiError):
            return data
        return Page[RunDetail].model_validate(data)

    async def create_run(
        self,
        target_id: str,
        kind: RunKind,
        profile_name: str | None = None,
        variables: Sequence[Variable] | None = None,
        triggered_by: TriggerSource = "api",
    ) -> ApiResult[RunStatusResponse]:
        """Start a test run or suite run."""
        payload: dict[str, Any] = {
            TARGET_KEYS[kind]: target_id,
            "triggeredBy": triggered_by,
        }
        if profile_name is not None:
            payload["profileName"] = profile_name
        if variables is not None:
            payload["variables"] = [variable.model_dump() for variable in variables]

        log.info(
            "Creating %s run: target_id=%s profile_name=%s variables=%d",
            kind,
            target_id,
            profile_name,
            len(variables or ()),
        )

        data = await self.request("POST", f"{RUN_PATHS[kind]}/", payload=payload)
        if isinstance(data, ApiError):
            return data
        return RunStatusResponse.model_validate(data)

    async def get_detail(self, run_id: str, kind: RunKind) -> ApiResult[RunDetail]:
        """Fetch the full record of a run."""
        data = await self.request("GET", f"{RUN_PATHS[kind]}/{run_id}/")
        if isinstance(data, ApiError):
            return data
        return RunDetail.model_validate(data)

    async def get_status(
        self, run_id: str, kind: RunKind
    ) -> ApiResult[RunStatusResponse]:
        """Fetch the current status of a run."""
        data = await self.request("GET", f"{RUN_PATHS[kind]}/{run_id}/status/")
        if isinstance(data, ApiError):
            return data
        return RunStatusResponse.model_validate(data)

    async def get_screenshots(
        self, run_id: str, kind: RunKind
    ) -> ApiResult[ScreenshotsResponse]:
        """Fetch screenshots captured during a run."""
        data = await self.request("GET", f"{RUN_PATHS[kind]}/{run_id}/screenshots/")
        if isinstance(data, ApiError):
            return data
        return ScreenshotsResponse.model_validate(data)

    async def stop_run(
        self, run_id: str, kind: RunKind
    ) -> ApiResult[RunStatusResponse]:
        """Stop an in-flight run."""
        log.info("Stopping %s run %s", kind, run_id)
        data = await self.request("POST", f"{RUN_PATHS[kind]}/{run_id}/stop/")
        if isinstance(data, ApiError):
            return data
        return RunStatusResponse.model_validate(data)
