"""Integration tests for the BugBug API client."""

import re
from collections.abc import AsyncGenerator

import pytest
from aioresponses import aioresponses as aioresponses_cls
from pydantic import SecretStr
from yarl import URL

from bugbug_mcp.client import BugBugClient, ConnectionVerificationError
from bugbug_mcp.config import BugBugConfig
from bugbug_mcp.models.result import ApiError
from bugbug_mcp.models.run import Variable
from bugbug_mcp.testing import payloads

API_BASE_URL = "http://bugbug.test/api/v1/"


@pytest.fixture
def config() -> BugBugConfig:
    """Create test configuration."""
    return BugBugConfig(api_key=SecretStr("token-123"), api_base_url=API_BASE_URL)


@pytest.fixture
async def client(
    config: BugBugConfig, aioresponses: aioresponses_cls
) -> AsyncGenerator[BugBugClient, None]:
    """Create client with managed session."""
    async with BugBugClient.from_config(config) as impl:
        yield impl


def requested_url(aioresponses: aioresponses_cls) -> URL:
    return next(iter(aioresponses.requests.keys()))[1]


class TestRequest:
    """Tests for authentication and status handling."""

    async def test_sends_token_authorization(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        url = f"{API_BASE_URL}config/ips/"
        aioresponses.get(url, payload=["34.1.1.1"])

        result = await client.get_ip_addresses()

        assert result == ["34.1.1.1"]
        assert client.session.headers["Authorization"] == "Token token-123"

    @pytest.mark.parametrize("status", [201, 204, 400, 401, 404, 500])
    async def test_only_200_is_success(
        self, client: BugBugClient, aioresponses: aioresponses_cls, status: int
    ) -> None:
        """Any status other than 200 is an ApiError, even other 2xx codes."""
        aioresponses.get(f"{API_BASE_URL}config/ips/", status=status, payload=[])

        result = await client.get_ip_addresses()

        assert isinstance(result, ApiError)
        assert result.status == status

    async def test_verify_connection_raises_on_rejected_key(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        aioresponses.get(
            f"{API_BASE_URL}config/ips/", status=401, reason="Unauthorized"
        )

        with pytest.raises(ConnectionVerificationError, match="401 Unauthorized"):
            await client.verify_connection()


class TestCatalog:
    """Tests for test, suite and profile endpoints."""

    async def test_search_tests_sends_query_params(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        aioresponses.get(
            re.compile(rf"{re.escape(API_BASE_URL)}tests/.*"),
            payload=payloads.page([payloads.descriptor(name="Login flow")]),
        )

        result = await client.search("test", query="Login", page=1, page_size=50)

        assert not isinstance(result, ApiError)
        assert [descriptor.name for descriptor in result.results] == ["Login flow"]
        url = requested_url(aioresponses)
        assert url.path == "/api/v1/tests/"
        assert url.query["query"] == "Login"
        assert url.query["page"] == "1"
        assert url.query["page_size"] == "50"
        assert "ordering" not in url.query

    async def test_get_suite(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        url = f"{API_BASE_URL}suites/{payloads.SUITE_ID}/"
        aioresponses.get(
            url,
            payload=payloads.descriptor(
                descriptor_id=payloads.SUITE_ID, name="Nightly", tests_count=12
            ),
        )

        result = await client.get_descriptor("suite", payloads.SUITE_ID)

        assert not isinstance(result, ApiError)
        assert result.name == "Nightly"
        assert result.tests_count == 12

    async def test_partial_update_sends_only_given_fields(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        url = f"{API_BASE_URL}tests/{payloads.TEST_ID}/"
        aioresponses.patch(url, payload=payloads.descriptor(is_active=False))

        await client.partial_update_test(payloads.TEST_ID, is_active=False)

        call = aioresponses.requests[("PATCH", URL(url))][0]
        assert call.kwargs["json"] == {"isActive": False}

    async def test_profiles_page(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        aioresponses.get(
            f"{API_BASE_URL}profiles/",
            payload=payloads.page([payloads.profile()], count=3),
        )

        result = await client.get_profiles()

        assert not isinstance(result, ApiError)
        assert result.count == 3
        assert result.results[0].is_default is True


class TestRuns:
    """Tests for test run and suite run endpoints."""

    async def test_create_test_run_payload(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        """Sends camelCase keys and omits unset optional fields."""
        url = f"{API_BASE_URL}testruns/"
        aioresponses.post(url, payload=payloads.run_status(status="queued"))

        result = await client.create_run(
            payloads.TEST_ID,
            "test",
            variables=[Variable(key="EMAIL", value="qa@example.com")],
        )

        assert not isinstance(result, ApiError)
        assert result.status == "queued"
        call = aioresponses.requests[("POST", URL(url))][0]
        assert call.kwargs["json"] == {
            "testId": payloads.TEST_ID,
            "triggeredBy": "api",
            "variables": [{"key": "EMAIL", "value": "qa@example.com"}],
        }

    async def test_create_suite_run_payload(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        url = f"{API_BASE_URL}suiteruns/"
        aioresponses.post(url, payload=payloads.run_status(status="queued"))

        await client.create_run(
            payloads.SUITE_ID, "suite", profile_name="Staging", triggered_by="cli"
        )

        call = aioresponses.requests[("POST", URL(url))][0]
        assert call.kwargs["json"] == {
            "suiteId": payloads.SUITE_ID,
            "triggeredBy": "cli",
            "profileName": "Staging",
        }

    async def test_get_suite_run_status(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        aioresponses.get(
            f"{API_BASE_URL}suiteruns/{payloads.RUN_ID}/status/",
            payload=payloads.run_status(status="passed"),
        )

        result = await client.get_status(payloads.RUN_ID, "suite")

        assert not isinstance(result, ApiError)
        assert result.status == "passed"

    async def test_get_test_run_detail(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        aioresponses.get(
            f"{API_BASE_URL}testruns/{payloads.RUN_ID}/",
            payload=payloads.run_detail(
                status="failed",
                error_code="TIMEOUT",
                steps_runs=[payloads.step(status="failed", error_code="TIMEOUT")],
            ),
        )

        result = await client.get_detail(payloads.RUN_ID, "test")

        assert not isinstance(result, ApiError)
        assert result.error_code == "TIMEOUT"
        assert result.steps_runs[0].step_id == "step-1"

    async def test_stop_run(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        url = f"{API_BASE_URL}testruns/{payloads.RUN_ID}/stop/"
        aioresponses.post(url, payload=payloads.run_status(status="stopped"))

        result = await client.stop_run(payloads.RUN_ID, "test")

        assert not isinstance(result, ApiError)
        assert result.status == "stopped"

    async def test_test_run_history_filters(
        self, client: BugBugClient, aioresponses: aioresponses_cls
    ) -> None:
        aioresponses.get(
            re.compile(rf"{re.escape(API_BASE_URL)}testruns/.*"),
            payload=payloads.page([payloads.run_detail()]),
        )

        await client.get_test_runs(
            page=1, ordering="-started", started_after="2099-01-01T00:00:00Z"
        )

        url = requested_url(aioresponses)
        assert url.query["ordering"] == "-started"
        assert url.query["started_after"] == "2099-01-01T00:00:00Z"
        assert "started_before" not in url.query
