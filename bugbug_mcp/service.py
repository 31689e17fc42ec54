"""Abstract remote capability used by the wait and launch operations."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from bugbug_mcp.models.catalog import Descriptor, Page
from bugbug_mcp.models.result import ApiResult
from bugbug_mcp.models.run import (
    RunDetail,
    RunKind,
    RunStatusResponse,
    TriggerSource,
    Variable,
)


class RunService(ABC):
    """Remote job-execution API for tests and suites.

    Every call returns either the parsed payload or an ``ApiError`` for a
    non-success response. Implementations may raise only for faults outside
    the HTTP exchange (network errors, malformed payloads).
    """

    @abstractmethod
    async def get_status(
        self, run_id: str, kind: RunKind
    ) -> ApiResult[RunStatusResponse]:
        """Fetch the current status of a run.

        Args:
            run_id: Run identifier returned by create_run
            kind: Whether the run is a test run or a suite run

        """

    @abstractmethod
    async def get_detail(self, run_id: str, kind: RunKind) -> ApiResult[RunDetail]:
        """Fetch the full record of a run."""

    @abstractmethod
    async def search(
        self,
        kind: RunKind,
        query: str | None = None,
        page: int | None = None,
        page_size: int | None = None,
        ordering: str | None = None,
    ) -> ApiResult[Page[Descriptor]]:
        """List or search the test or suite catalog.

        Args:
            kind: Catalog to search
            query: Name filter applied by the server
            page: Page number, 1-based
            page_size: Number of results per page
            ordering: Server-side sort key (e.g. "name", "-created")

        """

    @abstractmethod
    async def get_descriptor(
        self, kind: RunKind, target_id: str
    ) -> ApiResult[Descriptor]:
        """Fetch a single test or suite definition."""

    @abstractmethod
    async def create_run(
        self,
        target_id: str,
        kind: RunKind,
        profile_name: str | None = None,
        variables: Sequence[Variable] | None = None,
        triggered_by: TriggerSource = "api",
    ) -> ApiResult[RunStatusResponse]:
        """Start a run of a test or suite.

        Args:
            target_id: Test or suite identifier
            kind: Whether target_id names a test or a suite
            profile_name: Run profile; the server default when omitted
            variables: Variable overrides, all with values
            triggered_by: Trigger source recorded on the run

        Returns:
            Status of the newly created run

        """

    @abstractmethod
    async def stop_run(
        self, run_id: str, kind: RunKind
    ) -> ApiResult[RunStatusResponse]:
        """Stop an in-flight run."""
