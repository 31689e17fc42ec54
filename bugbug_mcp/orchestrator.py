"""Caller-facing launch, wait and finalize operations over one service."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from bugbug_mcp.finalizer import RunFinalizer
from bugbug_mcp.launcher import RunLauncher
from bugbug_mcp.models.result import (
    CompletionPayload,
    Finished,
    LaunchOutcome,
    WaitOutcome,
    WaitReport,
)
from bugbug_mcp.models.run import RunKind, RunStatus, VariableInput
from bugbug_mcp.poller import Poller, WaitRequest
from bugbug_mcp.service import RunService

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class RunOrchestrator:
    """Composes launching, polling and finalizing runs.

    All components share the single injected service; no state is kept
    between calls.
    """

    poller: Poller
    finalizer: RunFinalizer
    launcher: RunLauncher

    @classmethod
    def for_service(cls, service: RunService) -> "RunOrchestrator":
        """Build every component over the same service."""
        return cls(
            poller=Poller(service=service),
            finalizer=RunFinalizer(service=service),
            launcher=RunLauncher.for_service(service),
        )

    async def launch(
        self,
        name_or_id: str,
        kind: RunKind,
        profile_name: str | None = None,
        variables: Sequence[VariableInput] | None = None,
    ) -> LaunchOutcome:
        """Resolve a name or id and start a run."""
        return await self.launcher.launch(name_or_id, kind, profile_name, variables)

    async def wait(self, request: WaitRequest) -> WaitOutcome:
        """Poll a run until it finishes or the wait budget runs out."""
        return await self.poller.wait(request)

    async def finalize(
        self, run_id: str, kind: RunKind, status: RunStatus
    ) -> CompletionPayload:
        """Assemble the completion payload for a finished run."""
        return await self.finalizer.finalize(run_id, kind, status)

    async def wait_for_run(self, request: WaitRequest) -> WaitReport:
        """Wait for a run and finalize it once it finished.

        Args:
            request: Run to wait for and the wait budget

        Returns:
            The wait outcome, with the completion payload when it finished

        """
        log.info(
            "Waiting for %s run %s (timeout=%ss, poll_interval=%ss)",
            request.kind,
            request.run_id,
            request.timeout,
            request.poll_interval,
        )
        outcome = await self.wait(request)
        if not isinstance(outcome, Finished):
            return WaitReport(outcome=outcome)

        completion = await self.finalize(outcome.run_id, request.kind, outcome.status)
        return WaitReport(outcome=outcome, completion=completion)
