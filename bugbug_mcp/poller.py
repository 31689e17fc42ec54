"""Blocking wait for a remote run to reach a terminal status."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field

from bugbug_mcp.models.result import (
    ApiError,
    Finished,
    StatusCheckFailed,
    TimedOut,
    WaitOutcome,
)
from bugbug_mcp.models.run import RunKind, RunStatus, is_terminal
from bugbug_mcp.service import RunService

log = logging.getLogger(__name__)

# (timeout, poll interval) in seconds
DEFAULT_WAIT: Mapping[RunKind, tuple[float, float]] = {
    "test": (30 * 60, 10),
    "suite": (60 * 60, 15),
}


def _loop_time() -> float:
    return asyncio.get_running_loop().time()


@dataclass(frozen=True, kw_only=True)
class WaitRequest:
    """Parameters for one wait call."""

    run_id: str
    kind: RunKind
    timeout: float
    poll_interval: float

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(
                f"poll_interval must be positive, got {self.poll_interval}"
            )

    @classmethod
    def for_kind(
        cls,
        run_id: str,
        kind: RunKind,
        timeout: float | None = None,
        poll_interval: float | None = None,
    ) -> "WaitRequest":
        """Build a request, filling omitted durations with the kind's defaults."""
        default_timeout, default_interval = DEFAULT_WAIT[kind]
        return cls(
            run_id=run_id,
            kind=kind,
            timeout=default_timeout if timeout is None else timeout,
            poll_interval=default_interval if poll_interval is None else poll_interval,
        )


@dataclass(frozen=True, kw_only=True)
class Poller:
    """Polls run status until a terminal status or the timeout.

    A failed status request ends the wait immediately; there is no retry
    beyond the poll loop itself. Elapsed time is measured from the start of
    the call, so the total wait never exceeds ``timeout + poll_interval``.
    """

    service: RunService
    clock: Callable[[], float] = field(default=_loop_time, repr=False)
    sleep: Callable[[float], Awaitable[None]] = field(
        default=asyncio.sleep, repr=False
    )

    async def wait(self, request: WaitRequest) -> WaitOutcome:
        """Wait for a run to finish.

        Args:
            request: Run to wait for and the wait budget

        Returns:
            Finished, TimedOut or StatusCheckFailed

        """
        try:
            return await self._poll(request)
        except Exception as exc:
            log.error(
                "Unexpected error waiting for %s run %s: %s",
                request.kind,
                request.run_id,
                exc,
                exc_info=exc,
            )
            return StatusCheckFailed(
                run_id=request.run_id, error=ApiError(status=None, reason=str(exc))
            )

    async def _poll(self, request: WaitRequest) -> WaitOutcome:
        started = self.clock()
        last_status: RunStatus | None = None

        while True:
            result = await self.service.get_status(request.run_id, request.kind)
            if isinstance(result, ApiError):
                log.warning(
                    "Status check failed for %s run %s: %s",
                    request.kind,
                    request.run_id,
                    result,
                )
                return StatusCheckFailed(run_id=request.run_id, error=result)

            last_status = result.status
            elapsed = self.clock() - started

            if is_terminal(result.status):
                log.info(
                    "%s run %s finished with status=%s after %.1fs",
                    request.kind.capitalize(),
                    request.run_id,
                    result.status,
                    elapsed,
                )
                return Finished(
                    run_id=request.run_id, status=result.status, elapsed=elapsed
                )

            if elapsed >= request.timeout:
                log.info(
                    "%s run %s did not finish within %ss (last status=%s)",
                    request.kind.capitalize(),
                    request.run_id,
                    request.timeout,
                    last_status,
                )
                return TimedOut(
                    run_id=request.run_id,
                    timeout=request.timeout,
                    last_status=last_status,
                )

            log.debug(
                "%s run %s still in status=%s",
                request.kind,
                request.run_id,
                last_status,
            )
            await self.sleep(request.poll_interval)
