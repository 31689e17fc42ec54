"""Assembly of the completion payload for a finished run."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from bugbug_mcp.models.result import (
    ApiError,
    CompletionPayload,
    FailureContext,
    StepSummary,
)
from bugbug_mcp.models.run import (
    RunDetail,
    RunKind,
    RunStatus,
    StepDetail,
    is_failure,
    is_terminal,
)
from bugbug_mcp.service import RunService

log = logging.getLogger(__name__)


def select_steps(detail: RunDetail, kind: RunKind) -> Sequence[StepDetail]:
    """Return the run's step (test run) or sub-test (suite run) list.

    ``details`` is preferred when present; otherwise the kind-specific list.
    """
    if detail.details:
        return detail.details
    return detail.steps_runs if kind == "test" else detail.test_runs


def summarize_steps(steps: Sequence[StepDetail]) -> Sequence[StepSummary]:
    """Summarize steps in the order returned by the API."""
    return [
        StepSummary(
            identifier=step.step_id or step.id,
            name=step.name,
            status=step.status,
            duration=step.duration,
            error_code=step.error_code,
        )
        for step in steps
    ]


def find_failure_context(
    status: RunStatus, detail: RunDetail, steps: Sequence[StepDetail]
) -> FailureContext | None:
    """Locate the first failing step of a failed run."""
    if not is_failure(status):
        return None

    failed_step = next((step for step in steps if is_failure(step.status)), None)
    step_error = failed_step.error_code if failed_step else None
    return FailureContext(
        step_name=failed_step.name if failed_step else None,
        error_code=detail.error_code or step_error,
        error_message=detail.error_message,
    )


def collect_screenshots(
    detail: RunDetail, steps: Sequence[StepDetail]
) -> Sequence[str]:
    """Flatten failing steps' screenshots, then the run's own list."""
    urls = [
        screenshot.url
        for step in steps
        if is_failure(step.status)
        for screenshot in step.screenshots
    ]
    urls.extend(detail.screenshots)
    return urls


@dataclass(frozen=True, kw_only=True)
class RunFinalizer:
    """Builds the completion payload once a run reached a terminal status."""

    service: RunService

    async def finalize(
        self, run_id: str, kind: RunKind, status: RunStatus
    ) -> CompletionPayload:
        """Fetch run detail and assemble the completion payload.

        A failed detail fetch yields a degraded payload rather than an
        error: the run itself did finish with ``status``.

        Args:
            run_id: Run that finished
            kind: Whether the run is a test run or a suite run
            status: Terminal status observed by the poller

        """
        try:
            detail = await self.service.get_detail(run_id, kind)
        except Exception as exc:
            log.error(
                "Unexpected error fetching %s run %s: %s",
                kind,
                run_id,
                exc,
                exc_info=exc,
            )
            detail = ApiError(status=None, reason=str(exc))

        if isinstance(detail, ApiError):
            log.warning(
                "%s run %s finished with status=%s but detail is unavailable: %s",
                kind.capitalize(),
                run_id,
                status,
                detail,
            )
            return CompletionPayload(
                run_id=run_id, kind=kind, status=status, detail_error=detail
            )

        steps = select_steps(detail, kind)
        # The terminal decision already made is never reverted
        final_status = detail.status if is_terminal(detail.status) else status
        return CompletionPayload(
            run_id=run_id,
            kind=kind,
            status=final_status,
            detail=detail,
            step_summaries=summarize_steps(steps),
            failure_context=find_failure_context(final_status, detail, steps),
            screenshots=collect_screenshots(detail, steps),
        )
