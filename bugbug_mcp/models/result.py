"""Outcomes returned by the wait, finalize, resolve and launch operations.

None of these are exceptions: every expected failure mode is a value the
caller branches on.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from bugbug_mcp.models.catalog import Descriptor
from bugbug_mcp.models.run import RunDetail, RunKind, RunStatus


@dataclass(frozen=True, kw_only=True)
class ApiError:
    """A remote call that did not return a success status.

    ``status`` is None when the failure was an unexpected fault rather than
    an HTTP response; ``reason`` then carries the exception message.
    """

    status: int | None
    reason: str

    def __str__(self) -> str:
        if self.status is None:
            return self.reason
        return f"{self.status} {self.reason}".rstrip()


type ApiResult[T] = T | ApiError


# Poller outcomes


@dataclass(frozen=True, kw_only=True)
class Finished:
    """The run reached a terminal status."""

    run_id: str
    status: RunStatus
    elapsed: float


@dataclass(frozen=True, kw_only=True)
class TimedOut:
    """The wait budget elapsed before a terminal status was observed."""

    run_id: str
    timeout: float
    last_status: RunStatus | None = None


@dataclass(frozen=True, kw_only=True)
class StatusCheckFailed:
    """A status request failed; the wait stopped without retrying."""

    run_id: str
    error: ApiError


type WaitOutcome = Finished | TimedOut | StatusCheckFailed


# Finalizer payload


@dataclass(frozen=True, kw_only=True)
class StepSummary:
    """One step of a test run, or one test of a suite run."""

    identifier: str
    name: str | None
    status: str
    duration: str | None = None
    error_code: str | None = None


@dataclass(frozen=True, kw_only=True)
class FailureContext:
    """Where and why a failed run failed."""

    step_name: str | None = None
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True, kw_only=True)
class CompletionPayload:
    """Everything known about a finished run.

    When ``detail_error`` is set the run detail could not be fetched and only
    ``run_id``, ``kind`` and ``status`` are meaningful.
    """

    run_id: str
    kind: RunKind
    status: RunStatus
    detail: RunDetail | None = None
    step_summaries: Sequence[StepSummary] = field(default_factory=tuple)
    failure_context: FailureContext | None = None
    screenshots: Sequence[str] = field(default_factory=tuple)
    detail_error: ApiError | None = None

    @property
    def degraded(self) -> bool:
        """Whether the payload lacks run detail."""
        return self.detail_error is not None


# Resolver outcomes


@dataclass(frozen=True, kw_only=True)
class ResolvedId:
    """The input resolved to exactly one id."""

    id: str
    name: str | None = None


@dataclass(frozen=True, kw_only=True)
class Ambiguous:
    """The search returned several entries; ``id`` was selected anyway."""

    id: str
    name: str
    candidates: Sequence[Descriptor]
    total: int


@dataclass(frozen=True, kw_only=True)
class NotFound:
    """No catalog entry matched the input."""

    query: str
    suggestions: Sequence[Descriptor] = field(default_factory=tuple)
    total: int = 0


@dataclass(frozen=True, kw_only=True)
class SearchFailed:
    """The catalog search request failed."""

    query: str
    error: ApiError


type Resolution = ResolvedId | Ambiguous | NotFound | SearchFailed


# Launcher outcomes


@dataclass(frozen=True, kw_only=True)
class Launched:
    """A run was created."""

    kind: RunKind
    name_or_id: str
    target_id: str
    display_name: str
    run_id: str
    status: RunStatus
    webapp_url: str | None
    profile_name: str | None = None
    ambiguous: bool = False
    candidates: Sequence[Descriptor] = field(default_factory=tuple)
    total_matches: int = 1


@dataclass(frozen=True, kw_only=True)
class LaunchFailed:
    """The run could not be created.

    ``resolution`` is set when the name lookup failed; ``error`` when the
    create request (or an unexpected fault) failed.
    """

    kind: RunKind
    name_or_id: str
    resolution: NotFound | SearchFailed | None = None
    error: ApiError | None = None


type LaunchOutcome = Launched | LaunchFailed


@dataclass(frozen=True, kw_only=True)
class WaitReport:
    """Result of waiting for a run and, when it finished, finalizing it."""

    outcome: WaitOutcome
    completion: CompletionPayload | None = None
