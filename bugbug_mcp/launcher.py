"""Starting a test or suite run from a name or id."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from bugbug_mcp.models.catalog import Descriptor
from bugbug_mcp.models.result import (
    Ambiguous,
    ApiError,
    LaunchFailed,
    Launched,
    LaunchOutcome,
    NotFound,
    SearchFailed,
)
from bugbug_mcp.models.run import RunKind, Variable, VariableInput
from bugbug_mcp.resolver import NameOrIdResolver, is_uuid
from bugbug_mcp.service import RunService

log = logging.getLogger(__name__)


def filter_variables(
    variables: Sequence[VariableInput] | None,
) -> Sequence[Variable] | None:
    """Drop variables without a value; they are not sent at all."""
    if variables is None:
        return None
    return [
        Variable(key=variable.key, value=variable.value)
        for variable in variables
        if variable.value is not None
    ]


@dataclass(frozen=True, kw_only=True)
class RunLauncher:
    """Resolves a name or id and creates a run for it."""

    service: RunService
    resolver: NameOrIdResolver

    @classmethod
    def for_service(cls, service: RunService) -> "RunLauncher":
        """Create a launcher resolving names against the same service."""
        return cls(service=service, resolver=NameOrIdResolver(service=service))

    async def launch(
        self,
        name_or_id: str,
        kind: RunKind,
        profile_name: str | None = None,
        variables: Sequence[VariableInput] | None = None,
    ) -> LaunchOutcome:
        """Start a run.

        Args:
            name_or_id: Test or suite name, or its UUID
            kind: Whether to run a test or a suite
            profile_name: Run profile; the server default when omitted
            variables: Variable overrides; entries without a value are dropped

        Returns:
            Launched, or LaunchFailed carrying the resolution or request error

        """
        try:
            return await self._launch(name_or_id, kind, profile_name, variables)
        except Exception as exc:
            log.error(
                "Unexpected error launching %s %r: %s",
                kind,
                name_or_id,
                exc,
                exc_info=exc,
            )
            return LaunchFailed(
                kind=kind,
                name_or_id=name_or_id,
                error=ApiError(status=None, reason=str(exc)),
            )

    async def _launch(
        self,
        name_or_id: str,
        kind: RunKind,
        profile_name: str | None,
        variables: Sequence[VariableInput] | None,
    ) -> LaunchOutcome:
        resolution = await self.resolver.resolve(name_or_id, kind)
        if isinstance(resolution, (NotFound, SearchFailed)):
            return LaunchFailed(kind=kind, name_or_id=name_or_id, resolution=resolution)

        run = await self.service.create_run(
            resolution.id,
            kind,
            profile_name=profile_name,
            variables=filter_variables(variables),
            triggered_by="api",
        )
        if isinstance(run, ApiError):
            log.warning("Starting %s run for %s failed: %s", kind, resolution.id, run)
            return LaunchFailed(kind=kind, name_or_id=name_or_id, error=run)

        log.info("Started %s run %s for %s", kind, run.id, resolution.id)

        display_name = resolution.name or name_or_id
        if is_uuid(name_or_id):
            display_name = await self._lookup_name(kind, resolution.id)

        candidates: Sequence[Descriptor] = ()
        total_matches = 1
        if isinstance(resolution, Ambiguous):
            candidates, total_matches = resolution.candidates, resolution.total

        return Launched(
            kind=kind,
            name_or_id=name_or_id,
            target_id=resolution.id,
            display_name=display_name,
            run_id=run.id,
            status=run.status,
            webapp_url=run.webapp_url,
            profile_name=profile_name,
            ambiguous=isinstance(resolution, Ambiguous),
            candidates=candidates,
            total_matches=total_matches,
        )

    async def _lookup_name(self, kind: RunKind, target_id: str) -> str:
        """Best-effort lookup of a display name; falls back to the id."""
        try:
            descriptor = await self.service.get_descriptor(kind, target_id)
        except Exception as exc:
            log.debug("Name lookup for %s %s raised: %s", kind, target_id, exc)
            return target_id

        if isinstance(descriptor, ApiError):
            log.debug("Name lookup for %s %s failed: %s", kind, target_id, descriptor)
            return target_id
        return descriptor.name
