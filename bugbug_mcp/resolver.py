"""Resolution of a test or suite name (or id) to a catalog id."""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from bugbug_mcp.models.catalog import Descriptor
from bugbug_mcp.models.result import (
    Ambiguous,
    ApiError,
    NotFound,
    ResolvedId,
    Resolution,
    SearchFailed,
)
from bugbug_mcp.models.run import RunKind
from bugbug_mcp.service import RunService

log = logging.getLogger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

SEARCH_PAGE_SIZE = 50
MAX_SUGGESTIONS = 5
MAX_CANDIDATES = 3


def is_uuid(value: str) -> bool:
    """Check whether a string is a canonical 8-4-4-4-12 hex UUID."""
    return UUID_PATTERN.match(value) is not None


def select_match(value: str, results: Sequence[Descriptor]) -> Descriptor | None:
    """Pick the exact (case-insensitive) name match, else the first substring match."""
    needle = value.lower()

    for descriptor in results:
        if descriptor.name.lower() == needle:
            return descriptor

    for descriptor in results:
        if needle in descriptor.name.lower():
            return descriptor

    return None


@dataclass(frozen=True, kw_only=True)
class NameOrIdResolver:
    """Turns a user-supplied name or id into a test or suite id.

    Several search results never block: the best match is selected and the
    outcome is ``Ambiguous`` so the caller can warn about the alternatives.
    """

    service: RunService

    async def resolve(self, value: str, kind: RunKind) -> Resolution:
        """Resolve a name or id.

        Args:
            value: Test or suite name, or a UUID
            kind: Catalog to search

        Returns:
            ResolvedId, Ambiguous, NotFound or SearchFailed

        """
        if is_uuid(value):
            # Existence is not checked; creating the run surfaces unknown ids
            return ResolvedId(id=value)

        page = await self.service.search(
            kind, query=value, page=1, page_size=SEARCH_PAGE_SIZE
        )
        if isinstance(page, ApiError):
            log.warning("Searching %ss for %r failed: %s", kind, value, page)
            return SearchFailed(query=value, error=page)

        results = list(page.results)
        if not results:
            log.info("No %s found with name %r", kind, value)
            return NotFound(query=value)

        match = select_match(value, results)
        if match is None:
            log.info(
                "No %s name matches %r among %d result(s)", kind, value, len(results)
            )
            return NotFound(
                query=value,
                suggestions=results[:MAX_SUGGESTIONS],
                total=len(results),
            )

        if len(results) > 1:
            log.info(
                "Several %ss match %r, selected %s (%s)",
                kind,
                value,
                match.name,
                match.id,
            )
            return Ambiguous(
                id=match.id,
                name=match.name,
                candidates=results[:MAX_CANDIDATES],
                total=len(results),
            )

        return ResolvedId(id=match.id, name=match.name)
