"""Tests for name or id resolution."""

from unittest.mock import Mock

import pytest

from bugbug_mcp.models.catalog import Descriptor, Page
from bugbug_mcp.models.result import (
    Ambiguous,
    ApiError,
    NotFound,
    ResolvedId,
    SearchFailed,
)
from bugbug_mcp.resolver import NameOrIdResolver, is_uuid, select_match
from bugbug_mcp.service import RunService
from bugbug_mcp.testing.factories import DescriptorFactory

UUID = "5b1f0f9c-1f7e-4d2a-9a53-7c4a9d1e2b10"


def page_of(*names: str) -> Page[Descriptor]:
    return Page[Descriptor](
        count=len(names),
        results=[
            DescriptorFactory.build(id=f"id-{index}", name=name)
            for index, name in enumerate(names)
        ],
    )


@pytest.fixture
def service_mock() -> Mock:
    """Create mock run service."""
    return Mock(spec=RunService)


@pytest.fixture
def resolver(service_mock: Mock) -> NameOrIdResolver:
    return NameOrIdResolver(service=service_mock)


@pytest.mark.parametrize(
    "value",
    [UUID, UUID.upper(), "00000000-0000-0000-0000-000000000000"],
)
def test_recognizes_uuids(value: str) -> None:
    assert is_uuid(value)


@pytest.mark.parametrize(
    "value",
    [
        "Login flow",
        "5b1f0f9c1f7e4d2a9a537c4a9d1e2b10",
        f"{UUID}-extra",
        "5b1f0f9c-1f7e-4d2a-9a53-7c4a9d1e2b1g",
    ],
)
def test_rejects_non_uuids(value: str) -> None:
    assert not is_uuid(value)


async def test_uuid_resolves_without_network(
    resolver: NameOrIdResolver, service_mock: Mock
) -> None:
    """A UUID is used as-is; its existence is not checked."""
    resolution = await resolver.resolve(UUID, "test")

    assert resolution == ResolvedId(id=UUID)
    service_mock.search.assert_not_called()
    service_mock.get_descriptor.assert_not_called()


async def test_single_exact_match(
    resolver: NameOrIdResolver, service_mock: Mock
) -> None:
    service_mock.search.return_value = page_of("Login flow")

    resolution = await resolver.resolve("login FLOW", "test")

    assert resolution == ResolvedId(id="id-0", name="Login flow")
    service_mock.search.assert_called_once_with(
        "test", query="login FLOW", page=1, page_size=50
    )


async def test_exact_match_beats_earlier_substring_match(
    resolver: NameOrIdResolver, service_mock: Mock
) -> None:
    """An exact match is selected even when it is not the first result."""
    service_mock.search.return_value = page_of("Login flow extended", "Login flow")

    resolution = await resolver.resolve("Login flow", "suite")

    assert isinstance(resolution, Ambiguous)
    assert resolution.id == "id-1"
    assert resolution.name == "Login flow"
    assert resolution.total == 2


async def test_first_substring_match_when_no_exact_match(
    resolver: NameOrIdResolver, service_mock: Mock
) -> None:
    service_mock.search.return_value = page_of(
        "Checkout", "Login flow A", "Login flow B"
    )

    resolution = await resolver.resolve("login", "test")

    assert isinstance(resolution, Ambiguous)
    assert resolution.id == "id-1"


async def test_ambiguous_lists_at_most_three_candidates(
    resolver: NameOrIdResolver, service_mock: Mock
) -> None:
    service_mock.search.return_value = page_of(*(f"Smoke {i}" for i in range(7)))

    resolution = await resolver.resolve("Smoke", "test")

    assert isinstance(resolution, Ambiguous)
    assert [candidate.name for candidate in resolution.candidates] == [
        "Smoke 0",
        "Smoke 1",
        "Smoke 2",
    ]
    assert resolution.total == 7


async def test_no_results_is_not_found(
    resolver: NameOrIdResolver, service_mock: Mock
) -> None:
    service_mock.search.return_value = page_of()

    resolution = await resolver.resolve("Nothing", "suite")

    assert resolution == NotFound(query="Nothing")


async def test_unmatched_results_become_suggestions(
    resolver: NameOrIdResolver, service_mock: Mock
) -> None:
    """Fuzzy server results that do not contain the query are suggestions."""
    service_mock.search.return_value = page_of(*(f"Test {i}" for i in range(8)))

    resolution = await resolver.resolve("Signup", "test")

    assert isinstance(resolution, NotFound)
    assert len(resolution.suggestions) == 5
    assert resolution.total == 8


async def test_search_failure(
    resolver: NameOrIdResolver, service_mock: Mock
) -> None:
    error = ApiError(status=401, reason="Unauthorized")
    service_mock.search.return_value = error

    resolution = await resolver.resolve("Login flow", "test")

    assert resolution == SearchFailed(query="Login flow", error=error)


def test_select_match_returns_none_without_match() -> None:
    results = page_of("Checkout").results

    assert select_match("Login", results) is None
