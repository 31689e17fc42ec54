"""Models for catalog entries: tests, suites and profiles."""

from collections.abc import Sequence
from datetime import datetime

from pydantic import Field, field_validator

from bugbug_mcp.models.base import Model


class Descriptor(Model):
    """A test or suite definition in the catalog.

    Names are free text and not guaranteed unique; ``id`` is the stable key.
    """

    id: str
    name: str = ""
    description: str | None = None
    is_active: bool | None = None
    is_recording: bool | None = None
    last_result: str | None = None
    tests_count: int | None = None
    created: datetime | None = None
    modified: datetime | None = None
    webapp_url: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _blank_name(cls, value: object) -> object:
        return "" if value is None else value


class Profile(Model):
    """A run profile."""

    id: str
    name: str
    is_default: bool | None = None


class Page[T](Model):
    """A paginated list response."""

    count: int = 0
    next: str | None = None
    previous: str | None = None
    page: int | None = None
    results: Sequence[T] = Field(default_factory=tuple)
