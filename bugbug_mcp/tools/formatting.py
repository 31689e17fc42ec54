"""Markdown helpers shared by the tool groups."""

import functools
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from bugbug_mcp.models.result import ApiError

log = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


def na(value: object) -> str:
    """Render a possibly missing value."""
    if value is None or value == "":
        return NOT_AVAILABLE
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def yes_no(value: bool | None) -> str:
    """Render a flag."""
    return "Yes" if value else "No"


def format_api_error(error: ApiError) -> str:
    """Render a failed remote call."""
    return f"Error: {error}"


def tool_errors[**P](
    action: str,
) -> Callable[[Callable[P, Awaitable[str]]], Callable[P, Awaitable[str]]]:
    """Turn any exception raised by a tool into an error message.

    Args:
        action: What the tool was doing, e.g. "fetching tests"

    """

    def decorator(fn: Callable[P, Awaitable[str]]) -> Callable[P, Awaitable[str]]:
        @functools.wraps(fn)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> str:
            try:
                return await fn(*args, **kwargs)
            except Exception as exc:
                log.error("Error %s: %s", action, exc, exc_info=exc)
                return f"Error {action}: {exc}"

        return wrapper

    return decorator
