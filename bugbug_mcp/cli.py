"""CLI entry point for the BugBug MCP server."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from bugbug_mcp.client import BugBugClient, ConnectionVerificationError
from bugbug_mcp.config import BugBugConfig
from bugbug_mcp.docs import ErrorDocsClient
from bugbug_mcp.server import create_server

log = logging.getLogger("bugbug_mcp")


class ConfigurationError(RuntimeError):
    """Raised when the server configuration is missing or invalid."""


def load_config(**overrides: Any) -> BugBugConfig:
    """Load configuration from the environment, applying CLI overrides.

    Raises:
        ConfigurationError: If the API key is missing or a value is invalid

    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return BugBugConfig(**values)
    except ValidationError as exc:
        missing = [
            str(error["loc"][0])
            for error in exc.errors()
            if error["type"] == "missing" and error["loc"]
        ]
        if "API_KEY" in missing or "api_key" in missing:
            raise ConfigurationError(
                "API_KEY environment variable is required"
            ) from exc
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


async def run(config: BugBugConfig) -> int:
    """Verify the API connection and serve tools over stdio until closed."""
    async with (
        BugBugClient.from_config(config) as client,
        ErrorDocsClient.from_config(config) as docs,
    ):
        try:
            await client.verify_connection()
        except ConnectionVerificationError as exc:
            log.error("%s", exc)
            return 1

        server = create_server(client, docs)
        log.info("Starting BugBug MCP server (api=%s)", config.api_base_url)
        await server.run_stdio_async()

    return 0


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="BugBug MCP server")
    parser.add_argument(
        "--api-base-url",
        default=None,
        help="BugBug API base URL (default: BUGBUG_API_BASE_URL or the public API)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=args.log_level or logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(api_base_url=args.api_base_url, log_level=args.log_level)
    except ConfigurationError as exc:
        log.error("%s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)

    try:
        exit_code = asyncio.run(run(config))
    except KeyboardInterrupt:
        log.info("Server stopped")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
