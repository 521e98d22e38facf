"""Command line entry point for zigdocs.

Usage:
    python -m zigdocs                          # serve over stdio (default)
    python -m zigdocs serve -t http -p 8000    # serve over streamable HTTP
    python -m zigdocs update --version 0.14.1  # refresh cached artifacts and exit
"""

import zigdocs.sentry  # noqa: F401 - must be first to initialize Sentry

import argparse
import asyncio
import logging

from fastmcp.utilities.logging import configure_logging

from zigdocs.docs import ensure_docs
from zigdocs.session import load_session
from zigdocs.settings import ZigDocsSettings, zigdocs_settings
from zigdocs.types import UpdatePolicy, ZigDocsError
from zigdocs.unified import create_server

logger = logging.getLogger(__name__)

TRANSPORTS = ("stdio", "http", "sse")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="zigdocs", description="Zig documentation MCP server")
    parser.add_argument(
        "command",
        nargs="?",
        choices=("serve", "update"),
        default="serve",
        help="serve the MCP server (default) or refresh cached documentation and exit",
    )
    parser.add_argument(
        "--version",
        default=zigdocs_settings.version,
        help=f"Zig version to document (default: {zigdocs_settings.version})",
    )
    parser.add_argument(
        "--update-policy",
        type=UpdatePolicy,
        choices=list(UpdatePolicy),
        default=zigdocs_settings.update_policy,
        help=f"When to refresh cached documentation (default: {zigdocs_settings.update_policy.value})",
    )
    parser.add_argument(
        "-t",
        "--transport",
        choices=TRANSPORTS,
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind for http/sse (default: 127.0.0.1)")
    parser.add_argument("-p", "--port", type=int, default=8000, help="Port for http/sse (default: 8000)")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for `python -m zigdocs`."""
    args = build_parser().parse_args(argv)

    configure_logging(level=args.log_level)  # fastmcp logger
    configure_logging(level=args.log_level, logger=logging.getLogger("zigdocs"))  # zigdocs logger

    settings = zigdocs_settings.model_copy(update={"version": args.version, "update_policy": args.update_policy})

    try:
        if args.command == "update":
            asyncio.run(_update(settings))
            return 0
        session = asyncio.run(load_session(settings))
    except ZigDocsError as e:
        logger.error(str(e))
        return 1

    mcp = create_server(session, search_limit=settings.search_limit)
    if args.transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport=args.transport, host=args.host, port=args.port)
    return 0


async def _update(settings: ZigDocsSettings) -> None:
    # An explicit update always refreshes, whatever the configured policy
    artifacts = await ensure_docs(
        settings.version,
        policy=UpdatePolicy.STARTUP,
        docs_url=settings.docs_url,
        timeout=settings.request_timeout,
    )
    logger.info(f"Documentation cached in {artifacts.directory}")
