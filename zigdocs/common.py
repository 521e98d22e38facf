"""Shared helpers for zigdocs MCP tools."""

import logging
from contextlib import contextmanager
from typing import Iterator

import sentry_sdk
from fastmcp.exceptions import ToolError as McpToolError

from zigdocs.types import EngineFault, ToolError

logger = logging.getLogger(__name__)


@contextmanager
def tool_errors(tool: str) -> Iterator[None]:
    """Translate zigdocs errors raised inside a tool into MCP tool errors.

    - ToolError (bad input) -> MCP error with the same message
    - EngineFault -> reported to Sentry, MCP error "Documentation engine failed: ..."

    Anything else propagates unchanged.
    """
    try:
        yield
    except ToolError as e:
        logger.warning(f"{tool}: {e}")
        raise McpToolError(str(e)) from e
    except EngineFault as e:
        sentry_sdk.capture_exception(e)
        logger.exception(f"{tool}: documentation engine failed")
        raise McpToolError(f"Documentation engine failed: {e}") from e
