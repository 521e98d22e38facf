"""Loaded documentation for one Zig version, shared by all MCP tools."""

import logging
from dataclasses import dataclass

from zigdocs.docs import ensure_docs, load_builtins
from zigdocs.settings import ZigDocsSettings
from zigdocs.std.engine import StdIndex
from zigdocs.types import BuiltinFunction

logger = logging.getLogger(__name__)


@dataclass
class DocsSession:
    index: StdIndex
    builtins: list[BuiltinFunction]
    version: str


async def load_session(settings: ZigDocsSettings) -> DocsSession:
    """Ensure cached artifacts per the update policy, then load the engine and builtins."""
    artifacts = await ensure_docs(
        settings.version,
        policy=settings.update_policy,
        docs_url=settings.docs_url,
        timeout=settings.request_timeout,
    )
    index = StdIndex.load(artifacts.wasm_path.read_bytes(), artifacts.sources_path.read_bytes())
    builtins = load_builtins(artifacts.builtins_path)
    logger.info(f"Loaded Zig {settings.version} documentation ({len(builtins)} builtin functions)")
    return DocsSession(index=index, builtins=builtins, version=settings.version)
