"""Unified MCP server for zigdocs.

Mounts both sub-servers into a single MCP endpoint:
- list_std_members, get_std_doc_item, search_std_lib, get_std_source_file
- list_builtin_functions, get_builtin_function

Usage:
    session = await load_session(zigdocs_settings)
    mcp = create_server(session)
    mcp.run()  # stdio transport
"""

from fastmcp import FastMCP

from zigdocs.builtins.server import create_builtins_server
from zigdocs.session import DocsSession
from zigdocs.settings import zigdocs_settings
from zigdocs.std.server import create_std_server


def create_server(session: DocsSession, search_limit: int | None = None) -> FastMCP:
    """Create the ZigDocs MCP server over a loaded session."""
    limit = search_limit if search_limit is not None else zigdocs_settings.search_limit
    mcp = FastMCP(
        name="ZigDocs",
        instructions=(
            f"Documentation for the Zig {session.version} standard library and compiler builtins. "
            "Start with list_std_members or search_std_lib, then read items with get_std_doc_item."
        ),
    )

    # Tool names are already distinct, so sub-servers mount without prefixes
    mcp.mount(create_std_server(session.index, search_limit=limit))
    mcp.mount(create_builtins_server(session.builtins))
    return mcp
