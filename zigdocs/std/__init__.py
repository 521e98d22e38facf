"""Std: query core over the Zig std documentation engine.

The engine (main.wasm plus sources.tar) answers declaration queries; this
package resolves user-typed names, unwinds aliases, enumerates members and
renders Markdown documents on top of it.

Usage as MCP server:
    from zigdocs.std import create_std_server
    create_std_server(index).run()

Usage as library:
    from zigdocs.std import StdIndex, std_get, std_members, std_search

    index = StdIndex.load(wasm_bytes, sources_tar)
    doc = std_get(index, "std.ArrayList")
"""

from zigdocs.std.engine import StdIndex
from zigdocs.std.server import create_std_server
from zigdocs.std.service import std_get, std_members, std_search, std_source_file

__all__ = [
    # Engine
    "StdIndex",
    # Server
    "create_std_server",
    # Service
    "std_get",
    "std_members",
    "std_search",
    "std_source_file",
]
