"""FastMCP server for Zig standard library documentation tools.

This is the edge layer that:
1. Validates and parses MCP tool inputs
2. Calls std service functions
3. Formats outputs for MCP
"""

import logging
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from zigdocs.common import tool_errors
from zigdocs.std.engine import StdIndex
from zigdocs.std.service import MemberListing, SearchPage, std_get, std_members, std_search, std_source_file
from zigdocs.types import NoResults, Success

logger = logging.getLogger(__name__)

LIST_MEMBERS_DESCRIPTION = """List all members (functions, types, sub-namespaces, etc.) of a Zig stdlib namespace/type/module.

- Members can be of kind: 'namespace' (submodule), 'container' (struct/enum/union/opaque), 'function', 'type', 'global_const', etc.
- For 'container' and 'namespace' kinds, call this tool again with the member's name to explore its members.
- Use 'std.' prefix or no prefix for top-level queries (e.g., 'std.fs' or 'fs').
- The output uses 'std.' as the root, matching Zig's import style.

Kind summary:
- namespace: module or namespace block (can be explored recursively)
- container: struct, enum, union, or opaque (can be explored recursively)
- type_function: function returning a type, like ArrayList (can be explored recursively)
- function: function (cannot be explored recursively)
- type: type alias or type (cannot be explored recursively)
- global_const: global constant (cannot be explored recursively)
- primitive: built-in type like u8, i32, etc. (cannot be explored recursively)
"""


# ─────────────────────────────────────────────────────────────────────────────
# FastMCP Server
# ─────────────────────────────────────────────────────────────────────────────


def create_std_server(index: StdIndex, search_limit: int = 20) -> FastMCP:
	"""Create the std documentation tools bound to one loaded index."""
	std = FastMCP(name="std")

	@std.tool(description=LIST_MEMBERS_DESCRIPTION)
	async def list_std_members(
		parent: Annotated[
			str,
			Field(description="Namespace path (e.g., 'std', 'std.fs', 'std.ArrayList', 'mem')"),
		] = "std",
	) -> str:
		with tool_errors("list_std_members"):
			match std_members(index, parent):
				case Success(listing):
					return _format_members(listing)
				case NoResults():
					return f'No members found in "{parent}".'

	@std.tool
	async def get_std_doc_item(
		fqn: Annotated[
			str,
			Field(description="Fully qualified name of the item (e.g., 'std.fs.File.read' or 'fs.File.read')"),
		],
		include_source: Annotated[
			bool,
			Field(description="Whether to include the item's source code"),
		] = False,
	) -> str:
		"""Get detailed documentation for a specific Zig stdlib item (function, type, struct, etc.).

		Returns kind, signature, full docs, parameters, errors, examples, and
		optionally source code. Short names like 'std.ArrayList' resolve to their
		implementation (std.array_list.ArrayList).

		Examples:
		    - fqn="std.mem.Allocator" - the Allocator interface
		    - fqn="std.ArrayList" - the ArrayList type function
		    - fqn="std.fs.File.read", include_source=true - docs plus source
		"""
		with tool_errors("get_std_doc_item"):
			match std_get(index, fqn, include_source):
				case Success(markdown):
					return markdown
				case NoResults():
					return f'No documentation found for "{fqn}".'

	@std.tool
	async def search_std_lib(
		query: Annotated[
			str,
			Field(description="Search terms (e.g., 'ArrayList', 'print', 'allocator', 'HashMap')"),
		],
		limit: Annotated[int, Field(description="Maximum number of results", ge=1, le=200)] = search_limit,
	) -> str:
		"""Search the Zig standard library for functions, types, namespaces and other declarations.

		Matching is case-insensitive unless the query contains an uppercase letter.
		Use get_std_doc_item on a result to read its documentation.
		"""
		with tool_errors("search_std_lib"):
			match std_search(index, query, limit):
				case Success(page):
					return _format_search_page(page)
				case NoResults():
					return f'# Search Results\n\nQuery: "{query.strip()}"\n\nNo results found.'

	@std.tool
	async def get_std_source_file(
		fqn: Annotated[
			str,
			Field(description="Fully qualified name of any item declared in the file (e.g., 'std.ArrayList')"),
		],
	) -> str:
		"""Return the entire source file where a Zig stdlib item is implemented."""
		with tool_errors("get_std_source_file"):
			match std_source_file(index, fqn):
				case Success(markdown):
					return markdown
				case NoResults():
					return f'Could not find source file for "{fqn}".'

	return std


def _format_members(listing: MemberListing) -> str:
	"""Format a member listing for display."""
	lines = []
	for member in listing.members:
		lines.append(f"- **{member.name}** ({member.category.label})")
		if member.brief:
			lines.append(f"  {member.brief}")
	return f"Members of `{listing.parent}` ({listing.kind}):\n\n" + "\n".join(lines)


def _format_search_page(page: SearchPage) -> str:
	"""Format search hits for display."""
	lines = [
		"# Search Results",
		"",
		f'Query: "{page.query}"',
		"",
		f"Found {page.total} results (showing {len(page.hits)}):",
		"",
	]
	for hit in page.hits:
		lines.append(f"- {hit.name} ({hit.kind})")
	return "\n".join(lines)
