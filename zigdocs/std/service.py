"""Std service layer for documentation lookup, listing and search.

This is the middle layer between MCP tools and the index. It handles:
- Result type wrapping (Success/NoResults)
- Input validation
- Logging of each request
"""

import logging
from dataclasses import dataclass

from zigdocs.std.engine import StdIndex
from zigdocs.std.members import list_members, resolve_kind
from zigdocs.std.render import render_decl, render_source_file
from zigdocs.std.search import search_hits
from zigdocs.types import Member, NoResults, SearchHit, Success, ToolError

logger = logging.getLogger(__name__)


@dataclass
class MemberListing:
	"""Members of one parent, with the parent's public name and kind."""

	parent: str
	kind: str
	members: list[Member]


@dataclass
class SearchPage:
	"""A page of search hits out of `total` matches."""

	query: str
	total: int
	hits: list[SearchHit]


def std_get(index: StdIndex, fqn: str, include_source: bool = False) -> Success[str] | NoResults:
	"""Render documentation for a std declaration.

	Args:
	    index: Loaded documentation index
	    fqn: Name as typed by the user (e.g. "std.ArrayList", "mem.eql", "")
	    include_source: Append the declaration's source code

	Returns:
	    Success[str] with the Markdown document, or NoResults if nothing resolves
	"""
	logger.debug(f"std_get: fqn={fqn}, include_source={include_source}")

	markdown = render_decl(index, fqn, include_source=include_source)
	if markdown is None:
		return NoResults()
	return Success(markdown)


def std_members(index: StdIndex, parent: str) -> Success[MemberListing] | NoResults:
	"""List members of a std namespace, container or type function.

	Args:
	    index: Loaded documentation index
	    parent: Namespace path (e.g. "std", "std.fs", "fs.File")

	Returns:
	    Success[MemberListing], or NoResults if the parent is unknown or empty
	"""
	logger.debug(f"std_members: parent={parent}")

	members = list_members(index, parent)
	if not members:
		return NoResults()
	name, kind = resolve_kind(index, parent)
	return Success(MemberListing(parent=name, kind=kind, members=members))


def std_search(index: StdIndex, query: str, limit: int = 20) -> Success[SearchPage] | NoResults:
	"""Full-text search over std declarations.

	Raises:
	    ToolError: If query is empty
	"""
	if not query or not query.strip():
		raise ToolError("Search query cannot be empty")

	logger.debug(f"std_search: query={query}, limit={limit}")

	total, hits = search_hits(index, query.strip(), limit)
	if not hits:
		return NoResults()
	return Success(SearchPage(query=query.strip(), total=total, hits=hits))


def std_source_file(index: StdIndex, fqn: str) -> Success[str] | NoResults:
	"""Return the whole source file that declares `fqn`."""
	logger.debug(f"std_source_file: fqn={fqn}")

	markdown = render_source_file(index, fqn)
	if markdown is None:
		return NoResults()
	return Success(markdown)
