"""FastMCP server for Zig builtin function tools.

This is the edge layer that:
1. Validates and parses MCP tool inputs
2. Ranks the scraped builtin list
3. Formats outputs for MCP
"""

import logging
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from zigdocs.builtins.ranker import USAGE_PROMPT, rank
from zigdocs.types import BuiltinFunction, ScoredBuiltin

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# FastMCP Server
# ─────────────────────────────────────────────────────────────────────────────


def create_builtins_server(functions: list[BuiltinFunction]) -> FastMCP:
	"""Create the builtin function tools over an already scraped list."""
	builtins = FastMCP(name="builtins")

	@builtins.tool
	async def list_builtin_functions() -> str:
		"""Lists all available Zig builtin functions.

		Builtin functions are provided by the compiler and are prefixed with '@'.
		The comptime keyword on a parameter means that the parameter must be known
		at compile time. Use this to discover what functions are available, then use
		'get_builtin_function' to get detailed documentation.
		"""
		listing = "\n".join(f"- {function.signature}" for function in functions)
		return f"Available {len(functions)} builtin functions:\n\n{listing}"

	@builtins.tool
	async def get_builtin_function(
		function_name: Annotated[
			str,
			Field(description="Function name or keywords (e.g., '@addWithOverflow', 'overflow', 'atomic')"),
		] = "",
	) -> str:
		"""Search for Zig builtin functions by name and get their documentation.

		Returns signatures and usage information for all matching functions,
		ranked by relevance.
		"""
		if not function_name.strip():
			return USAGE_PROMPT

		matches = rank(functions, function_name)
		logger.debug(f"get_builtin_function: query={function_name!r}, matches={len(matches)}")
		if not matches:
			return (
				f'No builtin functions found matching "{function_name}". '
				"Try using 'list_builtin_functions' to see available functions, or refine your search terms."
			)

		results = "\n\n---\n\n".join(_format_builtin(item) for item in matches)
		if len(matches) == 1:
			return results
		return f"Found {len(matches)} matching functions:\n\n{results}"

	return builtins


def _format_builtin(item: ScoredBuiltin) -> str:
	function = item.function
	return f"**{function.func}**\n```zig\n{function.signature}\n```\n\n{function.docs}"
