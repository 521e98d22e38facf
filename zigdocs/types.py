"""Type definitions for zigdocs.

This module contains:
- Exception hierarchy for structured error handling
- Result types for service return values
- Domain models shared across layers
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

# =============================================================================
# Exceptions
# =============================================================================


class ZigDocsError(Exception):
	"""Base for all zigdocs errors."""

	pass


class BrokenInvariant(ZigDocsError):
	"""Setup/config error - cannot continue (e.g., unknown Zig version)."""

	pass


class TransientError(ZigDocsError):
	"""Temporary failure - retry may succeed (e.g., network timeout)."""

	pass


class ToolError(ZigDocsError):
	"""Tool failed - try a different approach."""

	pass


class EngineFault(ZigDocsError):
	"""The documentation engine is unusable (failed to load, unknown category, missing export)."""

	pass


# =============================================================================
# Result Types
# =============================================================================

T = TypeVar("T")


@dataclass
class Success(Generic[T]):
	"""Service returned data successfully."""

	data: T


@dataclass
class NoResults:
	"""Service executed successfully but found nothing."""

	pass


# =============================================================================
# Value Objects
# =============================================================================


class Category(IntEnum):
	"""Declaration kind as reported by the engine's categorize_decl export."""

	NAMESPACE = 0
	CONTAINER = 1
	GLOBAL_VARIABLE = 2
	FUNCTION = 3
	PRIMITIVE = 4
	ERROR_SET = 5
	GLOBAL_CONST = 6
	ALIAS = 7
	TYPE = 8
	TYPE_TYPE = 9
	TYPE_FUNCTION = 10

	@property
	def label(self) -> str:
		return self.name.lower()


class UpdatePolicy(str, Enum):
	"""When cached documentation artifacts are refreshed."""

	MANUAL = "manual"
	DAILY = "daily"
	STARTUP = "startup"


# =============================================================================
# Domain Models
# =============================================================================


@dataclass(frozen=True)
class Member:
	"""A child declaration of a namespace, container or type function.

	``name`` is the public name the member was reached under (aliases keep
	their own name); ``handle``, ``category`` and ``brief`` describe the
	alias-unwound target.
	"""

	handle: int
	name: str
	category: Category
	brief: str


class BuiltinFunction(BaseModel):
	"""A compiler builtin scraped from the language reference."""

	func: str = Field(..., description="Builtin name including the '@' prefix")
	signature: str = Field(..., description="Signature as shown in the language reference")
	docs: str = Field(default="", description="Markdown description")


class ScoredBuiltin(BaseModel):
	"""A builtin function with its keyword relevance score."""

	function: BuiltinFunction
	score: int = Field(..., ge=0)


class SearchHit(BaseModel):
	"""A std library declaration matched by full-text search."""

	handle: int = Field(..., ge=0, description="Declaration handle in the loaded index")
	name: str = Field(..., description="Public fully qualified name (e.g. 'std.mem.eql')")
	kind: str = Field(..., description="Category label of the alias-unwound declaration")
	brief: str = Field(default="", description="First paragraph of the docs, plain text")
