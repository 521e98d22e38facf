"""Candidate resolution: map a user-typed name to a declaration handle.

Users write names the way Zig code imports them (`std.ArrayList`, `mem.eql`,
`std.fs.File`), while the index names everything from an internal `root` segment
and keeps many items at their implementation path (`root.array_list.ArrayList`).
Resolution bridges the two with one fixed precedence:

1. "", "std" or "root" -> the std module root, no probing
2. no prefix            -> root.<name>, std.<name>, <name>
3. "std." prefix        -> root.<rest>, <name>
4. "root." prefix       -> <name>
5. unresolved std.X     -> root.<snake(X)>.X, std.<snake(X)>.X
6. unresolved std.<...> -> root.<submodule>.<rest> for each of COMMON_SUBMODULES

Steps 5 and 6 are naming-convention guesses and can miss re-exports that do not
follow the convention.
"""

import logging
import re
from dataclasses import dataclass

from zigdocs.std.engine import StdIndex

logger = logging.getLogger(__name__)

ROOT_SEGMENT = "root"
PUBLIC_ROOT = "std"

COMMON_SUBMODULES = (
    "array_list",
    "hash_map",
    "linked_list",
    "priority_queue",
    "segmented_list",
    "multi_array_list",
    "bit_set",
    "enums",
    "mem",
    "fs",
    "json",
    "fmt",
    "crypto",
    "compress",
    "net",
    "http",
)

_ROOT_PREFIX = f"{ROOT_SEGMENT}."
_PUBLIC_PREFIX = f"{PUBLIC_ROOT}."
_CAMEL_HUMP = re.compile(r"(?<!^)([A-Z])")


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a name.

    ``candidate`` is the probe that matched, or None when the std root module
    was selected without probing.
    """

    requested: str
    candidate: str | None
    handle: int

    @property
    def is_root(self) -> bool:
        return self.candidate is None


def is_root_name(name: str) -> bool:
    return name.strip() in ("", ROOT_SEGMENT, PUBLIC_ROOT)


def public_name(fqn: str) -> str:
    """Replace the internal root segment with the public `std` alias."""
    if fqn == ROOT_SEGMENT:
        return PUBLIC_ROOT
    if fqn.startswith(_ROOT_PREFIX):
        return PUBLIC_ROOT + fqn[len(ROOT_SEGMENT) :]
    return fqn


def to_snake_case(name: str) -> str:
    """ArrayList -> array_list, HashMap -> hash_map."""
    return _CAMEL_HUMP.sub(r"_\1", name).lower()


def primary_candidates(name: str) -> list[str]:
    """Probes for steps 2-4, in order."""
    if name.startswith(_PUBLIC_PREFIX):
        return [_ROOT_PREFIX + name[len(_PUBLIC_PREFIX) :], name]
    if name.startswith(_ROOT_PREFIX):
        return [name]
    return [_ROOT_PREFIX + name, _PUBLIC_PREFIX + name, name]


def fallback_candidates(name: str) -> list[str]:
    """Probes for steps 5-6. Only `std.`-prefixed names get fallbacks."""
    if not name.startswith(_PUBLIC_PREFIX):
        return []

    rest = name[len(_PUBLIC_PREFIX) :]
    candidates = []

    # std.ArrayList is re-exported from std.array_list.ArrayList
    if "." not in rest:
        snake = to_snake_case(rest)
        if snake != rest.lower():
            candidates.append(f"{_ROOT_PREFIX}{snake}.{rest}")
            candidates.append(f"{_PUBLIC_PREFIX}{snake}.{rest}")

    candidates.extend(f"{_ROOT_PREFIX}{submodule}.{rest}" for submodule in COMMON_SUBMODULES)
    return candidates


def find_root_module(index: StdIndex) -> int:
    """Handle of the std module root (module 0 if no module is named `std`)."""
    names = index.module_names()
    position = names.index(PUBLIC_ROOT) if PUBLIC_ROOT in names else 0
    return index.module_root(position)


def resolve(index: StdIndex, name: str) -> Resolution | None:
    """Resolve a user-typed name, or return None if no candidate matches."""
    requested = name.strip()
    if is_root_name(requested):
        return Resolution(requested=requested, candidate=None, handle=find_root_module(index))

    for candidate in primary_candidates(requested) + fallback_candidates(requested):
        handle = index.find_decl(candidate)
        if handle is not None:
            if candidate != requested:
                logger.debug(f"Resolved '{requested}' via '{candidate}'")
            return Resolution(requested=requested, candidate=candidate, handle=handle)

    logger.debug(f"No declaration matches '{requested}'")
    return None
