"""Member enumeration for namespaces, containers and type functions."""

import logging
from dataclasses import dataclass, field

from zigdocs.std.aliases import unwind
from zigdocs.std.engine import StdIndex
from zigdocs.std.markup import html_to_text
from zigdocs.std.resolver import (
    PUBLIC_ROOT,
    ROOT_SEGMENT,
    is_root_name,
    public_name,
    resolve,
)
from zigdocs.types import Category, Member

logger = logging.getLogger(__name__)

TYPE_CATEGORIES = frozenset({Category.CONTAINER, Category.TYPE, Category.TYPE_TYPE, Category.TYPE_FUNCTION})

# Query that surfaces the std.* re-exports (std.ArrayList, std.HashMap, ...)
_ROOT_ALIAS_QUERY = f"{PUBLIC_ROOT}."
_ROOT_ALIAS_PREFIX = f"{ROOT_SEGMENT}.{PUBLIC_ROOT}."


def describe(index: StdIndex, handle: int, name: str | None = None) -> Member:
    """Build a Member for a declaration, unwinding aliases for category and brief.

    A member whose alias chain is broken or cyclic is kept with category alias
    and no brief.
    """
    display = name if name is not None else public_name(index.fqn(handle))
    target = unwind(index, handle)
    if target is None:
        return Member(handle=handle, name=display, category=Category.ALIAS, brief="")
    brief = html_to_text(index.docs_html(target.handle, short=True))
    return Member(handle=target.handle, name=display, category=target.category, brief=brief)


def member_handles(index: StdIndex, handle: int, category: Category) -> list[int]:
    """Raw child handles of a concrete declaration, in engine order.

    Type functions keep their members on the returned type, which the engine
    exposes through a separate export.
    """
    if category is Category.TYPE_FUNCTION:
        return index.type_fn_members(handle, include_private=False)
    return index.namespace_members(handle, include_private=False)


def field_handles(index: StdIndex, handle: int, category: Category) -> list[int]:
    if category is Category.TYPE_FUNCTION:
        return index.type_fn_fields(handle)
    return index.fields(handle)


def enumerate_members(index: StdIndex, handle: int) -> list[Member]:
    """List the public members of a declaration (after unwinding it)."""
    parent = unwind(index, handle)
    if parent is None:
        return []
    return [describe(index, child) for child in member_handles(index, parent.handle, parent.category)]


def root_members(index: StdIndex) -> list[Member]:
    """Synthesize the `std` listing from the std.* re-exports.

    The public `std` surface is not a namespace the engine can list, so it is
    built from a full-text query: keep results exactly one level below std,
    de-duplicate by name and sort by name.
    """
    members: dict[str, Member] = {}
    for handle in index.run_query(_ROOT_ALIAS_QUERY, ignore_case=False):
        fqn = index.fqn(handle)
        if not fqn.startswith(_ROOT_ALIAS_PREFIX):
            continue
        name = fqn[len(ROOT_SEGMENT) + 1 :]
        if len(name.split(".")) != 2 or name in members:
            continue
        members[name] = describe(index, handle, name)
    return sorted(members.values(), key=lambda member: member.name)


def list_members(index: StdIndex, name: str) -> list[Member]:
    """List members of a user-typed name; empty when nothing resolves."""
    if is_root_name(name):
        return root_members(index)
    resolution = resolve(index, name)
    if resolution is None:
        return []
    return enumerate_members(index, resolution.handle)


def resolve_kind(index: StdIndex, name: str) -> tuple[str, str]:
    """Public name and category label of a user-typed name.

    The synthesized std root reports as a namespace; unresolvable names report
    their input and "unknown".
    """
    if is_root_name(name):
        return PUBLIC_ROOT, Category.NAMESPACE.label
    resolution = resolve(index, name)
    if resolution is None:
        return name.strip(), "unknown"
    target = unwind(index, resolution.handle)
    kind = target.category.label if target is not None else Category.ALIAS.label
    return public_name(resolution.candidate or resolution.requested), kind


@dataclass
class MemberGroups:
    """Members split into the sections a namespace document renders."""

    types: list[Member] = field(default_factory=list)
    namespaces: list[Member] = field(default_factory=list)
    functions: list[Member] = field(default_factory=list)
    values: list[Member] = field(default_factory=list)


def group_members(members: list[Member]) -> MemberGroups:
    groups = MemberGroups()
    for member in members:
        if member.category in TYPE_CATEGORIES:
            groups.types.append(member)
        elif member.category is Category.NAMESPACE:
            groups.namespaces.append(member)
        elif member.category is Category.FUNCTION:
            groups.functions.append(member)
        else:
            groups.values.append(member)
    return groups
