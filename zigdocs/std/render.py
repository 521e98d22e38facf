"""Markdown rendering of std declarations.

One document per declaration, laid out by category:

- namespace / container: docs, then Types / Namespaces / Functions / Values / Fields
- function: docs, Signature, Parameters, Errors, Example, Source
- type_function: the function layout plus its member sections
- error_set: docs, Errors
- anything else: docs, Type, Source

Aliases are never rendered themselves; the document describes the concrete
declaration at the end of the alias chain. Empty sections are left out.
"""

import logging

from zigdocs.std.aliases import unwind
from zigdocs.std.engine import StdIndex
from zigdocs.std.markup import (
    html_to_code,
    html_to_markdown,
    html_to_text,
    indent,
    split_error_html,
)
from zigdocs.std.members import describe, field_handles, group_members, member_handles
from zigdocs.std.resolver import (
    PUBLIC_ROOT,
    ROOT_SEGMENT,
    Resolution,
    public_name,
    resolve,
)
from zigdocs.types import Category, Member

logger = logging.getLogger(__name__)

_REEXPORT_PREFIX = f"{ROOT_SEGMENT}.{PUBLIC_ROOT}."


def render_decl(index: StdIndex, name: str, include_source: bool = False) -> str | None:
    """Render documentation for a user-typed name, or None if nothing resolves."""
    resolution = resolve(index, name)
    if resolution is None:
        return None
    return render(index, resolution, include_source=include_source)


def render(index: StdIndex, resolution: Resolution, include_source: bool = False) -> str | None:
    target = unwind(index, resolution.handle)
    if target is None:
        logger.debug(f"'{resolution.requested}' resolved to an unresolvable alias")
        return None

    handle, category = target
    physical = public_name(index.fqn(handle))
    title = display_title(index, resolution, physical)
    blocks = [f"# {title}", _kind_line(index, handle, category, title, physical)]

    match category:
        case Category.NAMESPACE | Category.CONTAINER:
            blocks.append(html_to_markdown(index.docs_html(handle)))
            blocks.extend(_member_blocks(index, handle, category))
        case Category.FUNCTION:
            blocks.extend(_function_blocks(index, handle, include_source))
        case Category.TYPE_FUNCTION:
            blocks.extend(_function_blocks(index, handle, include_source))
            blocks.extend(_member_blocks(index, handle, category))
        case Category.ERROR_SET:
            blocks.append(html_to_markdown(index.docs_html(handle)))
            blocks.append(_section("Errors", [_error_entry(index.error_html(handle, e)) for e in index.decl_error_set(handle)]))
        case _:
            blocks.append(html_to_markdown(index.docs_html(handle)))
            type_text = html_to_text(index.type_html(handle))
            if type_text:
                blocks.append(f"**Type:** `{type_text}`")
            if include_source:
                blocks.append(_fenced("Source", html_to_code(index.source_html(handle))))

    return "\n\n".join(block for block in blocks if block) + "\n"


def display_title(index: StdIndex, resolution: Resolution, physical: str) -> str:
    """Title for a rendered declaration.

    Short std.X names stay as the user typed them instead of the deeper
    implementation path (std.ArrayList rather than std.array_list.ArrayList).
    """
    if resolution.is_root:
        return PUBLIC_ROOT
    requested = resolution.requested
    if requested.startswith(f"{PUBLIC_ROOT}.") and requested.count(".") == 1:
        return requested
    matched = index.fqn(resolution.handle)
    if matched.startswith(_REEXPORT_PREFIX) and matched.count(".") == 2:
        return matched[len(ROOT_SEGMENT) + 1 :]
    return physical


def render_source_file(index: StdIndex, name: str) -> str | None:
    """Render the whole source file that declares a user-typed name."""
    resolution = resolve(index, name)
    if resolution is None:
        return None
    target = unwind(index, resolution.handle)
    handle = target.handle if target is not None else resolution.handle

    path = index.file_path(handle)
    if not path:
        return None
    file_root = index.find_file_root(path)
    if file_root is None:
        logger.debug(f"No file root for '{path}'")
        return None
    return f"# {path}\n\n```zig\n{html_to_code(index.source_html(file_root))}\n```\n"


# ─────────────────────────────────────────────────────────────────────────────
# Blocks
# ─────────────────────────────────────────────────────────────────────────────


def _kind_line(index: StdIndex, handle: int, category: Category, title: str, physical: str) -> str:
    line = f"*{category.label}*"
    parent = index.parent(handle)
    if parent is not None:
        line += f" in `{public_name(index.fqn(parent))}`"
    if title != physical:
        line += f", defined as `{physical}`"
    return line


def _section(heading: str, lines: list[str]) -> str:
    if not lines:
        return ""
    return f"## {heading}\n\n" + "\n".join(lines)


def _fenced(heading: str, code: str) -> str:
    if not code:
        return ""
    return f"## {heading}\n\n```zig\n{code}\n```"


def _function_blocks(index: StdIndex, handle: int, include_source: bool) -> list[str]:
    params = [html_to_text(index.param_html(handle, param)) for param in index.params(handle)]
    return [
        html_to_markdown(index.docs_html(handle)),
        _fenced("Signature", html_to_code(index.fn_proto_html(handle))),
        _section("Parameters", [f"- {param or '_'}" for param in params]),
        _section("Errors", _function_errors(index, handle)),
        _fenced("Example", html_to_code(index.doctest_html(handle))),
        _fenced("Source", html_to_code(index.source_html(handle))) if include_source else "",
    ]


def _function_errors(index: StdIndex, handle: int) -> list[str]:
    error_set = index.fn_error_set(handle)
    if error_set is None:
        return []
    owner = index.error_set_owner(handle, error_set)
    return [_error_entry(index.error_html(owner, error)) for error in index.error_set_entries(handle, error_set)]


def _error_entry(html: str) -> str:
    name, description = split_error_html(html)
    if not description:
        return f"- {name}"
    return f"- {name}\n{indent(description)}"


def _member_blocks(index: StdIndex, handle: int, category: Category) -> list[str]:
    members = [describe(index, child) for child in member_handles(index, handle, category)]
    groups = group_members(members)
    fields = [html_to_text(index.field_html(handle, f)) for f in field_handles(index, handle, category)]
    return [
        _section("Types", [_bullet(member) for member in groups.types]),
        _section("Namespaces", [_bullet(member) for member in groups.namespaces]),
        _section("Functions", [_function_bullet(index, member) for member in groups.functions]),
        _section("Values", [_value_bullet(index, member) for member in groups.values]),
        _section("Fields", [f"- {text}" for text in fields if text]),
    ]


def _bullet(member: Member) -> str:
    if member.brief:
        return f"- **{member.name}**: {member.brief}"
    return f"- **{member.name}**"


def _function_bullet(index: StdIndex, member: Member) -> str:
    line = f"- **{member.name}**"
    signature = html_to_text(index.fn_proto_html(member.handle, short=True))
    if signature:
        line += f" `{signature}`"
    if member.brief:
        line += f"\n  {member.brief}"
    return line


def _value_bullet(index: StdIndex, member: Member) -> str:
    line = f"- **{member.name}**"
    # Broken alias chains keep the alias handle; it has no type of its own
    if member.category is not Category.ALIAS:
        type_text = html_to_text(index.type_html(member.handle))
        if type_text:
            line += f" `{type_text}`"
    if member.brief:
        line += f": {member.brief}"
    return line
