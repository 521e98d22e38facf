"""Extract builtin function docs from the Zig language reference HTML.

The language reference lists every builtin under the "Builtin Functions" h2:

    <h2 id="Builtin-Functions">...</h2>
    <h3 id="addWithOverflow"><a href="#addWithOverflow">@addWithOverflow</a></h3>
    <pre><code>@addWithOverflow(a: anytype, b: anytype) struct { ... }</code></pre>
    <p>Performs <code>a + b</code> and returns a tuple ...</p>
    <ul><li>...</li></ul>
    <figure><figcaption>test_add.zig</figcaption><pre>...</pre></figure>

Each builtin becomes a BuiltinFunction whose docs are Markdown.
"""

import logging
import re
from typing import Iterator

from bs4 import BeautifulSoup, Tag

from zigdocs.types import BrokenInvariant, BuiltinFunction

logger = logging.getLogger(__name__)

REFERENCE_URL = "https://ziglang.org/documentation"
SECTION_ID = "Builtin-Functions"
SEE_ALSO = "see also:"


def extract_builtin_functions(html: str, version: str) -> list[BuiltinFunction]:
    """Parse every builtin function out of a language reference page.

    Args:
        html: The language reference page (https://ziglang.org/documentation/<version>/)
        version: Zig version, used to make in-page links absolute

    Returns:
        Builtins in page order

    Raises:
        BrokenInvariant: If the page has no Builtin Functions section
    """
    soup = BeautifulSoup(html, "html.parser")
    section = soup.find("h2", id=SECTION_ID)
    if section is None:
        raise BrokenInvariant("Could not find Builtin Functions section in the language reference")

    builtins = []
    for element in _following(section, stop={"h2"}):
        if element.name != "h3" or not element.has_attr("id"):
            continue
        anchor = element.find("a")
        func = anchor.get_text() if anchor is not None else ""
        if not func.startswith("@"):
            continue

        signature_block = element.find_next_sibling()
        if signature_block is not None and signature_block.name == "pre":
            signature = signature_block.get_text().strip()
            start = signature_block
        else:
            signature = ""
            start = element

        docs = _describe(start, version)
        builtins.append(BuiltinFunction(func=func, signature=signature, docs=docs))

    logger.info(f"Extracted {len(builtins)} builtin functions for Zig {version}")
    return builtins


def _following(element: Tag, stop: set[str]) -> Iterator[Tag]:
    """Sibling tags after `element`, up to (not including) the first tag named in `stop`."""
    for sibling in element.find_next_siblings():
        if sibling.name in stop:
            return
        yield sibling


def _describe(start: Tag, version: str) -> str:
    parts: list[str] = []
    for block in _following(start, stop={"h2", "h3"}):
        if block.name == "p":
            parts.append(_inline_markdown(block, version))
        elif block.name == "ul":
            for item in block.find_all("li", recursive=False):
                text = _inline_markdown(item, version)
                if text:
                    parts.append(f"* {text}")
        elif block.name == "figure":
            example = _figure_markdown(block)
            if example:
                parts.append(example)

    docs = re.sub(r"\n{2,}", "\n", "\n".join(parts)).rstrip("\n")
    if docs.lower().endswith(SEE_ALSO):
        docs = docs[: -len(SEE_ALSO)].strip()
    return docs


def _inline_markdown(element: Tag, version: str) -> str:
    """Flatten a block to one line of Markdown: links become [text](url), code becomes `code`."""
    for link in element.find_all("a"):
        href = link.get("href", "")
        if href.startswith("#"):
            href = f"{REFERENCE_URL}/{version}/{href}"
        link.replace_with(f"[{link.get_text()}]({href})")
    for code in element.find_all("code"):
        code.replace_with(f"`{code.get_text()}`")
    return " ".join(element.get_text().split())


def _figure_markdown(figure: Tag) -> str:
    caption_tag = figure.find("figcaption")
    caption = caption_tag.get_text().strip() if caption_tag is not None else ""
    pre = figure.find("pre")
    code = pre.get_text() if pre is not None else ""
    if not code:
        return ""

    label = ""
    lang = ""
    if caption:
        label = f"**{caption}**\n"
        if caption.endswith(".zig"):
            lang = "zig"
        elif "shell" in caption.lower():
            lang = "sh"
    return f"{label}\n```{lang}\n{code.strip()}\n```".strip()
