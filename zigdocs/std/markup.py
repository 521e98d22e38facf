"""Normalization of engine HTML into Markdown or plain text.

The engine renders doc comments, signatures and source listings as HTML fragments
meant for the browser docs viewer. Nothing from it is inserted into documents
without passing through one of these helpers.
"""

import re

from bs4 import BeautifulSoup
from markdownify import markdownify

_BLANK_RUNS = re.compile(r"\n{3,}")


def _collapse(text: str) -> str:
	lines = [line.rstrip() for line in text.splitlines()]
	return _BLANK_RUNS.sub("\n\n", "\n".join(lines)).strip()


def html_to_markdown(html: str) -> str:
	"""Convert a prose fragment (doc comment) to Markdown.

	Paragraphs, inline code, links, lists and code blocks map to their Markdown
	equivalents. Runs of blank lines collapse to one.
	"""
	if not html:
		return ""
	markdown = markdownify(
		html,
		heading_style="ATX",
		bullets="-",
		escape_underscores=False,
		escape_asterisks=False,
		escape_misc=False,
	)
	return _collapse(markdown)


def html_to_text(html: str) -> str:
	"""Strip all tags and collapse whitespace to single spaces."""
	if not html:
		return ""
	return " ".join(BeautifulSoup(html, "html.parser").get_text().split())


def html_to_code(html: str) -> str:
	"""Strip tags from a code fragment, keeping line breaks and indentation."""
	if not html:
		return ""
	text = BeautifulSoup(html, "html.parser").get_text()
	return "\n".join(line.rstrip() for line in text.strip("\n").splitlines()).rstrip()


def split_error_html(html: str) -> tuple[str, str]:
	"""Split an error entry (<dt>name</dt><dd>docs</dd>) into (name, markdown docs)."""
	soup = BeautifulSoup(html, "html.parser")
	term = soup.find("dt")
	if term is None:
		return html_to_text(html), ""
	detail = soup.find("dd")
	description = html_to_markdown(detail.decode_contents()) if detail is not None else ""
	return " ".join(term.get_text().split()), description


def indent(text: str, prefix: str = "  ") -> str:
	"""Indent every non-blank line of a possibly multi-line block."""
	return "\n".join(prefix + line if line.strip() else "" for line in text.splitlines())
