"""
HTML rendition parser for "what's new" documents.

Published release notes are often only available as HTML. This module
flattens the HTML into the markdown line form understood by
DocumentParser, so both renditions share one grammar:
- h1..h4 become "#".."####" headings
- p becomes a paragraph line
- ul/ol become "- " list lines
- pre becomes a fenced code block

Only heading elements produce structure. Paragraph text that looks like a
heading or a fence is escaped, and code fences are made longer than any
backtick run inside the code.
"""
import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from whatsnew.parser.document_parser import parse_document
from whatsnew.records.models import VersionEntry

logger = logging.getLogger(__name__)

HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4}
BLOCK_TAGS = ["h1", "h2", "h3", "h4", "p", "pre", "ul", "ol"]
HTML_START_PATTERN = re.compile(r'^\s*(?:<!doctype\s+html|<html|<body|<h[1-6]|<div|<section|<article|<p[\s>])', re.IGNORECASE)
STRUCTURAL_TEXT_PATTERN = re.compile(r'^\\*[#`~]')
BACKTICK_RUN_PATTERN = re.compile(r'`+')


def _clean_text(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return re.sub(r'\s+', ' ', text).strip()


def _escape_prose(text: str) -> str:
    """Prefix a backslash when paragraph text would read as a heading or fence."""
    if STRUCTURAL_TEXT_PATTERN.match(text):
        return "\\" + text
    return text


def _code_fence(code: str) -> str:
    """Backtick fence longer than any backtick run in the code."""
    longest = max((len(run) for run in BACKTICK_RUN_PATTERN.findall(code)), default=0)
    return "`" * max(3, longest + 1)


def looks_like_html(document: str) -> bool:
    """Detect whether a document is an HTML rendition rather than markdown."""
    return bool(HTML_START_PATTERN.match(document or ""))


def html_to_markdown(html: str) -> str:
    """
    Convert an HTML rendition to the markdown line form.

    Only top-level block elements are converted; nested blocks (a paragraph
    inside a list item, say) are emitted as part of their enclosing block.

    Args:
        html: HTML document or fragment

    Returns:
        Markdown text accepted by DocumentParser
    """
    soup = BeautifulSoup(html, "html.parser")
    root = soup.body or soup
    lines: List[str] = []

    for element in root.find_all(BLOCK_TAGS):
        if element.find_parent(BLOCK_TAGS) is not None:
            continue

        if element.name in HEADING_LEVELS:
            text = _clean_text(element.get_text(" ", strip=True))
            if text:
                lines.append(f"{'#' * HEADING_LEVELS[element.name]} {text}")
        elif element.name == "pre":
            code = element.get_text().strip("\n")
            fence = _code_fence(code)
            lines.append(fence)
            lines.extend(code.splitlines())
            lines.append(fence)
        elif element.name in ("ul", "ol"):
            for item in element.find_all("li", recursive=False):
                text = _clean_text(item.get_text(" ", strip=True))
                if text:
                    lines.append(f"- {text}")
        else:
            text = _clean_text(element.get_text(" ", strip=True))
            if text:
                lines.append(_escape_prose(text))
        lines.append("")

    logger.debug(f"Converted HTML into {len(lines)} markdown lines")
    return "\n".join(lines)


def parse_html_document(html: str, source: Optional[str] = None) -> Tuple[VersionEntry, ...]:
    """
    Parse an HTML rendition into version entries.

    Raises:
        ParseError: If the converted document does not follow the expected section structure
    """
    return parse_document(html_to_markdown(html), source=source)
