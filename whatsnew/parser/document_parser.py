"""
Markdown parser for "what's new" documents.

The document is read line by line:
1. "## <version>" opens a version section ("Released: <label>" may follow)
2. "### <category>" opens a category within the version
3. "#### <title> [<Stability>]" opens a change item within the category
4. Prose and fenced code blocks after a change header belong to that change

A prose line that would otherwise read as a heading or a fence can be
written with a leading backslash ("\\## not a header"); the backslash is
dropped from the description.

Prose outside a change item (title, preamble, section intros) is ignored.
Structural problems are reported as ParseError with the offending line.
"""
import logging
import re
import textwrap
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from whatsnew.core.exceptions import ParseError, ValidationError
from whatsnew.core.version_parser import VersionParser
from whatsnew.records.models import Category, ChangeItem, Stability, VersionEntry

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r'^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$')
RELEASED_PATTERN = re.compile(r'^released\s*:\s*(.+)$', re.IGNORECASE)
FENCE_PATTERN = re.compile(r'^\s*(```+|~~~+)')
STABILITY_TAG_PATTERN = re.compile(r'^(.*?)\s*\[([^\[\]]+)\]$')
LIST_ITEM_PATTERN = re.compile(r'^(?:[-*+]|\d+[.)])\s+')
ESCAPED_LINE_PATTERN = re.compile(r'^\\(?=\\*[#`~])')

TITLE_LEVEL = 1
VERSION_LEVEL = 2
CATEGORY_LEVEL = 3
CHANGE_LEVEL = 4


@dataclass
class _ChangeDraft:
    """Change item being accumulated while its lines are read."""
    category: Category
    title: str
    stability: Stability
    line_number: int
    description_lines: List[str] = field(default_factory=list)
    code_blocks: List[str] = field(default_factory=list)

    def build(self) -> ChangeItem:
        return ChangeItem(
            category=self.category,
            title=self.title,
            description=join_description(self.description_lines),
            code="\n\n".join(self.code_blocks) if self.code_blocks else None,
            stability=self.stability,
        )


@dataclass
class _VersionDraft:
    """Version section being accumulated."""
    version: str
    line_number: int
    release_date: Optional[str] = None
    changes: List[ChangeItem] = field(default_factory=list)

    def build(self) -> VersionEntry:
        return VersionEntry(
            version=self.version,
            release_date=self.release_date,
            changes=tuple(self.changes),
        )


def join_description(lines: List[str]) -> str:
    """
    Join description lines into paragraphs.

    Wrapped lines of a paragraph are joined with a space, list items keep
    their own line and paragraphs are separated by a blank line.
    """
    paragraphs: List[List[str]] = []
    current: List[str] = []

    for line in lines:
        if not line:
            if current:
                paragraphs.append(current)
                current = []
            continue
        if current and not LIST_ITEM_PATTERN.match(line):
            current[-1] = f"{current[-1]} {line}"
        else:
            current.append(line)

    if current:
        paragraphs.append(current)

    return "\n\n".join("\n".join(paragraph) for paragraph in paragraphs)


class DocumentParser:
    """
    Parser for markdown "what's new" documents.

    Version entries are returned in document order, which is taken to be the
    chronological release order (oldest first).
    """

    def __init__(self):
        self.version_parser = VersionParser()

    def parse(self, document: str, source: Optional[str] = None) -> Tuple[VersionEntry, ...]:
        """
        Parse a document into version entries.

        Args:
            document: Full document text
            source: Optional document name used in error messages and logs

        Returns:
            Tuple of VersionEntry in document order

        Raises:
            ParseError: If the document does not follow the expected section structure
        """
        # Byte-order mark left by editors that save UTF-8 with a signature
        document = document.lstrip("\ufeff")

        entries: List[VersionEntry] = []
        seen_versions = {}

        version: Optional[_VersionDraft] = None
        category: Optional[Category] = None
        change: Optional[_ChangeDraft] = None

        in_fence = False
        fence_marker = ""
        fence_start = 0
        fence_lines: List[str] = []
        expect_release = False

        def fail(message: str, line_number: int, **details) -> ParseError:
            return ParseError(message, details=details or None, line_number=line_number, source=source)

        def finish_change():
            nonlocal change
            if change is not None:
                version.changes.append(change.build())
                change = None

        def finish_version():
            nonlocal version
            finish_change()
            if version is not None:
                entries.append(version.build())
                version = None

        for line_number, raw_line in enumerate(document.splitlines(), start=1):
            line = raw_line.rstrip()
            stripped = line.strip()

            if in_fence:
                if stripped.startswith(fence_marker) and not stripped[len(fence_marker):].strip():
                    in_fence = False
                    if change is not None:
                        change.code_blocks.append(textwrap.dedent("\n".join(fence_lines)).strip("\n"))
                    fence_lines = []
                else:
                    fence_lines.append(line)
                continue

            fence_match = FENCE_PATTERN.match(line)
            if fence_match:
                in_fence = True
                fence_marker = fence_match.group(1)
                fence_start = line_number
                expect_release = False
                continue

            if not stripped:
                if change is not None:
                    change.description_lines.append("")
                continue

            heading = HEADING_PATTERN.match(stripped)
            level = len(heading.group(1)) if heading else 0

            if level == TITLE_LEVEL:
                if entries or version is not None:
                    raise fail("Document title after the first version header", line_number)
                continue

            if level == VERSION_LEVEL:
                finish_version()
                category = None
                raw_version = heading.group(2)
                try:
                    version_id = self.version_parser.normalize(raw_version)
                except ValidationError:
                    raise fail(f"Malformed version header: '{raw_version}'", line_number) from None
                if version_id in seen_versions:
                    raise fail(
                        f"Duplicate version header: '{version_id}'",
                        line_number,
                        first_line=seen_versions[version_id],
                    )
                seen_versions[version_id] = line_number
                version = _VersionDraft(version=version_id, line_number=line_number)
                expect_release = True
                continue

            if level == CATEGORY_LEVEL:
                if version is None:
                    raise fail("Category marker before any version header", line_number)
                finish_change()
                expect_release = False
                try:
                    category = Category.parse(heading.group(2))
                except ValidationError:
                    raise fail(f"Malformed category marker: '{heading.group(2)}'", line_number) from None
                continue

            if level == CHANGE_LEVEL:
                if category is None:
                    raise fail("Change header outside a category section", line_number)
                finish_change()
                title, stability = self._parse_change_header(heading.group(2), line_number, fail)
                change = _ChangeDraft(
                    category=category,
                    title=title,
                    stability=stability,
                    line_number=line_number,
                )
                continue

            if expect_release:
                expect_release = False
                released = RELEASED_PATTERN.match(stripped)
                if released:
                    version.release_date = released.group(1).strip()
                    continue

            if change is not None:
                change.description_lines.append(ESCAPED_LINE_PATTERN.sub("", stripped))
            else:
                logger.debug(f"Ignoring prose outside a change item at line {line_number}")

        if in_fence:
            raise fail("Unterminated code block", fence_start)

        finish_version()

        if not entries:
            raise fail("Document contains no version headers", 1 if document else None)

        change_count = sum(len(entry.changes) for entry in entries)
        logger.info(
            f"Parsed {len(entries)} versions with {change_count} changes"
            + (f" from {source}" if source else "")
        )
        return tuple(entries)

    def _parse_change_header(self, text: str, line_number: int, fail) -> Tuple[str, Stability]:
        """Split "<title> [<Stability>]" into title and stability (Stable when untagged)."""
        stability = Stability.STABLE
        tagged = STABILITY_TAG_PATTERN.match(text)
        if tagged:
            text = tagged.group(1)
            try:
                stability = Stability.parse(tagged.group(2))
            except ValidationError:
                raise fail(f"Unknown stability tag: '{tagged.group(2)}'", line_number) from None

        title = text.strip()
        if not title:
            raise fail("Change header without a title", line_number)
        return title, stability


# Singleton instance for convenience
_default_parser = None


def parse_document(document: str, source: Optional[str] = None) -> Tuple[VersionEntry, ...]:
    """
    Convenience function to parse a markdown document with the default parser.

    Raises:
        ParseError: If the document does not follow the expected section structure
    """
    global _default_parser
    if _default_parser is None:
        _default_parser = DocumentParser()
    return _default_parser.parse(document, source=source)
