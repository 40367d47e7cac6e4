"""
Record Store for version-change documents.

This module owns the loaded records:
- Parse the static document once into an ordered tuple of VersionEntry
- Look up entries by version identifier
- Expose chronological positions for range queries

The store has no mutation API. A changed source document is loaded into a
new store that replaces the old one wholesale.
"""
import logging
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

from whatsnew.core.config import (
    DEFAULT_DOCUMENT_PACKAGE,
    DEFAULT_DOCUMENT_RESOURCE,
    DOCUMENT_ENCODING,
    get_document_path,
)
from whatsnew.core.exceptions import ParseError, ValidationError, VersionNotFoundError
from whatsnew.core.version_parser import VersionParser
from whatsnew.parser.document_parser import parse_document
from whatsnew.parser.html_parser import looks_like_html, parse_html_document
from whatsnew.records.models import VersionEntry

logger = logging.getLogger(__name__)


def load(document: str, source: Optional[str] = None) -> Tuple[VersionEntry, ...]:
    """
    Parse a document into an ordered tuple of version entries.

    Markdown and HTML renditions are both accepted.

    Args:
        document: Full document text
        source: Optional document name used in error messages and logs

    Returns:
        Tuple of VersionEntry in chronological (document) order

    Raises:
        ParseError: If the document does not follow the expected section structure
    """
    if looks_like_html(document):
        logger.debug("Document looks like HTML, converting before parsing")
        return parse_html_document(document, source=source)
    return parse_document(document, source=source)


class RecordStore:
    """
    Read-only collection of version entries.

    Safe to share between readers: nothing is mutated after construction.
    """

    def __init__(self, entries: Iterable[VersionEntry], source: Optional[str] = None):
        """
        Initialize the store.

        Args:
            entries: Version entries in chronological order
            source: Name of the document the entries were loaded from

        Raises:
            ValidationError: If two entries share a version identifier
        """
        self.source = source
        self.version_parser = VersionParser()
        self._entries: Tuple[VersionEntry, ...] = tuple(entries)
        self._positions: Dict[str, int] = {}

        for position, entry in enumerate(self._entries):
            if entry.version in self._positions:
                raise ValidationError(
                    f"Duplicate version in record store: '{entry.version}'",
                    field_name="version",
                    field_value=entry.version,
                )
            self._positions[entry.version] = position

        self._warn_on_unordered_versions()

    @classmethod
    def from_document(cls, document: str, source: Optional[str] = None) -> "RecordStore":
        """Build a store from document text."""
        return cls(load(document, source=source), source=source)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "RecordStore":
        """
        Build a store from a document file.

        Raises:
            ParseError: If the file is not valid UTF-8 or the document is malformed
        """
        path = Path(path)
        logger.info(f"Loading document from {path}")
        try:
            document = path.read_text(encoding=DOCUMENT_ENCODING)
        except UnicodeDecodeError as e:
            raise ParseError(
                f"Document is not valid UTF-8 text: {e.reason} at byte {e.start}",
                source=str(path),
            ) from e
        return cls.from_document(document, source=str(path))

    @classmethod
    def from_default(cls) -> "RecordStore":
        """Build a store from the document embedded in the package."""
        resource = resources.files(DEFAULT_DOCUMENT_PACKAGE).joinpath(DEFAULT_DOCUMENT_RESOURCE)
        logger.info(f"Loading embedded document {DEFAULT_DOCUMENT_RESOURCE}")
        document = resource.read_text(encoding=DOCUMENT_ENCODING)
        return cls.from_document(document, source=DEFAULT_DOCUMENT_RESOURCE)

    @classmethod
    def from_config(cls, override: Optional[str] = None) -> "RecordStore":
        """
        Build a store from the configured document.

        Uses the explicit override, then WHATSNEW_DOCUMENT_PATH, then the
        embedded default document.

        Raises:
            ConfigurationError: If a configured path does not point at a file
            ParseError: If the document is malformed
        """
        path = get_document_path(override)
        if path is None:
            return cls.from_default()
        return cls.from_path(path)

    @property
    def entries(self) -> Tuple[VersionEntry, ...]:
        return self._entries

    def versions(self) -> Tuple[str, ...]:
        """Version identifiers in chronological order."""
        return tuple(entry.version for entry in self._entries)

    def find_by_version(self, version: str) -> VersionEntry:
        """
        Get the entry for a version identifier.

        Lookups are exact first; "v2.0.20" or " 2.0.20 " also find "2.0.20".

        Raises:
            VersionNotFoundError: If the version is not in the store
        """
        return self._entries[self.position(version)]

    def get(self, version: str, default: Optional[VersionEntry] = None) -> Optional[VersionEntry]:
        """Get the entry for a version, or default when it is unknown."""
        key = self._resolve(version)
        if key is None:
            return default
        return self._entries[self._positions[key]]

    def position(self, version: str) -> int:
        """
        Chronological index of a version (0 is the oldest).

        Raises:
            VersionNotFoundError: If the version is not in the store
        """
        key = self._resolve(version)
        if key is None:
            raise VersionNotFoundError(
                "Version not found",
                version=version,
                details={"source": self.source} if self.source else None,
            )
        return self._positions[key]

    def _resolve(self, version: str) -> Optional[str]:
        if not isinstance(version, str):
            return None
        if version in self._positions:
            return version
        if not self.version_parser.is_valid(version):
            return None
        normalized = self.version_parser.normalize(version)
        return normalized if normalized in self._positions else None

    def _warn_on_unordered_versions(self):
        """Log when a version sorts before the version listed above it."""
        previous = None
        for entry in self._entries:
            if not self.version_parser.is_valid(entry.version):
                continue
            current = self.version_parser.parse(entry.version)
            if previous is not None and current < previous:
                logger.warning(
                    f"Version {entry.version} is listed after {previous} but sorts before it; "
                    f"document order is kept as release order"
                )
            previous = current

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[VersionEntry]:
        return iter(self._entries)

    def __contains__(self, version) -> bool:
        return self._resolve(version) is not None

    def __repr__(self) -> str:
        return f"RecordStore(source={self.source!r}, versions={len(self._entries)})"
