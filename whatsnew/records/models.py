"""
Record types for version-change documents.

A document is a sequence of VersionEntry records, each owning an ordered
tuple of ChangeItem records. Records are immutable once loaded.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from whatsnew.core.exceptions import ValidationError


def _fold(value: str) -> str:
    """Case- and separator-insensitive key ("Standard library" -> "standardlibrary")."""
    return re.sub(r"[\s_\-]+", "", value).casefold()


class Category(Enum):
    """Area of the language or its libraries a change belongs to."""

    LANGUAGE = "Language"
    COROUTINES = "Coroutines"
    COMPILER = "Compiler"
    MULTIPLATFORM = "Multiplatform"
    NATIVE = "Native"
    STANDARD_LIBRARY = "StandardLibrary"
    COMPOSE_COMPILER = "ComposeCompiler"
    OTHER = "Other"

    @property
    def label(self) -> str:
        """Human-readable label used in documents and rendered output."""
        return _CATEGORY_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "Category":
        """
        Parse a category from its identifier or display label.

        Raises:
            ValidationError: If the value names no known category
        """
        if isinstance(value, cls):
            return value
        category = _CATEGORY_LOOKUP.get(_fold(value or ""))
        if category is None:
            raise ValidationError(
                f"Unknown category: '{value}'",
                field_name="category",
                field_value=value,
            )
        return category


_CATEGORY_LABELS = {
    Category.LANGUAGE: "Language",
    Category.COROUTINES: "Coroutines",
    Category.COMPILER: "Compiler",
    Category.MULTIPLATFORM: "Multiplatform",
    Category.NATIVE: "Native",
    Category.STANDARD_LIBRARY: "Standard library",
    Category.COMPOSE_COMPILER: "Compose compiler",
    Category.OTHER: "Other",
}

_CATEGORY_LOOKUP = {_fold(c.value): c for c in Category}
_CATEGORY_LOOKUP["stdlib"] = Category.STANDARD_LIBRARY
_CATEGORY_LOOKUP["kotlinxcoroutines"] = Category.COROUTINES


class Stability(Enum):
    """Maturity label attached to a change."""

    STABLE = "Stable"
    BETA = "Beta"
    ALPHA = "Alpha"
    EXPERIMENTAL = "Experimental"
    PREVIEW = "Preview"
    DEPRECATED = "Deprecated"

    @classmethod
    def parse(cls, value: str) -> "Stability":
        """
        Parse a stability tag, case-insensitively.

        Raises:
            ValidationError: If the value names no known stability level
        """
        if isinstance(value, cls):
            return value
        folded = _fold(value or "")
        for stability in cls:
            if stability.value.casefold() == folded:
                return stability
        raise ValidationError(
            f"Unknown stability tag: '{value}'",
            field_name="stability",
            field_value=value,
        )


@dataclass(frozen=True)
class ChangeItem:
    """One documented change within a version."""
    category: Category
    title: str
    description: str = ""
    code: Optional[str] = None
    stability: Stability = Stability.STABLE

    def matches(self, keyword: str) -> bool:
        """Case-insensitive substring match on title or description."""
        needle = keyword.casefold()
        return needle in self.title.casefold() or needle in self.description.casefold()


@dataclass(frozen=True)
class VersionEntry:
    """One documented version and its changes, in document order."""
    version: str
    release_date: Optional[str] = None
    changes: Tuple[ChangeItem, ...] = field(default_factory=tuple)
