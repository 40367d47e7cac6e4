"""
Version Identifier Parser

This module parses the version identifiers used as section headers in
"what's new" documents. It handles formats such as:
- Feature releases: "2.0.0"
- Tooling/bug-fix releases: "2.0.20", "1.9.21"
- Two-component versions: "1.6"
- Pre-releases: "2.0.0-Beta1", "2.1.0-RC2"
- A leading "v": "v2.0.20"

Usage:
    from whatsnew.core.version_parser import VersionParser

    parser = VersionParser()
    version = parser.parse("2.0.0-RC1")
    print(f"Major: {version.major}, Qualifier: {version.qualifier}")
"""

import re
from dataclasses import dataclass
from typing import Optional, List, Tuple

from whatsnew.core.exceptions import ValidationError


@dataclass(frozen=True)
class VersionNumber:
    """
    Represents a structured version identifier.

    Attributes:
        major: Major component (e.g., 2 in "2.0.20")
        minor: Minor component (e.g., 0 in "2.0.20")
        patch: Optional patch component (e.g., 20 in "2.0.20")
        qualifier: Optional pre-release qualifier (e.g., "RC1" in "2.1.0-RC1")
    """
    major: int
    minor: int
    patch: Optional[int] = None
    qualifier: Optional[str] = None

    def __str__(self) -> str:
        """Convert version to standard string representation."""
        result = f"{self.major}.{self.minor}"
        if self.patch is not None:
            result += f".{self.patch}"
        if self.qualifier:
            result += f"-{self.qualifier}"
        return result

    def sort_key(self) -> Tuple[int, int, int, int, str]:
        """
        Key used for ordering.

        A missing patch counts as 0 and a pre-release sorts before the
        release it precedes ("2.0.0-RC" < "2.0.0").
        """
        is_release = 1 if self.qualifier is None else 0
        return (
            self.major,
            self.minor,
            self.patch or 0,
            is_release,
            (self.qualifier or "").lower(),
        )

    def __lt__(self, other) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self.sort_key() >= other.sort_key()

    @property
    def is_prerelease(self) -> bool:
        return self.qualifier is not None


class VersionParser:
    r"""
    Version identifier parser with error handling.

    Regex Pattern: ^v?(\d+)\.(\d+)(?:\.(\d+))?(?:-([A-Za-z][A-Za-z0-9.]*))?$
    - Group 1: Major (required)
    - Group 2: Minor (required)
    - Group 3: Patch (optional)
    - Group 4: Pre-release qualifier (optional)
    """

    def __init__(self):
        """Initialize the parser with the version regex pattern."""
        self.pattern = re.compile(
            r'^v?(\d+)\.(\d+)(?:\.(\d+))?(?:-([A-Za-z][A-Za-z0-9.]*))?$',
            re.IGNORECASE,
        )

    def parse(self, version_str: str) -> VersionNumber:
        """
        Parse a single version string into a VersionNumber object.

        Args:
            version_str: Version as string (e.g., "2.0.20", "v1.9.0", "2.0.0-RC1")

        Returns:
            VersionNumber object with parsed components

        Raises:
            ValidationError: If the version format is invalid

        Examples:
            >>> parser = VersionParser()
            >>> parser.parse("2.0.20")
            VersionNumber(major=2, minor=0, patch=20, qualifier=None)
            >>> parser.parse("v2.1.0-RC2")
            VersionNumber(major=2, minor=1, patch=0, qualifier='RC2')
        """
        match = self.pattern.match(version_str.strip()) if version_str else None
        if not match:
            raise ValidationError(
                f"Invalid version format: '{version_str}'",
                field_name="version",
                field_value=version_str,
            )

        return VersionNumber(
            major=int(match.group(1)),
            minor=int(match.group(2)),
            patch=int(match.group(3)) if match.group(3) is not None else None,
            qualifier=match.group(4),
        )

    def parse_bulk(
        self, version_list: List[str]
    ) -> Tuple[List[VersionNumber], List[Tuple[str, str]]]:
        """
        Parse multiple versions, returning successes and failures.

        Args:
            version_list: List of version strings to parse

        Returns:
            Tuple of (successful_parses, failures)
            - successful_parses: List of VersionNumber objects
            - failures: List of (version_str, error_message) tuples
        """
        successes = []
        failures = []

        for version_str in version_list:
            try:
                successes.append(self.parse(version_str))
            except ValidationError as e:
                failures.append((version_str, e.message))

        return successes, failures

    def normalize(self, version_str: str) -> str:
        """
        Normalize a version to standard format.

        Strips surrounding whitespace, a leading "v" and leading zeros.
        A missing patch component is not invented.

        Examples:
            >>> parser = VersionParser()
            >>> parser.normalize("v2.0.20")
            '2.0.20'
            >>> parser.normalize("01.6")
            '1.6'
        """
        return str(self.parse(version_str))

    def is_valid(self, version_str: str) -> bool:
        """Check if a version string is valid without raising an exception."""
        try:
            self.parse(version_str)
            return True
        except ValidationError:
            return False


# Singleton instance for convenience
_default_parser = None


def _get_default_parser() -> VersionParser:
    global _default_parser
    if _default_parser is None:
        _default_parser = VersionParser()
    return _default_parser


def parse_version(version_str: str) -> VersionNumber:
    """
    Convenience function to parse a version using the default parser.

    Raises:
        ValidationError: If the version format is invalid
    """
    return _get_default_parser().parse(version_str)


def normalize_version(version_str: str) -> str:
    """
    Convenience function to normalize a version using the default parser.

    Raises:
        ValidationError: If the version format is invalid
    """
    return _get_default_parser().normalize(version_str)
