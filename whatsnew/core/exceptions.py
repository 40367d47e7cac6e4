"""
whatsnew Exception Hierarchy

Centralized exception classes for the whatsnew project.
Every error is reported synchronously to the caller; none of them leave the
loaded record store in an unusable state.
"""
from typing import Optional, Any


class WhatsNewError(Exception):
    """
    Base exception for all whatsnew errors.

    All custom exceptions in whatsnew inherit from this class
    so callers can catch a single type and keep issuing queries.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """
        Initialize WhatsNewError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ParseError(WhatsNewError):
    """
    Document structure errors.

    Raised when a document does not follow the expected section structure
    (missing version headers, malformed category markers, bad tags).
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        line_number: Optional[int] = None,
        source: Optional[str] = None,
    ):
        """
        Initialize ParseError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
            line_number: 1-based line of the document where parsing failed
            source: Name of the document (file path or resource name)
        """
        super().__init__(message, details)
        self.line_number = line_number
        self.source = source

    def __str__(self) -> str:
        """Return string representation including line and source if present."""
        base = super().__str__()
        parts = [base]
        if self.line_number:
            parts.append(f"Line: {self.line_number}")
        if self.source:
            parts.append(f"Source: {self.source}")
        return " | ".join(parts) if len(parts) > 1 else base


class VersionNotFoundError(WhatsNewError):
    """
    Unknown version lookups.

    Raised when a version identifier is not present in the loaded records.
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        version: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.version = version

    def __str__(self) -> str:
        base = super().__str__()
        if self.version:
            return f"{base} | Version: {self.version}"
        return base


class VersionRangeError(WhatsNewError):
    """
    Invalid version range queries.

    Raised when an endpoint of a range is unknown or the range is reversed.
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        from_version: Optional[str] = None,
        to_version: Optional[str] = None,
    ):
        """
        Initialize VersionRangeError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
            from_version: Lower endpoint of the requested range
            to_version: Upper endpoint of the requested range
        """
        super().__init__(message, details)
        self.from_version = from_version
        self.to_version = to_version

    def __str__(self) -> str:
        """Return string representation including the requested range."""
        base = super().__str__()
        if self.from_version or self.to_version:
            return f"{base} | Range: {self.from_version}..{self.to_version}"
        return base


class ValidationError(WhatsNewError):
    """
    Data validation errors.

    Raised when a category, stability tag or version value is invalid.
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
    ):
        """
        Initialize ValidationError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
            field_name: The field that failed validation
            field_value: The value that failed validation
        """
        super().__init__(message, details)
        self.field_name = field_name
        self.field_value = field_value

    def __str__(self) -> str:
        """Return string representation including field and value if present."""
        base = super().__str__()
        parts = [base]
        if self.field_name:
            parts.append(f"Field: {self.field_name}")
        if self.field_value is not None:
            parts.append(f"Value: {self.field_value}")
        return " | ".join(parts) if len(parts) > 1 else base


class ConfigurationError(WhatsNewError):
    """
    Configuration errors.

    Raised when configuration is missing or invalid.
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.config_key = config_key
        self.config_file = config_file

    def __str__(self) -> str:
        """Return string representation including config key and file if present."""
        base = super().__str__()
        parts = [base]
        if self.config_key:
            parts.append(f"Key: {self.config_key}")
        if self.config_file:
            parts.append(f"File: {self.config_file}")
        return " | ".join(parts) if len(parts) > 1 else base
