"""
whatsnew Configuration
Centralized configuration: environment variables, optionally loaded from a .env file.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from whatsnew.core.exceptions import ConfigurationError

# Load from .env file with UTF-8 encoding (Windows compatibility)
env_path = Path(__file__).parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path, encoding='utf-8')

# =============================================================================
# Document Configuration
# =============================================================================
DOCUMENT_PATH_ENV = "WHATSNEW_DOCUMENT_PATH"
DOCUMENT_PATH = os.getenv(DOCUMENT_PATH_ENV, "")

# Embedded default document (package data)
DEFAULT_DOCUMENT_PACKAGE = "whatsnew.data"
DEFAULT_DOCUMENT_RESOURCE = "changes.md"
# utf-8-sig also accepts documents saved with a byte-order mark
DOCUMENT_ENCODING = "utf-8-sig"

# =============================================================================
# Rendering Configuration
# =============================================================================
RENDER_WIDTH = 88
RENDER_INDENT = "    "


def get_document_path(override: Optional[str] = None) -> Optional[Path]:
    """
    Resolve the input document path.

    Args:
        override: Explicit path (e.g. from the command line); takes precedence
                  over the WHATSNEW_DOCUMENT_PATH environment variable

    Returns:
        Path to the document, or None to use the embedded default document

    Raises:
        ConfigurationError: If the configured path does not point at a file
    """
    raw = override or os.getenv(DOCUMENT_PATH_ENV, DOCUMENT_PATH)
    if not raw:
        return None

    path = Path(raw).expanduser()
    if not path.is_file():
        raise ConfigurationError(
            "Document path does not point at a readable file",
            config_key=None if override else DOCUMENT_PATH_ENV,
            config_file=str(path),
        )
    return path


# Configuration class for type safety
class Config:
    """Configuration class for type-safe access to settings."""

    # Document
    document_path: str = DOCUMENT_PATH
    default_document_package: str = DEFAULT_DOCUMENT_PACKAGE
    default_document_resource: str = DEFAULT_DOCUMENT_RESOURCE
    document_encoding: str = DOCUMENT_ENCODING

    # Rendering
    render_width: int = RENDER_WIDTH
    render_indent: str = RENDER_INDENT


# Export configuration instance
config = Config()
