"""
Tests for configuration (whatsnew/core/config.py)

Tests cover:
- Default document resolution
- Explicit path overrides
- WHATSNEW_DOCUMENT_PATH environment override
- Invalid paths
"""

import pytest
from unittest.mock import patch

from whatsnew.core import config
from whatsnew.core.config import DOCUMENT_PATH_ENV, get_document_path
from whatsnew.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clear_document_env(monkeypatch):
    """Ensure no document override leaks in from the environment."""
    monkeypatch.delenv(DOCUMENT_PATH_ENV, raising=False)
    with patch.object(config, "DOCUMENT_PATH", ""):
        yield


class TestGetDocumentPath:
    """Tests for get_document_path."""

    def test_no_override(self):
        """Test that None means the embedded document."""
        assert get_document_path() is None

    def test_explicit_override(self, tmp_path):
        """Test an explicit file path."""
        document = tmp_path / "notes.md"
        document.write_text("## 1.0.0\n", encoding="utf-8")
        assert get_document_path(str(document)) == document

    def test_environment_override(self, tmp_path, monkeypatch):
        """Test the environment variable override."""
        document = tmp_path / "env.md"
        document.write_text("## 1.0.0\n", encoding="utf-8")
        monkeypatch.setenv(DOCUMENT_PATH_ENV, str(document))
        assert get_document_path() == document

    def test_explicit_beats_environment(self, tmp_path, monkeypatch):
        """Test that the explicit path takes precedence."""
        explicit = tmp_path / "explicit.md"
        explicit.write_text("## 1.0.0\n", encoding="utf-8")
        monkeypatch.setenv(DOCUMENT_PATH_ENV, str(tmp_path / "missing.md"))
        assert get_document_path(str(explicit)) == explicit

    def test_missing_file(self, tmp_path, monkeypatch):
        """Test that a missing file raises ConfigurationError naming the key."""
        monkeypatch.setenv(DOCUMENT_PATH_ENV, str(tmp_path / "missing.md"))
        with pytest.raises(ConfigurationError) as exc_info:
            get_document_path()
        assert exc_info.value.config_key == DOCUMENT_PATH_ENV
        assert exc_info.value.config_file.endswith("missing.md")

    def test_directory_is_rejected(self, tmp_path):
        """Test that a directory is not accepted as a document."""
        with pytest.raises(ConfigurationError):
            get_document_path(str(tmp_path))


class TestConfigClass:
    """Tests for the Config instance."""

    def test_defaults(self):
        """Test embedded document defaults."""
        assert config.config.default_document_package == "whatsnew.data"
        assert config.config.default_document_resource == "changes.md"
        assert config.config.render_width > 0
