"""
whatsnew: index and query language/library changes across versions.

This package provides:
1. Parsing of "what's new" documents (markdown or HTML) into version records
2. A read-only record store with lookup by version
3. Queries by category, stability, keyword and version range
4. Plain-text rendering of query results
"""

__version__ = "0.1.0"
