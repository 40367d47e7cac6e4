"""Plain-text rendering of records and query results."""
