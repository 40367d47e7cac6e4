"""Read-only queries over loaded records."""
