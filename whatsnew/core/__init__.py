"""Configuration, logging, errors and version identifiers."""
