"""Document parsers (markdown and HTML renditions)."""
