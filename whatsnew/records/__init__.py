"""Version-change records and the read-only record store."""
