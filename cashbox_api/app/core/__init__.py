"""Core infrastructure: configuration, logging and database access."""
