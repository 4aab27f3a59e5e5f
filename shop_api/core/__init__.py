"""Shared infrastructure: configuration, database, security, caching and errors."""
