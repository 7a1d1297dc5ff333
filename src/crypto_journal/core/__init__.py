"""Core infrastructure: database, logging and clock."""
