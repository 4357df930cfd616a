"""Shared utilities: atomic file I/O, logging setup and schema validation."""
