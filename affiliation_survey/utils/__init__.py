"""Shared utilities: tree walking, text normalization, caching, logging, retry."""
