"""Hermes: markdown workspace pages with a derived SQLite search index."""

__version__ = "0.1.0"
