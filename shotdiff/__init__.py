"""Periodic window capture with pixel comparison and an SQLite history."""

__version__ = "0.1.0"
__all__ = ["__version__"]