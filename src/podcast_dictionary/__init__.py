"""Offline builder for the podcast player's English-Russian word dictionary."""

__version__ = "0.1.0"
