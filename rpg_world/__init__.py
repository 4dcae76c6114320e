"""Authoring and query tools for a single hierarchical RPG world."""

__version__ = "0.1.0"
