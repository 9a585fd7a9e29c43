"""Cosmos Explorer: attached database accounts for a tree-based explorer."""

__version__ = "0.3.0"
