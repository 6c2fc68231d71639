"""Ocean Notes: a desktop client for a remote notes service."""

__version__ = "0.1.0"
