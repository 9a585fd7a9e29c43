"""Cosmos Explorer exception hierarchy.

Provides a structured exception tree so callers can tell a dismissed
prompt apart from a malformed connection string or an unreachable server.
"""

from __future__ import annotations


class ExplorerError(Exception):
    """Base for all Cosmos Explorer exceptions."""


class UserCancelledError(ExplorerError):
    """An interactive prompt was dismissed. Not a failure."""

    def __init__(self, message: str = "Operation cancelled.") -> None:
        super().__init__(message)


class ConnectionStringError(ExplorerError):
    """A connection string does not match the grammar for its API."""


class HydrationError(ExplorerError):
    """Persisted accounts could not be loaded for this session."""


class ConnectivityError(ExplorerError):
    """A network round-trip to a database server failed."""


class MongoConnectionError(ConnectivityError):
    """Connecting to a MongoDB server failed."""


class UnexpectedAPIError(ExplorerError):
    """An API kind outside the known set reached a dispatch point."""


class SubscriptionUnavailableError(ExplorerError):
    """Subscription information was requested for an attached account."""


class DescriptorFormatError(ExplorerError):
    """The persisted account list is malformed."""


class StateError(ExplorerError):
    """Persisted state could not be read or written."""


class SecretStoreError(ExplorerError):
    """The platform secret store rejected a read, write or delete."""
