"""Accounts attached by connection string, outside any Azure subscription."""

from cosmos_explorer.accounts.codec import AccountDescriptor
from cosmos_explorer.accounts.factory import AccountFactory
from cosmos_explorer.accounts.nodes import (
    AccountNode,
    AttachedAccountRoot,
    DocDBAccountNode,
    GraphAccountNode,
    MongoAccountNode,
    TableAccountNode,
)
from cosmos_explorer.accounts.registry import (
    AttachAccountPlaceholder,
    AttachedAccountsRegistry,
)

__all__ = [
    "AccountDescriptor",
    "AccountFactory",
    "AccountNode",
    "AttachAccountPlaceholder",
    "AttachedAccountRoot",
    "AttachedAccountsRegistry",
    "DocDBAccountNode",
    "GraphAccountNode",
    "MongoAccountNode",
    "TableAccountNode",
]
