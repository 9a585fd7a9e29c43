"""Typed account nodes shown under the attached accounts tree."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from cosmos_explorer.accounts.codec import AccountDescriptor
from cosmos_explorer.exceptions import SubscriptionUnavailableError
from cosmos_explorer.experiences import API

if TYPE_CHECKING:
    from cosmos_explorer.accounts.registry import AttachedAccountsRegistry

ATTACHED_ACCOUNT_SUFFIX = "Attached"
SUBSCRIPTION_CONTEXT_VALUE = "azureextensionui.azureSubscription"


class AttachedAccountRoot:
    """Stand-in subscription root for accounts attached by connection string.

    Attached accounts live outside any subscription, so every subscription
    property raises.
    """

    _MESSAGE = "Cannot retrieve Azure subscription information for an attached account."

    def _unavailable(self) -> Any:
        raise SubscriptionUnavailableError(self._MESSAGE)

    credentials = property(_unavailable)
    subscription_display_name = property(_unavailable)
    subscription_id = property(_unavailable)
    subscription_path = property(_unavailable)
    tenant_id = property(_unavailable)
    user_id = property(_unavailable)
    environment = property(_unavailable)


class AccountNode:
    """Common shape of every account node variant."""

    CONTEXT_VALUE: ClassVar[str] = ""
    API_KIND: ClassVar[API]

    def __init__(
        self,
        parent: AttachedAccountsRegistry | None,
        id: str,
        label: str,
        is_emulator: bool = False,
    ) -> None:
        self.parent = parent
        self.id = id
        self.label = label
        self.is_emulator = bool(is_emulator)
        self.context_value = self.CONTEXT_VALUE
        self.root = parent.root if parent is not None else AttachedAccountRoot()

    @property
    def api(self) -> API:
        return self.API_KIND

    @property
    def endpoint(self) -> str:
        raise NotImplementedError

    def to_descriptor(self) -> AccountDescriptor:
        return AccountDescriptor(
            id=self.id, default_experience=self.api, is_emulator=self.is_emulator,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.id!r}, label={self.label!r}, "
            f"is_emulator={self.is_emulator!r})"
        )


class MongoAccountNode(AccountNode):
    CONTEXT_VALUE = "cosmosDBMongoServer"
    API_KIND = API.MONGODB

    def __init__(
        self,
        parent: AttachedAccountsRegistry | None,
        id: str,
        label: str,
        connection_string: str,
        is_emulator: bool = False,
    ) -> None:
        super().__init__(parent, id, label, is_emulator)
        self.connection_string = connection_string

    @property
    def endpoint(self) -> str:
        return self.id


class DocDBAccountNodeBase(AccountNode):
    """Accounts addressed by an HTTPS endpoint and master key."""

    def __init__(
        self,
        parent: AttachedAccountsRegistry | None,
        id: str,
        label: str,
        document_endpoint: str,
        master_key: str,
        is_emulator: bool = False,
    ) -> None:
        super().__init__(parent, id, label, is_emulator)
        self.document_endpoint = document_endpoint
        self.master_key = master_key

    @property
    def endpoint(self) -> str:
        return self.document_endpoint


class DocDBAccountNode(DocDBAccountNodeBase):
    CONTEXT_VALUE = "cosmosDBDocumentServer"
    API_KIND = API.DOCUMENTDB


class GraphAccountNode(DocDBAccountNodeBase):
    CONTEXT_VALUE = "cosmosDBGraphAccount"
    API_KIND = API.GRAPH

    def __init__(
        self,
        parent: AttachedAccountsRegistry | None,
        id: str,
        label: str,
        document_endpoint: str,
        gremlin_endpoint: str | None,
        master_key: str,
        is_emulator: bool = False,
    ) -> None:
        super().__init__(parent, id, label, document_endpoint, master_key, is_emulator)
        self.gremlin_endpoint = gremlin_endpoint


class TableAccountNode(DocDBAccountNodeBase):
    CONTEXT_VALUE = "cosmosDBTableAccount"
    API_KIND = API.TABLE


ACCOUNT_CONTEXT_VALUES = frozenset({
    MongoAccountNode.CONTEXT_VALUE,
    DocDBAccountNode.CONTEXT_VALUE,
    GraphAccountNode.CONTEXT_VALUE,
    TableAccountNode.CONTEXT_VALUE,
})
