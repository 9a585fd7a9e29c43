"""Build typed account nodes from a connection string and an API kind."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from cosmos_explorer.accounts.connection_strings import (
    DOCDB_INVALID_ENDPOINT,
    get_database_name_from_connection_string,
    parse_docdb_connection_string,
)
from cosmos_explorer.accounts.mongo import get_server_id_from_connection_string
from cosmos_explorer.accounts.nodes import (
    ATTACHED_ACCOUNT_SUFFIX,
    AccountNode,
    DocDBAccountNode,
    GraphAccountNode,
    MongoAccountNode,
    TableAccountNode,
)
from cosmos_explorer.exceptions import ConnectionStringError, UnexpectedAPIError
from cosmos_explorer.experiences import API, get_experience

if TYPE_CHECKING:
    from cosmos_explorer.accounts.registry import AttachedAccountsRegistry

logger = logging.getLogger(__name__)

ServerIdResolver = Callable[[str], Awaitable[str]]


def default_label(account_id: str, api: API) -> str:
    return f"{account_id} ({get_experience(api).short_name})"


def emulator_label(api: API) -> str:
    return f"{get_experience(api).short_name} Emulator"


class AccountFactory:
    """Turns (connection string, API) into an attached account node.

    MongoDB ids need a live round-trip to the server, performed by
    ``resolve_server_id``; everything else is parsed locally.
    """

    def __init__(self, resolve_server_id: ServerIdResolver | None = None) -> None:
        self._resolve_server_id = resolve_server_id or get_server_id_from_connection_string

    async def create_account_node(
        self,
        connection_string: str,
        api: API,
        label: str | None = None,
        id: str | None = None,
        is_emulator: bool = False,
        parent: AttachedAccountsRegistry | None = None,
    ) -> AccountNode:
        node: AccountNode
        if api == API.MONGODB:
            if id is None:
                id = await self._resolve_server_id(connection_string)
                database = (
                    None if is_emulator
                    else get_database_name_from_connection_string(connection_string)
                )
                if database:
                    id = f"{id}/{database}"
                logger.debug("Resolved MongoDB account id %s", id)

            label = label or default_label(id, api)
            node = MongoAccountNode(parent, id, label, connection_string, is_emulator)
        else:
            info = parse_docdb_connection_string(connection_string)
            if not info.account_id:
                raise ConnectionStringError(DOCDB_INVALID_ENDPOINT)

            label = label or default_label(info.account_id, api)
            if api == API.TABLE:
                node = TableAccountNode(
                    parent, info.account_id, label, info.endpoint, info.master_key,
                    is_emulator,
                )
            elif api == API.GRAPH:
                node = GraphAccountNode(
                    parent, info.account_id, label, info.endpoint, None,
                    info.master_key, is_emulator,
                )
            elif api == API.DOCUMENTDB:
                node = DocDBAccountNode(
                    parent, info.account_id, label, info.endpoint, info.master_key,
                    is_emulator,
                )
            else:
                raise UnexpectedAPIError(f'Unexpected defaultExperience "{api}".')

        node.context_value += ATTACHED_ACCOUNT_SUFFIX
        return node
