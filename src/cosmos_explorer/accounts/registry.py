"""Attached Database Accounts registry.

Owns the in-memory list of account nodes attached by connection string and
keeps it in step with two stores:

    state file   {SERVICE_NAME: '[{"id": ..., "defaultExperience": ..., "isEmulator": ...}]'}
    keychain     (SERVICE_NAME, account id) -> connection string

The list is hydrated once per registry from both stores. Every caller that
asks for the list before hydration finishes awaits the same task.
Attach and detach update memory first, then the keychain, then the state
file. Without a keychain the registry still works, but only for the
current session.

Usage:
    registry = AttachedAccountsRegistry(JsonStateStore(path), load_secret_store())

    for node in await registry.list_accounts():
        print(node.id, node.label)

    await registry.attach_connection_string(API.DOCUMENTDB, connection_string)
    await registry.detach("foo.documents.azure.com:443")
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from cosmos_explorer.accounts import codec
from cosmos_explorer.accounts.connection_strings import (
    LOCAL_MONGO_CONNECTION_STRING,
    docdb_emulator_connection_string,
    mongo_emulator_connection_string,
    validate_docdb_connection_string,
    validate_mongo_connection_string,
)
from cosmos_explorer.accounts.factory import AccountFactory, default_label, emulator_label
from cosmos_explorer.accounts.mongo import can_connect_to_local_mongo
from cosmos_explorer.accounts.nodes import (
    ACCOUNT_CONTEXT_VALUES,
    SUBSCRIPTION_CONTEXT_VALUE,
    AccountNode,
    AttachedAccountRoot,
)
from cosmos_explorer.accounts.prompts import AccountPrompter
from cosmos_explorer.config import EmulatorConfig
from cosmos_explorer.exceptions import (
    ConnectionStringError,
    ExplorerError,
    HydrationError,
    UnexpectedAPIError,
    UserCancelledError,
)
from cosmos_explorer.experiences import API, get_experience, get_experiences
from cosmos_explorer.secrets import SERVICE_NAME, SecretStore
from cosmos_explorer.state import JsonStateStore

logger = logging.getLogger(__name__)

HYDRATION_FAILED_MESSAGE = (
    "Failed to load persisted Database Accounts. Reattach the accounts manually."
)
PICK_API_PLACEHOLDER = "Select a Database Account API..."
CONNECTION_STRING_PROMPT = "Enter the connection string for your database account"

LocalMongoProbe = Callable[[str], Awaitable[bool]]


@dataclass(frozen=True)
class AttachAccountPlaceholder:
    """Tree entry shown when nothing is attached yet."""

    id: str = "cosmosDBAttachDatabaseAccount"
    context_value: str = "cosmosDBAttachDatabaseAccount"
    label: str = "Attach Database Account..."
    command_id: str = "cosmosDB.attachDatabaseAccount"


class AttachedAccountsRegistry:
    """Root of the attached accounts tree and owner of its account nodes."""

    CONTEXT_VALUE = "cosmosDBAttachedAccounts" + (
        "WithEmulator" if sys.platform == "win32" else "WithoutEmulator"
    )

    id = "cosmosDBAttachedAccounts"
    label = "Attached Database Accounts"
    child_type_label = "Account"

    def __init__(
        self,
        state: JsonStateStore,
        secret_store: SecretStore | None,
        *,
        prompter: AccountPrompter | None = None,
        factory: AccountFactory | None = None,
        emulator: EmulatorConfig | None = None,
        local_mongo_probe: LocalMongoProbe | None = None,
        service_name: str = SERVICE_NAME,
    ) -> None:
        self._state = state
        self._secret_store = secret_store
        self._prompter = prompter
        self._factory = factory or AccountFactory()
        self._emulator = emulator or EmulatorConfig()
        self._local_mongo_probe = local_mongo_probe or can_connect_to_local_mongo
        self._service_name = service_name
        self.context_value = self.CONTEXT_VALUE
        self.root = AttachedAccountRoot()

        self._attached_accounts: list[AccountNode] | None = None
        self._load_task: asyncio.Task[list[AccountNode]] | None = None

    @property
    def has_secret_store(self) -> bool:
        return self._secret_store is not None

    @property
    def is_hydrated(self) -> bool:
        return self._attached_accounts is not None

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_accounts(self) -> list[AccountNode]:
        """Return the attached accounts, hydrating them on first use.

        Raises:
            HydrationError: Once, to the first caller that observes a failed
                hydration. The registry then holds an empty list for the rest
                of the session.
        """
        if self._attached_accounts is None:
            if self._load_task is None:
                self._load_task = asyncio.ensure_future(self._load_persisted_accounts())
            try:
                accounts = await asyncio.shield(self._load_task)
            except UnexpectedAPIError:
                raise
            except Exception as e:
                if self._attached_accounts is not None:
                    return self._attached_accounts
                logger.warning("Hydrating attached accounts failed: %s", e, exc_info=True)
                self._attached_accounts = []
                raise HydrationError(HYDRATION_FAILED_MESSAGE) from e
            if self._attached_accounts is None:
                self._attached_accounts = accounts

        return self._attached_accounts

    async def load_children(self) -> list[AccountNode | AttachAccountPlaceholder]:
        """Tree children: the accounts, or a single attach placeholder."""
        accounts = await self.list_accounts()
        if accounts:
            return list(accounts)
        return [AttachAccountPlaceholder()]

    def has_more_children(self) -> bool:
        return False

    def is_ancestor_of(self, context_value: str) -> bool:
        # Subscription-backed accounts never sit under this tree, which keeps
        # portal-only commands away from attached nodes.
        if context_value in ACCOUNT_CONTEXT_VALUES:
            return False
        return context_value != SUBSCRIPTION_CONTEXT_VALUE

    # ------------------------------------------------------------------
    # Attach
    # ------------------------------------------------------------------

    async def can_connect_to_local_mongo(self) -> bool:
        try:
            return await self._local_mongo_probe(LOCAL_MONGO_CONNECTION_STRING)
        except Exception as e:
            logger.debug("Local MongoDB probe failed: %s", e)
            return False

    async def attach_new_account(self, prompter: AccountPrompter | None = None) -> bool:
        """Ask for an API and a connection string, then attach the account.

        Raises:
            UserCancelledError: The API pick was dismissed.
        """
        ui = self._require_prompter(prompter)
        picked = await ui.pick_experience(get_experiences(), PICK_API_PLACEHOLDER)
        if picked is None:
            raise UserCancelledError()

        default_value: str | None = None
        if picked.api == API.MONGODB:
            placeholder = "mongodb://host:port"
            if await self.can_connect_to_local_mongo():
                default_value = placeholder = LOCAL_MONGO_CONNECTION_STRING
            validate = validate_mongo_connection_string
        else:
            placeholder = "AccountEndpoint=...;AccountKey=..."
            validate = validate_docdb_connection_string

        connection_string = await ui.input_connection_string(
            CONNECTION_STRING_PROMPT, placeholder, default_value, validate,
        )
        if not connection_string:
            return False
        return await self.attach_connection_string(picked.api, connection_string, ui)

    async def attach_connection_string(
        self,
        api: API,
        connection_string: str,
        prompter: AccountPrompter | None = None,
    ) -> bool:
        """Validate, build and attach an account from a connection string.

        Raises:
            ConnectionStringError: The string does not fit the API's grammar.
            MongoConnectionError: The MongoDB server could not be reached.
        """
        connection_string = connection_string.strip()
        if api == API.MONGODB:
            error = validate_mongo_connection_string(connection_string)
        else:
            error = validate_docdb_connection_string(connection_string)
        if error:
            raise ConnectionStringError(error)

        node = await self._factory.create_account_node(connection_string, api, parent=self)
        return await self.attach(node, connection_string, prompter)

    async def attach_emulator(
        self,
        prompter: AccountPrompter | None = None,
        api: API | None = None,
    ) -> bool:
        """Attach the local emulator for MongoDB or DocumentDB.

        Does nothing when the pick is dismissed or no port is configured.
        """
        if api is None:
            ui = self._require_prompter(prompter)
            picked = await ui.pick_experience(
                [get_experience(API.MONGODB), get_experience(API.DOCUMENTDB)],
                PICK_API_PLACEHOLDER,
            )
            if picked is None:
                return False
            api = picked.api

        if api == API.MONGODB:
            port = self._emulator.mongo_port
        else:
            port = self._emulator.port
        if not port:
            logger.info("No emulator port configured for %s", api.value)
            return False

        if api == API.MONGODB:
            connection_string = mongo_emulator_connection_string(port)
        else:
            connection_string = docdb_emulator_connection_string(port)

        node = await self._factory.create_account_node(
            connection_string, api, emulator_label(api), is_emulator=True, parent=self,
        )
        node.is_emulator = True
        return await self.attach(node, connection_string, prompter)

    async def attach(
        self,
        node: AccountNode,
        connection_string: str,
        prompter: AccountPrompter | None = None,
    ) -> bool:
        """Add ``node`` unless its id is already attached.

        Returns True when the node was added. A duplicate produces a warning
        and leaves every store untouched.
        """
        attached_accounts = await self.list_accounts()

        if any(account.id == node.id for account in attached_accounts):
            message = f"Database Account '{node.id}' is already attached."
            logger.warning("Database Account %s is already attached", node.id)
            ui = prompter or self._prompter
            if ui is not None:
                await ui.show_warning(message)
            return False

        attached_accounts.append(node)
        if self._secret_store is not None:
            await self._secret_store.set_password(self._service_name, node.id, connection_string)
            await self._persist_ids(attached_accounts)
        else:
            logger.info("No secret store; %s is attached for this session only", node.id)
        return True

    # ------------------------------------------------------------------
    # Detach
    # ------------------------------------------------------------------

    async def detach(self, id: str) -> bool:
        """Remove an attached account and forget its connection string."""
        attached_accounts = await self.list_accounts()

        index = next(
            (i for i, account in enumerate(attached_accounts) if account.id == id), -1,
        )
        if index == -1:
            return False

        attached_accounts.pop(index)
        if self._secret_store is not None:
            await self._secret_store.delete_password(self._service_name, id)
            await self._persist_ids(attached_accounts)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_prompter(self, prompter: AccountPrompter | None) -> AccountPrompter:
        ui = prompter or self._prompter
        if ui is None:
            raise ExplorerError("Attaching interactively requires a prompter.")
        return ui

    async def _load_persisted_accounts(self) -> list[AccountNode]:
        value = self._state.get(self._service_name)
        secret_store = self._secret_store
        if not value or secret_store is None:
            return []

        descriptors = codec.decode(value)
        logger.debug("Hydrating %d attached account(s)", len(descriptors))
        nodes = await asyncio.gather(*(self._hydrate(secret_store, d) for d in descriptors))

        accounts: list[AccountNode] = []
        seen: set[str] = set()
        for node in nodes:
            if node is None:
                continue
            if node.id in seen:
                logger.warning("Ignoring duplicate persisted account %s", node.id)
                continue
            seen.add(node.id)
            accounts.append(node)
        return accounts

    async def _hydrate(
        self, secret_store: SecretStore, descriptor: codec.AccountDescriptor,
    ) -> AccountNode | None:
        connection_string = await secret_store.get_password(
            self._service_name, descriptor.id,
        )
        if not connection_string:
            logger.warning(
                "No stored connection string for attached account %s; skipping",
                descriptor.id,
            )
            return None

        api = descriptor.default_experience
        if descriptor.is_emulator:
            label = emulator_label(api)
        else:
            label = default_label(descriptor.id, api)
        return await self._factory.create_account_node(
            connection_string, api, label, descriptor.id, descriptor.is_emulator, parent=self,
        )

    async def _persist_ids(self, attached_accounts: list[AccountNode]) -> None:
        value = codec.encode(node.to_descriptor() for node in attached_accounts)
        await self._state.update(self._service_name, value)
