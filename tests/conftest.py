"""Shared test fixtures for Cosmos Explorer."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from cosmos_explorer.accounts.factory import AccountFactory
from cosmos_explorer.accounts.registry import AttachedAccountsRegistry
from cosmos_explorer.config import EmulatorConfig
from cosmos_explorer.experiences import Experience
from cosmos_explorer.secrets import SERVICE_NAME
from cosmos_explorer.state import JsonStateStore

DOCDB_CONNECTION = "AccountEndpoint=https://foo.example:443/;AccountKey=abc=="
TABLE_CONNECTION = "AccountEndpoint=https://tables.example/;AccountKey=tkey"
MONGO_CONNECTION = "mongodb://user:pw@mongo.example:10255/?ssl=true"


class FakeSecretStore:
    """In-memory SecretStore that records every call."""

    def __init__(self, secrets: dict[tuple[str, str], str] | None = None) -> None:
        self.secrets = dict(secrets or {})
        self.get_calls: list[str] = []
        self.set_calls: list[str] = []
        self.delete_calls: list[str] = []
        self.fail_reads = False
        self.fail_writes = False

    async def get_password(self, service: str, account: str) -> str | None:
        self.get_calls.append(account)
        if self.fail_reads:
            raise OSError("keychain locked")
        return self.secrets.get((service, account))

    async def set_password(self, service: str, account: str, secret: str) -> None:
        self.set_calls.append(account)
        if self.fail_writes:
            raise OSError("keychain locked")
        self.secrets[(service, account)] = secret

    async def delete_password(self, service: str, account: str) -> None:
        self.delete_calls.append(account)
        self.secrets.pop((service, account), None)


class FakePrompter:
    """Prompter that replays queued answers."""

    def __init__(
        self,
        picks: Sequence[str | None] = (),
        inputs: Sequence[str | None] = (),
    ) -> None:
        self._picks = list(picks)
        self._inputs = list(inputs)
        self.warnings: list[str] = []
        self.pick_offers: list[list[str]] = []
        self.input_requests: list[dict] = []

    async def pick_experience(
        self, experiences: Sequence[Experience], placeholder: str,
    ) -> Experience | None:
        self.pick_offers.append([e.api.value for e in experiences])
        answer = self._picks.pop(0)
        if answer is None:
            return None
        return next(e for e in experiences if e.api.value == answer)

    async def input_connection_string(self, prompt, placeholder, value, validate):
        self.input_requests.append(
            {"placeholder": placeholder, "value": value, "validate": validate},
        )
        return self._inputs.pop(0)

    async def show_warning(self, message: str) -> None:
        self.warnings.append(message)


class FakeServerIdResolver:
    """Stands in for the live MongoDB round-trip."""

    def __init__(self, server_id: str = "mongo.example:10255") -> None:
        self.server_id = server_id
        self.calls: list[str] = []

    async def __call__(self, connection_string: str) -> str:
        self.calls.append(connection_string)
        return self.server_id


def persisted(state: JsonStateStore) -> str | None:
    return state.get(SERVICE_NAME)


@pytest.fixture
def state(tmp_path: Path) -> JsonStateStore:
    return JsonStateStore(tmp_path / "state.json")


@pytest.fixture
def secret_store() -> FakeSecretStore:
    return FakeSecretStore()


@pytest.fixture
def resolver() -> FakeServerIdResolver:
    return FakeServerIdResolver()


@pytest.fixture
def factory(resolver: FakeServerIdResolver) -> AccountFactory:
    return AccountFactory(resolve_server_id=resolver)


@pytest.fixture
def make_registry(state, secret_store, factory):
    """Build a registry over the shared state file and secret store."""

    def _make(
        *,
        store=secret_store,
        prompter=None,
        emulator: EmulatorConfig | None = None,
        local_mongo_available: bool = False,
        state_store: JsonStateStore | None = None,
    ) -> AttachedAccountsRegistry:
        async def probe(_connection_string: str) -> bool:
            return local_mongo_available

        return AttachedAccountsRegistry(
            state_store or state,
            store,
            prompter=prompter,
            factory=factory,
            emulator=emulator,
            local_mongo_probe=probe,
        )

    return _make
