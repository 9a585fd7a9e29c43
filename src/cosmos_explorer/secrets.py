"""Secret store access for attached account connection strings.

Connection strings never touch the persisted state file; they live in the
platform keychain through ``keyring``, addressed by (service, account id).
Some platforms have no usable keychain backend, in which case the store is
reported as unavailable and callers run in session-only mode.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import keyring
import keyring.errors
from keyring.backend import KeyringBackend
from keyring.backends import fail

from cosmos_explorer.exceptions import SecretStoreError

logger = logging.getLogger(__name__)

SERVICE_NAME = "cosmos-explorer.connectionStrings"


class SecretStore(Protocol):
    """Async get/set/delete-password capability."""

    async def get_password(self, service: str, account: str) -> str | None: ...

    async def set_password(self, service: str, account: str, secret: str) -> None: ...

    async def delete_password(self, service: str, account: str) -> None: ...


class KeyringSecretStore:
    """SecretStore backed by a ``keyring`` backend.

    keyring calls block (D-Bus, Keychain, Credential Manager), so each one
    runs in a worker thread.
    """

    def __init__(self, backend: KeyringBackend | None = None) -> None:
        self._backend = backend or keyring.get_keyring()

    @property
    def backend(self) -> KeyringBackend:
        return self._backend

    async def get_password(self, service: str, account: str) -> str | None:
        try:
            return await asyncio.to_thread(self._backend.get_password, service, account)
        except keyring.errors.KeyringError as e:
            raise SecretStoreError(
                f"Keychain lookup failed for {service}/{account}: {e}"
            ) from e

    async def set_password(self, service: str, account: str, secret: str) -> None:
        try:
            await asyncio.to_thread(self._backend.set_password, service, account, secret)
        except keyring.errors.KeyringError as e:
            raise SecretStoreError(
                f"Keychain write failed for {service}/{account}: {e}"
            ) from e

    async def delete_password(self, service: str, account: str) -> None:
        try:
            await asyncio.to_thread(self._backend.delete_password, service, account)
        except keyring.errors.PasswordDeleteError:
            logger.debug("No keychain entry to delete for %s/%s", service, account)
        except keyring.errors.KeyringError as e:
            raise SecretStoreError(
                f"Keychain delete failed for {service}/{account}: {e}"
            ) from e


def load_secret_store(enabled: bool = True) -> KeyringSecretStore | None:
    """Return a keychain-backed store, or None when none is usable."""
    if not enabled:
        logger.info("Secret store disabled by configuration")
        return None
    backend = keyring.get_keyring()
    if isinstance(backend, fail.Keyring):
        logger.warning(
            "No keychain backend available; attached accounts will not be persisted"
        )
        return None
    return KeyringSecretStore(backend)
