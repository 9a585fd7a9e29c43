"""Connection string grammars for attached accounts.

Validators return a user-facing message or ``None`` so they can be used
directly as inline prompt validation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

from cosmos_explorer.exceptions import ConnectionStringError

MONGO_CONNECTION_EXPECTED = (
    'Connection string must start with "mongodb://" or "mongodb+srv://"'
)
DOCDB_CONNECTION_EXPECTED = (
    'Connection string must be of the form "AccountEndpoint=...;AccountKey=..."'
)
DOCDB_INVALID_ENDPOINT = "AccountEndpoint is invalid url."

LOCAL_MONGO_CONNECTION_STRING = "mongodb://127.0.0.1:27017"

# Well-known key published for the local Azure Cosmos DB emulator.
EMULATOR_PASSWORD = (
    "C2y6yDjf5/R+ob0N8A7Cgv30VRDJIWEHLM+4QDU5DE2nQ9nDuVTqobD4b8mGGyPMbIZnqyMsEcaGQy67XIw/Jw=="
)

_MONGO_PREFIX_RE = re.compile(r"^mongodb(\+srv)?://")
_DOCDB_RE = re.compile(r"AccountEndpoint=([^;]*);AccountKey=([^;]*)")


@dataclass(frozen=True)
class DocDBConnectionInfo:
    endpoint: str
    master_key: str
    account_id: str


def validate_mongo_connection_string(value: str | None) -> str | None:
    if value and _MONGO_PREFIX_RE.match(value):
        return None
    return MONGO_CONNECTION_EXPECTED


def parse_docdb_connection_string(value: str) -> DocDBConnectionInfo:
    """Split an ``AccountEndpoint=...;AccountKey=...`` string.

    The account id is the endpoint's authority (host and optional port),
    and is empty when the endpoint is not a usable URL.
    """
    match = _DOCDB_RE.search(value or "")
    if match is None:
        raise ConnectionStringError(DOCDB_CONNECTION_EXPECTED)
    endpoint, master_key = match.group(1), match.group(2)
    try:
        account_id = urlsplit(endpoint).netloc
    except ValueError:
        account_id = ""
    return DocDBConnectionInfo(endpoint=endpoint, master_key=master_key, account_id=account_id)


def validate_docdb_connection_string(value: str | None) -> str | None:
    try:
        info = parse_docdb_connection_string(value or "")
    except ConnectionStringError:
        return DOCDB_CONNECTION_EXPECTED
    if info.endpoint and info.master_key:
        if info.account_id:
            return None
        return DOCDB_INVALID_ENDPOINT
    return DOCDB_CONNECTION_EXPECTED


def get_database_name_from_connection_string(connection_string: str) -> str | None:
    """Return the default database named in a Mongo URI path, if any."""
    try:
        path = urlsplit(connection_string).path
    except ValueError:
        return None
    name = unquote(path.lstrip("/"))
    return name or None


def mongo_emulator_connection_string(port: int) -> str:
    # The '/' before the options is required by mongo URI conventions.
    return f"mongodb://localhost:{quote(EMULATOR_PASSWORD, safe='')}@localhost:{port}/?ssl=true"


def docdb_emulator_connection_string(port: int) -> str:
    return f"AccountEndpoint=https://localhost:{port}/;AccountKey={EMULATOR_PASSWORD};"
