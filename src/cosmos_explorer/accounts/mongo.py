"""Short-lived MongoDB connections used while attaching accounts."""

from __future__ import annotations

import asyncio
import logging

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from pymongo.uri_parser import parse_uri

from cosmos_explorer import __version__
from cosmos_explorer.accounts.connection_strings import LOCAL_MONGO_CONNECTION_STRING
from cosmos_explorer.exceptions import MongoConnectionError

logger = logging.getLogger(__name__)

APP_NAME = f"cosmos-explorer/{__version__}"
LOCAL_PROBE_TIMEOUT_MS = 2000


async def connect_to_mongo_client(
    connection_string: str,
    app_name: str = APP_NAME,
    server_selection_timeout_ms: int | None = None,
) -> AsyncMongoClient:
    """Open a client and confirm the server answers a ping.

    The caller owns the returned client and must close it. Without
    ``server_selection_timeout_ms`` the driver's default wait applies.
    """
    options: dict[str, object] = {"appname": app_name}
    if server_selection_timeout_ms is not None:
        options["serverSelectionTimeoutMS"] = server_selection_timeout_ms
    try:
        client: AsyncMongoClient = AsyncMongoClient(connection_string, **options)
    except (PyMongoError, ValueError) as e:
        raise MongoConnectionError(f"Invalid MongoDB connection string: {e}") from e
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        await client.close()
        raise MongoConnectionError(f"Unable to connect to MongoDB server: {e}") from e
    except BaseException:
        await client.close()
        raise
    return client


async def get_server_id_from_connection_string(connection_string: str) -> str:
    """Return ``host:port`` for the server a connection string points at.

    Replica sets (which is how Azure Cosmos DB answers) report member host
    names that differ from the connection string, so the id is taken from
    the first seed instead.
    """
    client = await connect_to_mongo_client(connection_string)
    try:
        # parse_uri resolves mongodb+srv:// records over DNS.
        parsed = await asyncio.to_thread(parse_uri, connection_string)
    except (PyMongoError, ValueError) as e:
        raise MongoConnectionError(f"Unable to resolve MongoDB server address: {e}") from e
    finally:
        await client.close()

    nodes = parsed.get("nodelist") or []
    if not nodes:
        raise MongoConnectionError("Connection string does not name any MongoDB host.")
    host, port = nodes[0]
    return f"{host}:{port}"


async def can_connect_to_local_mongo(
    connection_string: str = LOCAL_MONGO_CONNECTION_STRING,
) -> bool:
    try:
        client = await connect_to_mongo_client(
            connection_string, server_selection_timeout_ms=LOCAL_PROBE_TIMEOUT_MS,
        )
    except (MongoConnectionError, PyMongoError, ValueError) as e:
        logger.debug("Local MongoDB not reachable at %s: %s", connection_string, e)
        return False
    await client.close()
    return True
