"""Tests for short-lived MongoDB connections."""

from __future__ import annotations

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from cosmos_explorer.accounts import mongo
from cosmos_explorer.exceptions import MongoConnectionError


class _FakeAdmin:
    def __init__(self, error: Exception | None) -> None:
        self._error = error

    async def command(self, name: str) -> dict:
        if self._error is not None:
            raise self._error
        return {"ok": 1}


class FakeMongoClient:
    instances: list[FakeMongoClient] = []
    error: Exception | None = None

    def __init__(self, connection_string: str, appname: str | None = None, **options) -> None:
        self.connection_string = connection_string
        self.appname = appname
        self.options = options
        self.closed = False
        self.admin = _FakeAdmin(type(self).error)
        type(self).instances.append(self)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    FakeMongoClient.instances = []
    FakeMongoClient.error = None
    monkeypatch.setattr(mongo, "AsyncMongoClient", FakeMongoClient)
    return FakeMongoClient


class TestConnect:
    @pytest.mark.asyncio
    async def test_ping_success_returns_open_client(self, fake_client):
        client = await mongo.connect_to_mongo_client("mongodb://h:1")
        assert client.closed is False
        assert client.appname.startswith("cosmos-explorer/")
        assert "serverSelectionTimeoutMS" not in client.options

    @pytest.mark.asyncio
    async def test_ping_failure_closes_and_raises(self, fake_client):
        fake_client.error = ServerSelectionTimeoutError("no servers")
        with pytest.raises(MongoConnectionError):
            await mongo.connect_to_mongo_client("mongodb://h:1")
        assert fake_client.instances[0].closed is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "connection_string", ["mongodb://h:abc", "mongodb://u:p@ss@h:1"],
    )
    async def test_malformed_uri_is_a_connection_error(self, connection_string):
        # The real driver rejects these while parsing, before any network I/O.
        with pytest.raises(MongoConnectionError, match="Invalid MongoDB connection string"):
            await mongo.connect_to_mongo_client(connection_string)


class TestServerId:
    @pytest.mark.asyncio
    async def test_single_host(self, fake_client):
        server_id = await mongo.get_server_id_from_connection_string("mongodb://db.example:27018")
        assert server_id == "db.example:27018"
        assert fake_client.instances[0].closed is True

    @pytest.mark.asyncio
    async def test_default_port(self, fake_client):
        assert await mongo.get_server_id_from_connection_string("mongodb://db.example") == (
            "db.example:27017"
        )

    @pytest.mark.asyncio
    async def test_replica_set_uses_first_seed(self, fake_client):
        server_id = await mongo.get_server_id_from_connection_string(
            "mongodb://a.example:10255,b.example:10256/?replicaSet=globaldb&ssl=true"
        )
        assert server_id == "a.example:10255"

    @pytest.mark.asyncio
    async def test_unreachable_server_propagates(self, fake_client):
        fake_client.error = ServerSelectionTimeoutError("no servers")
        with pytest.raises(MongoConnectionError):
            await mongo.get_server_id_from_connection_string("mongodb://db.example")

    @pytest.mark.asyncio
    async def test_malformed_port_is_a_connection_error(self):
        with pytest.raises(MongoConnectionError):
            await mongo.get_server_id_from_connection_string("mongodb://h:abc")


class TestLocalProbe:
    @pytest.mark.asyncio
    async def test_available(self, fake_client):
        assert await mongo.can_connect_to_local_mongo() is True
        assert fake_client.instances[0].connection_string == "mongodb://127.0.0.1:27017"
        assert fake_client.instances[0].closed is True

    @pytest.mark.asyncio
    async def test_unavailable_is_swallowed(self, fake_client):
        fake_client.error = ServerSelectionTimeoutError("refused")
        assert await mongo.can_connect_to_local_mongo() is False

    @pytest.mark.asyncio
    async def test_uses_short_server_selection_timeout(self, fake_client):
        await mongo.can_connect_to_local_mongo()
        options = fake_client.instances[0].options
        assert options["serverSelectionTimeoutMS"] == mongo.LOCAL_PROBE_TIMEOUT_MS

    @pytest.mark.asyncio
    async def test_malformed_local_uri_is_swallowed(self):
        assert await mongo.can_connect_to_local_mongo("mongodb://h:abc") is False
