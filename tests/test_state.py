"""Tests for the JSON state file."""

from __future__ import annotations

import json

import pytest

from cosmos_explorer.exceptions import StateError
from cosmos_explorer.state import JsonStateStore


class TestJsonStateStore:
    def test_missing_file_reads_as_empty(self, tmp_path):
        store = JsonStateStore(tmp_path / "nope" / "state.json")
        assert store.get("k") is None
        assert store.get("k", "d") == "d"
        assert store.keys() == []

    @pytest.mark.asyncio
    async def test_update_writes_through(self, tmp_path):
        path = tmp_path / "sub" / "state.json"
        store = JsonStateStore(path)
        await store.update("accounts", "[]")

        assert store.get("accounts") == "[]"
        assert json.loads(path.read_text()) == {"accounts": "[]"}
        assert JsonStateStore(path).get("accounts") == "[]"

    @pytest.mark.asyncio
    async def test_update_none_removes_key(self, tmp_path):
        store = JsonStateStore(tmp_path / "state.json")
        await store.update("a", "1")
        await store.update("b", "2")
        await store.update("a", None)
        assert store.keys() == ["b"]

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, tmp_path):
        store = JsonStateStore(tmp_path / "state.json")
        await store.update("a", "1")
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{broken")
        with pytest.raises(StateError):
            JsonStateStore(path).get("a")

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2]")
        with pytest.raises(StateError):
            JsonStateStore(path).get("a")

    def test_blank_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("  \n")
        assert JsonStateStore(path).get("a") is None
