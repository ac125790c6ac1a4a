"""Tests for token storage backends."""

from __future__ import annotations

import json

import pytest


@pytest.fixture(params=["memory", "sqlite", "filesystem"])
def storage(request, tmp_path):
    """Each storage backend with default options."""
    from tokenforge.serialization.storage import (
        FileSystemTokenStorage,
        InMemoryKeyValueShim,
        KeyValueTokenStorage,
        SQLiteKeyValueShim,
    )

    if request.param == "memory":
        yield KeyValueTokenStorage(InMemoryKeyValueShim())
    elif request.param == "sqlite":
        shim = SQLiteKeyValueShim(tmp_path / "tokens.db")
        yield KeyValueTokenStorage(shim)
        shim.close()
    else:
        yield FileSystemTokenStorage(tmp_path / "store")


class TestTokenStorage:
    """Contract tests run against every backend."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, storage, base_store) -> None:
        await storage.save("base", base_store)

        loaded = await storage.load("base")

        assert loaded is not None
        assert loaded.to_dict() == base_store.to_dict()

    @pytest.mark.asyncio
    async def test_load_missing_returns_none(self, storage) -> None:
        assert await storage.load("missing") is None

    @pytest.mark.asyncio
    async def test_exists_list_delete(self, storage, small_store) -> None:
        await storage.save("a", small_store)
        await storage.save("b", small_store)

        assert await storage.exists("a")
        assert sorted(await storage.list()) == ["a", "b"]
        assert await storage.delete("a") is True
        assert await storage.delete("a") is False
        assert not await storage.exists("a")
        assert await storage.list() == ["b"]

    @pytest.mark.asyncio
    async def test_save_overwrites(self, storage, small_store, base_store) -> None:
        await storage.save("theme", small_store)
        await storage.save("theme", base_store)

        loaded = await storage.load("theme")

        assert loaded.metadata.id == "base"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["", "../escape", "a/b", "a\\b"])
    async def test_invalid_keys_rejected(self, storage, small_store, key: str) -> None:
        from tokenforge.core.errors import StorageError

        with pytest.raises(StorageError):
            await storage.save(key, small_store)
        with pytest.raises(StorageError):
            await storage.load(key)


class TestKeyValueStorage:
    """Tests specific to the key/value backend."""

    @pytest.mark.asyncio
    async def test_prefix_namespacing(self, small_store) -> None:
        from tokenforge.serialization.storage import InMemoryKeyValueShim, KeyValueTokenStorage

        shim = InMemoryKeyValueShim()
        shim.set_item("unrelated", "value")
        storage = KeyValueTokenStorage(shim, prefix="app-")

        await storage.save("light", small_store)

        assert sorted(shim.keys()) == ["app-light", "unrelated"]
        assert await storage.list() == ["light"]
        assert json.loads(shim.get_item("app-light"))["format"] == "json"

    @pytest.mark.asyncio
    async def test_compressed_options(self, base_store) -> None:
        from tokenforge.serialization.serializer import SerializationOptions
        from tokenforge.serialization.storage import InMemoryKeyValueShim, KeyValueTokenStorage

        shim = InMemoryKeyValueShim()
        storage = KeyValueTokenStorage(shim, options=SerializationOptions(format="binary", compression="gzip"))

        await storage.save("base", base_store)
        stored = json.loads(shim.get_item("tokenforge-tokens-base"))

        assert stored["dataEncoding"] == "base64"
        assert stored["metadata"]["compression"] == "gzip"
        assert (await storage.load("base")).to_dict() == base_store.to_dict()

    @pytest.mark.asyncio
    async def test_corrupt_entry_raises_decode_error(self) -> None:
        from tokenforge.core.errors import DecodeError
        from tokenforge.serialization.storage import InMemoryKeyValueShim, KeyValueTokenStorage

        shim = InMemoryKeyValueShim()
        shim.set_item("tokenforge-tokens-bad", "not an envelope")
        storage = KeyValueTokenStorage(shim)

        with pytest.raises(DecodeError):
            await storage.load("bad")

    @pytest.mark.asyncio
    async def test_tampered_entry_raises_integrity_error(self, small_store) -> None:
        from tokenforge.core.errors import IntegrityError
        from tokenforge.serialization.storage import InMemoryKeyValueShim, KeyValueTokenStorage

        shim = InMemoryKeyValueShim()
        storage = KeyValueTokenStorage(shim)
        await storage.save("theme", small_store)

        wire = json.loads(shim.get_item("tokenforge-tokens-theme"))
        wire["data"] = wire["data"].replace("#3b82f6", "#000000")
        shim.set_item("tokenforge-tokens-theme", json.dumps(wire))

        with pytest.raises(IntegrityError):
            await storage.load("theme")

    def test_sqlite_rejects_bad_table_name(self) -> None:
        from tokenforge.core.errors import StorageError
        from tokenforge.serialization.storage import SQLiteKeyValueShim

        with pytest.raises(StorageError):
            SQLiteKeyValueShim(":memory:", table="items; DROP TABLE x")

    def test_sqlite_persists_across_connections(self, tmp_path) -> None:
        from tokenforge.serialization.storage import SQLiteKeyValueShim

        db = tmp_path / "kv.db"
        first = SQLiteKeyValueShim(db)
        first.set_item("k", "v")
        first.close()

        second = SQLiteKeyValueShim(db)
        try:
            assert second.get_item("k") == "v"
            assert second.keys() == ["k"]
        finally:
            second.close()


class TestFileSystemStorage:
    """Tests specific to the filesystem backend."""

    @pytest.mark.asyncio
    async def test_writes_envelope_document(self, tmp_path, small_store) -> None:
        from tokenforge.serialization.storage import FileSystemTokenStorage

        storage = FileSystemTokenStorage(tmp_path / "envelopes")
        await storage.save("small", small_store)

        path = tmp_path / "envelopes" / "small.json"
        wire = json.loads(path.read_text(encoding="utf-8"))

        assert path.is_file()
        assert wire["format"] == "json"
        assert "checksum" in wire["metadata"]
        assert not list((tmp_path / "envelopes").glob("*.tmp"))

    @pytest.mark.asyncio
    async def test_list_on_missing_directory(self, tmp_path) -> None:
        from tokenforge.serialization.storage import FileSystemTokenStorage

        assert await FileSystemTokenStorage(tmp_path / "nowhere").list() == []

    def test_envelope_summary_drops_data(self) -> None:
        from tokenforge.core.ir import SerializedEnvelope
        from tokenforge.serialization.storage import envelope_summary

        envelope = SerializedEnvelope(format="json", timestamp="t", data="{}")

        assert envelope_summary(envelope) == {"format": "json", "version": "1.0.0", "timestamp": "t"}
