"""
Token storage backends.

Thin adapters that persist serialized envelopes:
- KeyValueTokenStorage over any KeyValueShim (in-memory, sqlite)
- FileSystemTokenStorage writing ``<key>.json`` envelope documents

Backends hold no engine logic: ``save`` serializes, ``load`` deserializes
and verifies. Blocking I/O runs in worker threads.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError as PydanticValidationError

from tokenforge.core.errors import DecodeError, StorageError
from tokenforge.core.ir import SerializedEnvelope, TokenStore

from .serializer import SerializationOptions, deserialize, serialize

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "tokenforge-tokens-"


def check_key(key: str) -> str:
    """Reject empty keys and keys that could escape a storage namespace."""
    if not key or "/" in key or "\\" in key or ".." in key or "\x00" in key:
        raise StorageError(f"Invalid storage key: {key!r}")
    return key


def parse_envelope(text: str) -> SerializedEnvelope:
    try:
        return SerializedEnvelope.from_json(text)
    except (ValueError, PydanticValidationError) as e:
        raise DecodeError(f"Stored envelope is malformed: {e}") from e


class TokenStorage(ABC):
    """Async persistence contract for token stores."""

    def __init__(self, options: SerializationOptions | None = None):
        self.options = options or SerializationOptions()

    @abstractmethod
    async def save(self, key: str, tokens: TokenStore) -> None: ...

    @abstractmethod
    async def load(self, key: str) -> TokenStore | None: ...

    @abstractmethod
    async def exists(self, key: str) -> bool: ...

    @abstractmethod
    async def delete(self, key: str) -> bool: ...

    @abstractmethod
    async def list(self) -> list[str]: ...


# =============================================================================
# Key/value backends
# =============================================================================


@runtime_checkable
class KeyValueShim(Protocol):
    """Minimal string key/value store."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class InMemoryKeyValueShim:
    """Dict-backed shim, safe for use from worker threads."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._items)


class SQLiteKeyValueShim:
    """sqlite3-backed shim storing items in a single table."""

    def __init__(self, db_path: str | Path = ":memory:", table: str = "token_items"):
        if not table.isidentifier():
            raise StorageError(f"Invalid table name: {table!r}")
        self.table = table
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        with self._lock, self._conn:
            self._conn.execute(
                f"CREATE TABLE IF NOT EXISTS {table} (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )

    def get_item(self, key: str) -> str | None:
        with self._lock:
            row = self._conn.execute(f"SELECT value FROM {self.table} WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self._lock, self._conn:
            self._conn.execute(
                f"INSERT OR REPLACE INTO {self.table} (key, value) VALUES (?, ?)",
                (key, value),
            )

    def remove_item(self, key: str) -> None:
        with self._lock, self._conn:
            self._conn.execute(f"DELETE FROM {self.table} WHERE key = ?", (key,))

    def keys(self) -> list[str]:
        with self._lock:
            rows = self._conn.execute(f"SELECT key FROM {self.table} ORDER BY key").fetchall()
        return [row[0] for row in rows]

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class KeyValueTokenStorage(TokenStorage):
    """Stores envelopes as JSON strings under ``<prefix><key>``."""

    def __init__(
        self,
        shim: KeyValueShim,
        prefix: str = DEFAULT_KEY_PREFIX,
        options: SerializationOptions | None = None,
    ):
        super().__init__(options)
        self.shim = shim
        self.prefix = prefix

    def _storage_key(self, key: str) -> str:
        return f"{self.prefix}{check_key(key)}"

    async def save(self, key: str, tokens: TokenStore) -> None:
        storage_key = self._storage_key(key)
        envelope = await serialize(tokens, self.options)
        await asyncio.to_thread(self.shim.set_item, storage_key, envelope.to_json(indent=None))
        logger.debug("Saved tokens under %s", storage_key)

    async def load(self, key: str) -> TokenStore | None:
        text = await asyncio.to_thread(self.shim.get_item, self._storage_key(key))
        if text is None:
            return None
        return await deserialize(parse_envelope(text), validate=self.options.validate_tokens)

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self.shim.get_item, self._storage_key(key)) is not None

    async def delete(self, key: str) -> bool:
        storage_key = self._storage_key(key)
        if await asyncio.to_thread(self.shim.get_item, storage_key) is None:
            return False
        await asyncio.to_thread(self.shim.remove_item, storage_key)
        return True

    async def list(self) -> list[str]:
        keys = await asyncio.to_thread(self.shim.keys)
        return [k[len(self.prefix):] for k in keys if k.startswith(self.prefix)]


# =============================================================================
# Filesystem backend
# =============================================================================


class FileSystemTokenStorage(TokenStorage):
    """Stores each envelope as ``<base_path>/<key>.json``."""

    SUFFIX = ".json"

    def __init__(self, base_path: str | Path, options: SerializationOptions | None = None):
        super().__init__(options)
        self.base_path = Path(base_path)

    def _path(self, key: str) -> Path:
        return self.base_path / f"{check_key(key)}{self.SUFFIX}"

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(path)

    async def save(self, key: str, tokens: TokenStore) -> None:
        path = self._path(key)
        envelope = await serialize(tokens, self.options)
        await asyncio.to_thread(self._write, path, envelope.to_json())
        logger.info("Saved tokens to %s", path)

    async def load(self, key: str) -> TokenStore | None:
        path = self._path(key)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        return await deserialize(parse_envelope(text), validate=self.options.validate_tokens)

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._path(key).is_file)

    async def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False
        return True

    async def list(self) -> list[str]:
        def scan() -> list[str]:
            if not self.base_path.is_dir():
                return []
            return sorted(p.stem for p in self.base_path.glob(f"*{self.SUFFIX}") if p.is_file())

        return await asyncio.to_thread(scan)


def envelope_summary(envelope: SerializedEnvelope) -> dict[str, object]:
    """Short description of an envelope for CLI output."""
    wire = envelope.to_wire()
    wire.pop("data", None)
    return wire
