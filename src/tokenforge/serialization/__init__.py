"""Token serialization: codecs, envelopes and storage backends."""

from .codecs import (
    CompressionCodec,
    CompressionRegistry,
    FormatCodec,
    FormatRegistry,
    default_compressions,
    default_formats,
)
from .serializer import SerializationOptions, checksum, deserialize, serialize
from .storage import (
    FileSystemTokenStorage,
    InMemoryKeyValueShim,
    KeyValueShim,
    KeyValueTokenStorage,
    SQLiteKeyValueShim,
    TokenStorage,
)

__all__ = [
    "CompressionCodec",
    "CompressionRegistry",
    "FormatCodec",
    "FormatRegistry",
    "default_compressions",
    "default_formats",
    "SerializationOptions",
    "checksum",
    "deserialize",
    "serialize",
    "FileSystemTokenStorage",
    "InMemoryKeyValueShim",
    "KeyValueShim",
    "KeyValueTokenStorage",
    "SQLiteKeyValueShim",
    "TokenStorage",
]
