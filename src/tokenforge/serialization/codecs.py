"""
Format and compression capability registries.

Each registry maps a name to an encode/decode pair. The default registries
are populated from whichever encoders are importable; asking for a name
that was never registered raises UnsupportedFormatError straight away.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import json
import logging
import tomllib
import zlib
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import yaml

from tokenforge.core.errors import UnsupportedFormatError

logger = logging.getLogger(__name__)

Encoder = Callable[[dict[str, Any], bool], str]
Decoder = Callable[[str], Any]


@dataclass(frozen=True)
class FormatCodec:
    """
    Text encoding for a token tree.

    Attributes:
        name: Format name used in envelopes
        encode: ``(tree, pretty) -> text``
        decode: ``text -> tree``
        errors: Exceptions ``decode`` raises for malformed text
    """

    name: str
    encode: Encoder
    decode: Decoder
    errors: tuple[type[BaseException], ...] = (ValueError,)


@dataclass(frozen=True)
class CompressionCodec:
    """Byte compression for encoded text."""

    name: str
    compress: Callable[[bytes], bytes]
    decompress: Callable[[bytes], bytes]
    errors: tuple[type[BaseException], ...] = (ValueError,)


class _Registry:
    kind = "codec"

    def __init__(self) -> None:
        self._codecs: dict[str, Any] = {}

    def register(self, codec: Any) -> None:
        self._codecs[codec.name] = codec
        logger.debug("Registered %s codec %r", self.kind, codec.name)

    def get(self, name: str) -> Any:
        try:
            return self._codecs[name]
        except KeyError:
            raise UnsupportedFormatError(self.kind, name, list(self._codecs)) from None

    def names(self) -> list[str]:
        return list(self._codecs)

    def __contains__(self, name: object) -> bool:
        return name in self._codecs


class FormatRegistry(_Registry):
    kind = "format"

    def get(self, name: str) -> FormatCodec:
        return super().get(name)


class CompressionRegistry(_Registry):
    kind = "compression"

    def get(self, name: str) -> CompressionCodec:
        return super().get(name)


# =============================================================================
# Format codecs
# =============================================================================


def _json_encode(tree: dict[str, Any], pretty: bool) -> str:
    if pretty:
        return json.dumps(tree, indent=2, ensure_ascii=False)
    return json.dumps(tree, separators=(",", ":"), ensure_ascii=False)


def _yaml_encode(tree: dict[str, Any], pretty: bool) -> str:
    return yaml.safe_dump(
        tree,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=not pretty,
        width=80 if pretty else float("inf"),
    )


def _yaml_decode(text: str) -> Any:
    return yaml.safe_load(text)


JSON_CODEC = FormatCodec("json", _json_encode, json.loads, (ValueError,))
YAML_CODEC = FormatCodec("yaml", _yaml_encode, _yaml_decode, (yaml.YAMLError,))


def _toml_codec() -> FormatCodec | None:
    try:
        import tomli_w
    except ImportError:
        return None

    def encode(tree: dict[str, Any], pretty: bool) -> str:
        return tomli_w.dumps(tree)

    return FormatCodec("toml", encode, tomllib.loads, (tomllib.TOMLDecodeError,))


def _binary_codec() -> FormatCodec | None:
    try:
        import msgpack
    except ImportError:
        return None

    def encode(tree: dict[str, Any], pretty: bool) -> str:
        return base64.b64encode(msgpack.packb(tree, use_bin_type=True)).decode("ascii")

    def decode(text: str) -> Any:
        raw = base64.b64decode(text.encode("ascii"), validate=True)
        return msgpack.unpackb(raw, raw=False, strict_map_key=False)

    return FormatCodec(
        "binary",
        encode,
        decode,
        (ValueError, binascii.Error, msgpack.exceptions.UnpackException),
    )


def default_formats() -> FormatRegistry:
    """Registry with json and yaml, plus toml and binary when their encoders import."""
    registry = FormatRegistry()
    registry.register(JSON_CODEC)
    registry.register(YAML_CODEC)
    for factory in (_toml_codec, _binary_codec):
        codec = factory()
        if codec is not None:
            registry.register(codec)
    return registry


# =============================================================================
# Compression codecs
# =============================================================================


def _gzip_compress(data: bytes) -> bytes:
    return gzip.compress(data, mtime=0)


GZIP_CODEC = CompressionCodec(
    "gzip",
    _gzip_compress,
    gzip.decompress,
    (OSError, EOFError, zlib.error),
)


def _brotli_codec() -> CompressionCodec | None:
    try:
        import brotli
    except ImportError:
        return None
    return CompressionCodec("brotli", brotli.compress, brotli.decompress, (brotli.error,))


def default_compressions() -> CompressionRegistry:
    """Registry with gzip, plus brotli when the brotli package imports."""
    registry = CompressionRegistry()
    registry.register(GZIP_CODEC)
    codec = _brotli_codec()
    if codec is not None:
        registry.register(codec)
    return registry
