"""
Token store serialization.

serialize: validate -> strip empties -> encode -> checksum -> compress -> envelope
deserialize: decompress -> verify checksum -> decode -> TokenStore -> validate

Compression runs in a worker thread. Checksums cover the uncompressed
encoded text, so an envelope can be verified after any compression.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from tokenforge.core.errors import (
    DecodeError,
    IntegrityError,
    TokenForgeError,
    TokenValidationError,
)
from tokenforge.core.ir import EnvelopeMetadata, SerializedEnvelope, TokenStore
from tokenforge.core.schema import validate
from tokenforge.transformers.json_schema import JSONSchemaTransformer

from .codecs import CompressionRegistry, FormatRegistry, default_compressions, default_formats

logger = logging.getLogger(__name__)

NO_COMPRESSION = "none"


class SerializationOptions(BaseModel):
    """Options for ``serialize``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    format: str = Field(default="json", description="json, yaml, toml or binary")
    minify: bool = False
    pretty: bool | None = Field(default=None, description="Defaults to not minify")
    include_metadata: bool = True
    compression: str = Field(default=NO_COMPRESSION, description="none, gzip or brotli")
    validate_tokens: bool = Field(default=True, alias="validate")
    exclude_empty: bool = False
    schema_doc: dict[str, Any] | None = Field(
        default=None, description="Schema to validate against instead of the token category schema"
    )

    @property
    def use_pretty(self) -> bool:
        return (not self.minify) if self.pretty is None else self.pretty


def checksum(data: bytes) -> str:
    """sha256 hex digest."""
    return hashlib.sha256(data).hexdigest()


def remove_empty_values(value: Any) -> Any:
    """Recursively drop None, empty strings and empty lists from mappings and lists."""
    if isinstance(value, Mapping):
        cleaned = {}
        for key, item in value.items():
            item = remove_empty_values(item)
            if item is None or item == "" or item == []:
                continue
            cleaned[key] = item
        return cleaned
    if isinstance(value, list):
        items = [remove_empty_values(item) for item in value]
        return [item for item in items if not (item is None or item == "" or item == [])]
    return value


def token_schema(tokens: TokenStore) -> dict[str, Any]:
    """Category schema enforced when no explicit schema is given."""
    return JSONSchemaTransformer().transform(tokens, {"include_examples": False}).schema


def _check(tokens: TokenStore, schema: dict[str, Any] | None, prefix: str) -> None:
    result = validate(tokens, schema if schema is not None else token_schema(tokens))
    if not result.valid:
        raise TokenValidationError(result.errors, prefix=prefix)


async def serialize(
    tokens: TokenStore,
    options: SerializationOptions | None = None,
    *,
    formats: FormatRegistry | None = None,
    compressions: CompressionRegistry | None = None,
) -> SerializedEnvelope:
    """
    Encode a token store into an envelope.

    Metadata is always attached when the payload is compressed, since the
    compression name is needed to read it back.

    Raises:
        UnsupportedFormatError: Unknown format or compression
        TokenValidationError: Validation requested and tokens are invalid
    """
    options = options or SerializationOptions()
    codec = (formats or default_formats()).get(options.format)
    compressor = None
    if options.compression != NO_COMPRESSION:
        compressor = (compressions or default_compressions()).get(options.compression)

    if options.validate_tokens:
        _check(tokens, options.schema_doc, "Token validation failed")

    data = tokens.to_dict()
    if options.exclude_empty:
        data = remove_empty_values(data)

    try:
        text = codec.encode(data, options.use_pretty)
    except (TypeError, ValueError) as e:
        raise TokenForgeError(f"Cannot encode tokens as {codec.name}: {e}") from e

    raw = text.encode("utf-8")
    payload: str | bytes = text
    compressed_size = None
    if compressor is not None:
        payload = await asyncio.to_thread(compressor.compress, raw)
        compressed_size = len(payload)
        logger.debug("Compressed %d -> %d bytes with %s", len(raw), compressed_size, compressor.name)

    metadata = None
    if options.include_metadata or compressor is not None:
        metadata = EnvelopeMetadata(
            original_size=len(raw),
            compressed_size=compressed_size,
            checksum=checksum(raw),
            compression=compressor.name if compressor is not None else None,
        )

    return SerializedEnvelope(
        format=codec.name,
        timestamp=datetime.now(timezone.utc).isoformat(),
        data=payload,
        metadata=metadata,
    )


async def deserialize(
    envelope: SerializedEnvelope,
    *,
    validate: bool = True,
    schema_doc: dict[str, Any] | None = None,
    formats: FormatRegistry | None = None,
    compressions: CompressionRegistry | None = None,
) -> TokenStore:
    """
    Decode an envelope into a new token store.

    Raises:
        UnsupportedFormatError: Unknown format or compression
        IntegrityError: Payload does not decompress or checksum mismatches
        DecodeError: Verified text is not a valid token tree
        TokenValidationError: Re-validation requested and failed
    """
    codec = (formats or default_formats()).get(envelope.format)
    metadata = envelope.metadata
    payload = envelope.data.encode("utf-8") if isinstance(envelope.data, str) else envelope.data

    if metadata is not None and metadata.compression:
        decompressor = (compressions or default_compressions()).get(metadata.compression)
        try:
            raw = await asyncio.to_thread(decompressor.decompress, payload)
        except decompressor.errors as e:
            raise IntegrityError(f"Payload does not decompress with {decompressor.name}: {e}") from e
    else:
        raw = payload

    if metadata is not None and metadata.checksum:
        actual = checksum(raw)
        if actual != metadata.checksum:
            raise IntegrityError(
                f"Checksum mismatch: expected {metadata.checksum}, got {actual}"
            )

    try:
        text = raw.decode("utf-8")
        tree = codec.decode(text)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Payload is not UTF-8 text: {e}") from e
    except codec.errors as e:
        raise DecodeError(f"Malformed {codec.name} payload: {e}") from e

    if not isinstance(tree, Mapping):
        raise DecodeError(f"Decoded {codec.name} payload is not a mapping")
    try:
        store = TokenStore.from_dict(tree)
    except PydanticValidationError as e:
        raise DecodeError(f"Decoded tokens have invalid metadata: {e}") from e

    if validate:
        _check(store, schema_doc, "Deserialized tokens failed validation")
    return store
