"""
Serialized envelope types.

An envelope wraps an encoded token store with the metadata needed to verify
and decode it. Field names are snake_case in Python and camelCase on the
wire.
"""

from __future__ import annotations

import base64
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ENVELOPE_VERSION = "1.0.0"


class EnvelopeMetadata(BaseModel):
    """Size, compression and checksum of an encoded payload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    original_size: int = Field(alias="originalSize", ge=0)
    compressed_size: int | None = Field(default=None, alias="compressedSize")
    checksum: str = Field(description="sha256 hex digest of the uncompressed text")
    compression: str | None = Field(default=None, description="gzip or brotli")


class SerializedEnvelope(BaseModel):
    """
    An encoded token store.

    ``data`` is text for uncompressed payloads and bytes for compressed ones.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    format: str
    version: str = ENVELOPE_VERSION
    timestamp: str
    data: str | bytes
    metadata: EnvelopeMetadata | None = None

    @property
    def is_compressed(self) -> bool:
        return self.metadata is not None and self.metadata.compression is not None

    def to_wire(self) -> dict[str, Any]:
        """Return a JSON-safe mapping; bytes data is base64 encoded."""
        wire: dict[str, Any] = {
            "format": self.format,
            "version": self.version,
            "timestamp": self.timestamp,
        }
        if isinstance(self.data, bytes):
            wire["data"] = base64.b64encode(self.data).decode("ascii")
            wire["dataEncoding"] = "base64"
        else:
            wire["data"] = self.data
        if self.metadata is not None:
            wire["metadata"] = self.metadata.model_dump(by_alias=True, exclude_none=True)
        return wire

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_wire(), indent=indent)

    @classmethod
    def from_wire(cls, wire: dict[str, Any]) -> SerializedEnvelope:
        data = wire.get("data", "")
        if wire.get("dataEncoding") == "base64" and isinstance(data, str):
            data = base64.b64decode(data.encode("ascii"))
        return cls.model_validate(
            {
                "format": wire.get("format"),
                "version": wire.get("version", ENVELOPE_VERSION),
                "timestamp": wire.get("timestamp"),
                "data": data,
                "metadata": wire.get("metadata"),
            }
        )

    @classmethod
    def from_json(cls, text: str) -> SerializedEnvelope:
        wire = json.loads(text)
        if not isinstance(wire, dict):
            raise ValueError(f"Envelope must be a JSON object, got {type(wire).__name__}")
        return cls.from_wire(wire)
