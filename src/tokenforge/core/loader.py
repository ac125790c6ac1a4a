"""
Token file loading.

Reads token stores and override trees from json, yaml or toml files,
picking the codec by file suffix. Malformed files raise DecodeError with
the file path attached.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tokenforge.serialization.codecs import FormatRegistry, default_formats

from .errors import DecodeError, ErrorContext, UnsupportedFormatError
from .ir import TokenStore, stringify_keys

logger = logging.getLogger(__name__)

SUFFIX_FORMATS: dict[str, str] = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}


# =============================================================================
# Path helpers
# =============================================================================


def format_for_path(path: Path) -> str:
    """Format name for a token file, from its suffix."""
    try:
        return SUFFIX_FORMATS[path.suffix.lower()]
    except KeyError:
        raise UnsupportedFormatError("token file suffix", path.suffix or "<none>", list(SUFFIX_FORMATS)) from None


# =============================================================================
# Loading
# =============================================================================


def load_tree(path: Path, formats: FormatRegistry | None = None) -> dict[str, Any]:
    """
    Load a nested token tree from a file.

    Mapping keys are returned as strings whatever the source format parsed.

    Raises:
        DecodeError: If the file is missing, malformed, or not a mapping
        UnsupportedFormatError: If the suffix has no codec
    """
    path = Path(path)
    codec = (formats or default_formats()).get(format_for_path(path))
    context = ErrorContext(file=path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DecodeError("Token file not found", context) from None
    except UnicodeDecodeError as e:
        raise DecodeError(f"Token file is not valid UTF-8: {e}", context) from e

    try:
        data = codec.decode(text)
    except codec.errors as e:
        raise DecodeError(f"Invalid {codec.name}: {e}", context) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a mapping at the top level, got {type(data).__name__}", context)
    logger.debug("Loaded %s tokens from %s", codec.name, path)
    return stringify_keys(data)


def load_token_store(path: Path, formats: FormatRegistry | None = None) -> TokenStore:
    """
    Load a complete token store (tree plus metadata) from a file.

    Raises:
        DecodeError: If the file cannot be read or has invalid metadata
    """
    data = load_tree(path, formats)
    try:
        return TokenStore.from_dict(data)
    except ValidationError as e:
        raise DecodeError(f"Invalid token store: {e}", ErrorContext(file=Path(path))) from e


def load_override(path: Path, formats: FormatRegistry | None = None) -> dict[str, Any]:
    """Load an override tree. Partial metadata is allowed."""
    return load_tree(path, formats)


def write_tree(tree: dict[str, Any], path: Path, formats: FormatRegistry | None = None) -> Path:
    """Encode a tree with the codec for ``path``'s suffix and write it."""
    path = Path(path)
    codec = (formats or default_formats()).get(format_for_path(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(codec.encode(tree, True), encoding="utf-8")
    logger.info("Wrote %s tokens to %s", codec.name, path)
    return path
