"""
Error types for token transformation, validation, and serialization.

Pure stages (merge, reference resolution, overlay resolution) never raise.
Everything here belongs to the I/O and validation-gated stages, where the
caller is expected to catch per call.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


class TokenForgeError(Exception):
    """Base exception for all tokenforge errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class TransformError(TokenForgeError):
    """
    Raised when a transformer cannot produce its artifact.

    Scoped to a single artifact. Other transformers stay usable.

    Examples:
    - A category that must be a mapping holds a scalar
    - Unsupported option combination
    """

    def __init__(self, message: str, transformer: str, context: Optional["ErrorContext"] = None):
        self.transformer = transformer
        super().__init__(f"[{transformer}] {message}", context)


@dataclass(frozen=True)
class ValidationIssue:
    """A single schema mismatch at a dotted path."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"


class TokenValidationError(TokenForgeError):
    """
    Raised when fail-fast validation was requested and the tokens are invalid.

    Carries every collected issue, not just the first.
    """

    def __init__(self, issues: list[ValidationIssue], prefix: str = "Token validation failed"):
        self.issues = list(issues)
        lines = [f"{prefix} ({len(self.issues)} issue(s)):"]
        lines.extend(f"  - {issue}" for issue in self.issues)
        super().__init__("\n".join(lines))


class IntegrityError(TokenForgeError):
    """
    Raised when a serialized envelope cannot be verified.

    Examples:
    - Checksum of the decompressed text does not match metadata
    - Compressed payload does not decompress
    """

    pass


class UnsupportedFormatError(TokenForgeError):
    """Raised for format, compression, or transformer names with no registered codec."""

    def __init__(self, kind: str, name: str, available: list[str] | None = None):
        self.kind = kind
        self.name = name
        self.available = sorted(available or [])
        message = f"Unsupported {kind}: {name!r}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class DecodeError(TokenForgeError):
    """Raised when verified text cannot be decoded into a token store."""

    pass


class ThemeNotFoundError(TokenForgeError):
    """Raised when a theme name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Theme not registered: {name!r}")


class InvalidThemeError(TokenForgeError):
    """Raised when an override would produce a store with invalid metadata."""

    def __init__(self, name: str, detail: str):
        self.name = name
        super().__init__(f"Theme {name!r} has invalid metadata: {detail}")


class VersionError(TokenForgeError):
    """
    Raised for version bookkeeping failures.

    Examples:
    - A version string is not semantic (MAJOR.MINOR.PATCH)
    - A requested version was never recorded
    - No migration chain connects two versions
    """

    pass


class StorageError(TokenForgeError):
    """Raised for invalid storage keys or backend failures."""

    pass


class ManifestError(TokenForgeError):
    """Raised when tokenforge.toml is missing or malformed."""

    pass


@dataclass
class ErrorContext:
    """
    Location information for an error.

    Attributes:
        file: Path to the file being processed
        path: Optional dotted token path inside that file
        artifacts: Names of artifacts affected by the error
    """

    file: Path | None = None
    path: str | None = None
    artifacts: list[str] = field(default_factory=list)

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "tokens.yaml at colors.primary.500"
        """
        parts: list[str] = []
        if self.file:
            parts.append(str(self.file))
        if self.path:
            parts.append(f"at {self.path}")
        if self.artifacts:
            parts.append(f"(artifacts: {', '.join(self.artifacts)})")
        return " ".join(parts)


def make_transform_error(
    message: str,
    transformer: str,
    path: str | None = None,
) -> TransformError:
    """
    Helper to create a TransformError with optional token path context.

    Args:
        message: Error description
        transformer: Name of the failing transformer
        path: Optional dotted token path that triggered the failure

    Returns:
        TransformError with context if a path was provided
    """
    if path:
        return TransformError(message, transformer, ErrorContext(path=path, artifacts=[transformer]))
    return TransformError(message, transformer)
