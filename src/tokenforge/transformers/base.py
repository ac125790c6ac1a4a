"""
Transformer framework.

A transformer turns a resolved token store plus options into one artifact.
Transformers read only their inputs: no clocks, no globals. A transformer
that raises fails its own artifact; ``run_transformers`` keeps going with
the rest.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from tokenforge.core.errors import TransformError, UnsupportedFormatError, make_transform_error
from tokenforge.core.ir import TokenStore

logger = logging.getLogger(__name__)


class TransformOptions(BaseModel):
    """Options shared by every transformer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    include_comments: bool = True
    generated_at: str | None = Field(
        default=None, description="Timestamp written into headers; omitted when None"
    )


OptionsT = TypeVar("OptionsT", bound=TransformOptions)
ResultT = TypeVar("ResultT")


@dataclass
class Artifact:
    """One rendered output file."""

    transformer: str
    filename: str
    content: str
    result: Any = None


@dataclass
class TransformReport:
    """Artifacts and per-artifact failures from ``run_transformers``."""

    artifacts: dict[str, Artifact] = field(default_factory=dict)
    errors: dict[str, TransformError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class TokenTransformer(ABC, Generic[OptionsT, ResultT]):
    """Base class for artifact transformers."""

    name: ClassVar[str]
    filename: ClassVar[str]
    options_model: ClassVar[type[TransformOptions]] = TransformOptions

    def resolve_options(self, options: OptionsT | Mapping[str, Any] | None) -> OptionsT:
        if options is None:
            return self.options_model()  # type: ignore[return-value]
        if isinstance(options, Mapping):
            try:
                return self.options_model.model_validate(dict(options))  # type: ignore[return-value]
            except PydanticValidationError as e:
                raise TransformError(f"Invalid options: {e}", self.name) from e
        return options

    @abstractmethod
    def transform(self, tokens: TokenStore, options: OptionsT | Mapping[str, Any] | None = None) -> ResultT:
        """Produce the transformer-specific result."""

    @abstractmethod
    def render(self, result: ResultT) -> str:
        """Text content of the artifact for a result."""

    def artifact(self, tokens: TokenStore, options: OptionsT | Mapping[str, Any] | None = None) -> Artifact:
        result = self.transform(tokens, options)
        return Artifact(self.name, self.filename, self.render(result), result)

    # -------------------------------------------------------------------------
    # Helpers for subclasses
    # -------------------------------------------------------------------------

    def category(self, tokens: TokenStore, name: str, required: bool = False) -> Mapping[str, Any]:
        """
        Get a category mapping.

        Raises:
            TransformError: If the category is present but not a mapping
        """
        value = tokens.tree.get(name)
        if value is None:
            if required:
                raise make_transform_error(f"Missing required category {name!r}", self.name, name)
            return {}
        if not isinstance(value, Mapping):
            raise make_transform_error(
                f"Category {name!r} must be a mapping, got {type(value).__name__}",
                self.name,
                name,
            )
        return value


TRANSFORMERS: dict[str, type[TokenTransformer[Any, Any]]] = {}

T = TypeVar("T", bound=type[TokenTransformer[Any, Any]])


def register_transformer(cls: T) -> T:
    """Class decorator adding a transformer to TRANSFORMERS under its name."""
    TRANSFORMERS[cls.name] = cls
    return cls


def get_transformer(name: str) -> TokenTransformer[Any, Any]:
    try:
        return TRANSFORMERS[name]()
    except KeyError:
        raise UnsupportedFormatError("transformer", name, list(TRANSFORMERS)) from None


def _normalize_requests(
    requests: Mapping[str, Any] | Iterable[str],
) -> list[tuple[str, Any]]:
    if isinstance(requests, Mapping):
        return list(requests.items())
    return [(name, None) for name in requests]


def run_transformers(
    tokens: TokenStore,
    requests: Mapping[str, Any] | Iterable[str],
) -> TransformReport:
    """
    Run each requested transformer independently.

    Args:
        tokens: Resolved token store
        requests: Transformer names, or a mapping of name -> options

    Returns:
        TransformReport; a failing transformer is recorded in ``errors``
        and the others still produce artifacts

    Raises:
        UnsupportedFormatError: If a requested name is not registered
    """
    report = TransformReport()
    for name, options in _normalize_requests(requests):
        transformer = get_transformer(name)
        try:
            report.artifacts[name] = transformer.artifact(tokens, options)
        except TransformError as e:
            report.errors[name] = e
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            report.errors[name] = TransformError(f"Unexpected {type(e).__name__}: {e}", name)
        if name in report.errors:
            logger.warning("Transformer %s failed for %s: %s", name, tokens.metadata.id, report.errors[name])
    return report


# =============================================================================
# Tree helpers
# =============================================================================


def iter_leaves(tree: Mapping[str, Any], path: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], Any]]:
    """Yield ``(path, value)`` for every non-mapping value, depth first."""
    for key, value in tree.items():
        current = (*path, str(key))
        if isinstance(value, Mapping):
            yield from iter_leaves(value, current)
        else:
            yield current, value


def is_color_scale(value: Any) -> bool:
    """
    True for color-scale shaped mappings: non-empty, every key a numeric string.

    >>> is_color_scale({"50": "#eff6ff", "500": "#3b82f6"})
    True
    >>> is_color_scale({"default": "#fff"})
    False
    """
    return (
        isinstance(value, Mapping)
        and bool(value)
        and all(isinstance(key, str) and key.isdigit() for key in value)
    )


def css_value(value: Any) -> str | None:
    """Render a leaf as a CSS value; None for values that have no CSS form."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def banner(title: str, tokens: TokenStore, generated_at: str | None, open_: str = "/*", close: str = "*/") -> str:
    """Header comment naming the theme."""
    rule = "=" * 77
    lines = [
        f"{open_} {rule}",
        f" * {title}",
        f" * Theme: {tokens.metadata.name} ({tokens.metadata.mode})",
        f" * Version: {tokens.metadata.version}",
    ]
    if generated_at:
        lines.append(f" * Generated: {generated_at}")
    lines.append(f" * {rule} {close}")
    return "\n".join(lines)
