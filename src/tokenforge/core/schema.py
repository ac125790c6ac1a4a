"""
Token schema generation and validation.

``generate_schema`` derives a JSON-Schema document from the shape and value
patterns observed in a token store. ``validate`` checks a tree against such
a document (or any document using the supported keyword subset) and
returns every mismatch instead of raising.

Supported keywords: type, enum, const, pattern, minLength, minimum,
maximum, multipleOf, properties, required, patternProperties,
additionalProperties, items, minItems, $ref.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import ValidationIssue
from .ir import METADATA_KEY, ThemeMode, TokenStore

logger = logging.getLogger(__name__)

DRAFT_URIS: dict[str, str] = {
    "07": "http://json-schema.org/draft-07/schema#",
    "2019-09": "https://json-schema.org/draft/2019-09/schema",
    "2020-12": "https://json-schema.org/draft/2020-12/schema",
}

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"
UNIT_PATTERN = r"^-?\d*\.?\d+(px|rem|em|%|vh|vw)$"
DURATION_PATTERN = r"^\d*\.?\d+(ms|s)$"

METADATA_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
        "category": {"type": "string", "minLength": 1},
        "mode": {"type": "string", "enum": [m.value for m in ThemeMode]},
        "version": {"type": "string", "minLength": 1},
    },
    "required": ["id", "name", "category", "mode", "version"],
}

_MAX_REF_DEPTH = 32


@dataclass
class ValidationResult:
    """Outcome of validating a tree against a schema."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)

    def messages(self) -> list[str]:
        return [str(issue) for issue in self.errors]


# =============================================================================
# Generation
# =============================================================================


def draft_uri(draft: str) -> str:
    return DRAFT_URIS.get(draft, DRAFT_URIS["2020-12"])


def infer_schema(value: Any, path: tuple[str, ...] = ()) -> dict[str, Any]:
    """Schema for a single observed value."""
    if isinstance(value, Mapping):
        properties = {str(k): infer_schema(v, (*path, str(k))) for k, v in value.items()}
        return {"type": "object", "properties": properties, "required": list(properties)}
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, int):
        schema: dict[str, Any] = {"type": "integer"}
        if "fontWeight" in path and value % 100 == 0:
            schema["multipleOf"] = 100
        return schema
    if isinstance(value, float):
        return {"type": "number"}
    if isinstance(value, str):
        for pattern in (HEX_COLOR_PATTERN, UNIT_PATTERN, DURATION_PATTERN):
            if re.match(pattern, value):
                return {"type": "string", "pattern": pattern}
        return {"type": "string"}
    if isinstance(value, (list, tuple)):
        schema = {"type": "array"}
        if value and all(isinstance(item, str) for item in value):
            schema["items"] = {"type": "string"}
        return schema
    if value is None:
        return {"type": "null"}
    return {}


def generate_schema(tokens: TokenStore | Mapping[str, Any], draft: str = "2020-12") -> dict[str, Any]:
    """
    Generate a schema describing the observed shape of a token store.

    Every observed key becomes required. Metadata gets the fixed metadata
    schema rather than an inferred one.
    """
    data = tokens.to_dict() if isinstance(tokens, TokenStore) else dict(tokens)
    properties: dict[str, Any] = {}
    for key, value in data.items():
        if key == METADATA_KEY:
            properties[key] = METADATA_SCHEMA
        else:
            properties[key] = infer_schema(value, (key,))
    return {
        "$schema": draft_uri(draft),
        "title": "Design Tokens",
        "type": "object",
        "properties": properties,
        "required": list(properties),
    }


# =============================================================================
# Validation
# =============================================================================


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _type_matches(value: Any, expected: str) -> bool:
    if expected == "object":
        return isinstance(value, Mapping)
    if expected == "array":
        return isinstance(value, (list, tuple))
    if expected == "string":
        return isinstance(value, str)
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected == "null":
        return value is None
    return True


def _is_multiple(value: int | float, divisor: int | float) -> bool:
    if divisor == 0:
        return True
    quotient = value / divisor
    return math.isclose(quotient, round(quotient), abs_tol=1e-9)


class _Validator:
    def __init__(self, root: Mapping[str, Any], schemas: Mapping[str, Mapping[str, Any]]):
        self.root = root
        self.schemas = schemas
        self.issues: list[ValidationIssue] = []

    def fail(self, path: str, message: str) -> None:
        self.issues.append(ValidationIssue(path=path, message=message))

    def lookup_ref(self, ref: str) -> Mapping[str, Any] | None:
        document_id, _, fragment = ref.partition("#")
        if document_id:
            document = self.schemas.get(document_id)
            if document is None:
                return None
        else:
            document = self.root
        if not fragment:
            return document
        node: Any = document
        for part in fragment.strip("/").split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, Mapping) else None

    def check(self, value: Any, schema: Mapping[str, Any], path: str, depth: int = 0) -> None:
        if "$ref" in schema:
            if depth >= _MAX_REF_DEPTH:
                self.fail(path, f"$ref nesting too deep at {schema['$ref']!r}")
                return
            target = self.lookup_ref(str(schema["$ref"]))
            if target is None:
                self.fail(path, f"Unresolvable $ref {schema['$ref']!r}")
                return
            self.check(value, target, path, depth + 1)

        expected = schema.get("type")
        if expected is not None:
            types = expected if isinstance(expected, list) else [expected]
            if not any(_type_matches(value, t) for t in types):
                self.fail(path, f"Expected {' | '.join(types)}, got {type(value).__name__}")
                return

        if "enum" in schema and value not in schema["enum"]:
            self.fail(path, f"Value {value!r} not in {schema['enum']!r}")
        if "const" in schema and value != schema["const"]:
            self.fail(path, f"Value {value!r} must equal {schema['const']!r}")

        if isinstance(value, str):
            self.check_string(value, schema, path)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            self.check_number(value, schema, path)
        elif isinstance(value, Mapping):
            self.check_object(value, schema, path, depth)
        elif isinstance(value, (list, tuple)):
            self.check_array(value, schema, path, depth)

    def check_string(self, value: str, schema: Mapping[str, Any], path: str) -> None:
        if "minLength" in schema and len(value) < schema["minLength"]:
            self.fail(path, f"String shorter than {schema['minLength']}")
        pattern = schema.get("pattern")
        if pattern is not None:
            try:
                matched = re.search(pattern, value) is not None
            except re.error as e:
                self.fail(path, f"Invalid pattern {pattern!r}: {e}")
                return
            if not matched:
                self.fail(path, f"Value {value!r} does not match pattern {pattern!r}")

    def check_number(self, value: int | float, schema: Mapping[str, Any], path: str) -> None:
        if "minimum" in schema and value < schema["minimum"]:
            self.fail(path, f"Value {value} below minimum {schema['minimum']}")
        if "maximum" in schema and value > schema["maximum"]:
            self.fail(path, f"Value {value} above maximum {schema['maximum']}")
        if "multipleOf" in schema and not _is_multiple(value, schema["multipleOf"]):
            self.fail(path, f"Value {value} is not a multiple of {schema['multipleOf']}")

    def check_object(self, value: Mapping[str, Any], schema: Mapping[str, Any], path: str, depth: int) -> None:
        items = {str(k): v for k, v in value.items()}
        for key in schema.get("required", []):
            if key not in items:
                self.fail(_join(path, key), "Required property missing")

        properties = schema.get("properties", {})
        pattern_properties = schema.get("patternProperties", {})
        additional = schema.get("additionalProperties", True)

        for key, child in items.items():
            child_path = _join(path, key)
            matched = False
            if key in properties:
                matched = True
                self.check(child, properties[key], child_path, depth)
            for pattern, child_schema in pattern_properties.items():
                if re.search(pattern, key):
                    matched = True
                    self.check(child, child_schema, child_path, depth)
            if matched:
                continue
            if additional is False:
                self.fail(child_path, "Additional property not allowed")
            elif isinstance(additional, Mapping):
                self.check(child, additional, child_path, depth)

    def check_array(self, value: list[Any] | tuple[Any, ...], schema: Mapping[str, Any], path: str, depth: int) -> None:
        if "minItems" in schema and len(value) < schema["minItems"]:
            self.fail(path, f"Array shorter than {schema['minItems']}")
        item_schema = schema.get("items")
        if isinstance(item_schema, Mapping):
            for index, item in enumerate(value):
                self.check(item, item_schema, f"{path}[{index}]", depth)


def validate(
    tokens: TokenStore | Mapping[str, Any],
    schema: Mapping[str, Any],
    schemas: Mapping[str, Mapping[str, Any]] | None = None,
) -> ValidationResult:
    """
    Validate a token tree against a schema.

    Args:
        tokens: Token store or plain tree (metadata included)
        schema: Schema document
        schemas: Sibling documents addressable by ``$id`` for ``$ref`` lookups

    Returns:
        ValidationResult with every mismatch; never raises
    """
    data = tokens.to_dict() if isinstance(tokens, TokenStore) else tokens
    validator = _Validator(schema, schemas or {})
    validator.check(data, schema, "")
    if validator.issues:
        logger.debug("Validation found %d issue(s)", len(validator.issues))
    return ValidationResult(valid=not validator.issues, errors=validator.issues)
