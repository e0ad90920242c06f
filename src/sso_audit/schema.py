"""Structural validation against the versioned schema registry."""

from __future__ import annotations
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any
from pydantic import TypeAdapter, ValidationError
from sso_audit.contract import ENVELOPE_TAGS, Envelope, ErrorItem, error_item
from sso_audit.models import SAML_TAGS, FederationConfig


SCHEMA_VERSION = "2024-06"
"""Version tag of the bundled schema definitions."""

ROOT_LOCATION = "payload"

_ERROR_VALUE_TAGS = frozenset({"text", "detail"})


class SchemaName(StrEnum):
    """Schemas known to the registry."""

    FEDERATION_CONFIG = "federation_config"
    ENVELOPE = "envelope"


@dataclass(frozen=True, slots=True)
class SchemaDefinition:
    """A compiled schema plus the union tags hidden from error locations."""

    name: SchemaName
    adapter: TypeAdapter[Any]
    tagged_paths: frozenset[tuple[str, ...]] = frozenset()
    tags: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class SchemaRegistry:
    """Immutable set of compiled schemas shared by every request."""

    version: str
    definitions: Mapping[SchemaName, SchemaDefinition]

    def get(self, name: SchemaName | str) -> SchemaDefinition:
        """Return the definition registered under ``name``."""
        try:
            return self.definitions[SchemaName(name)]
        except (KeyError, ValueError) as exc:
            msg = f"No schema registered under '{name}'"
            raise KeyError(msg) from exc

    def names(self) -> list[str]:
        """Return registered schema names in a stable order."""
        return sorted(str(name) for name in self.definitions)


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Result of validating one value against one schema."""

    valid: bool
    errors: tuple[ErrorItem, ...] = field(default_factory=tuple)
    value: Any = None


def build_schema_registry() -> SchemaRegistry:
    """Compile every bundled schema into a fresh registry."""
    definitions = {
        SchemaName.FEDERATION_CONFIG: SchemaDefinition(
            name=SchemaName.FEDERATION_CONFIG,
            adapter=TypeAdapter(FederationConfig),
            tagged_paths=frozenset({("saml",)}),
            tags=SAML_TAGS,
        ),
        SchemaName.ENVELOPE: SchemaDefinition(
            name=SchemaName.ENVELOPE,
            adapter=TypeAdapter(Envelope),
            tagged_paths=frozenset({(), ("error",)}),
            tags=ENVELOPE_TAGS | _ERROR_VALUE_TAGS,
        ),
    }
    return SchemaRegistry(
        version=SCHEMA_VERSION, definitions=MappingProxyType(definitions)
    )


def format_location(
    loc: Sequence[int | str],
    *,
    root: str = ROOT_LOCATION,
    tagged_paths: frozenset[tuple[str, ...]] = frozenset(),
    tags: frozenset[str] = frozenset(),
) -> str:
    """Render a pydantic ``loc`` tuple as ``root.a.b[0].c``.

    Union tags are dropped when they appear directly below one of
    ``tagged_paths`` so locations always follow the wire shape.
    """
    kept: list[int | str] = []
    for part in loc:
        if (
            isinstance(part, str)
            and part in tags
            and tuple(str(item) for item in kept) in tagged_paths
        ):
            continue
        kept.append(part)

    rendered = root
    for part in kept:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}"
    return rendered


def _error_items(
    exc: ValidationError, definition: SchemaDefinition, root: str
) -> tuple[ErrorItem, ...]:
    return tuple(
        error_item(
            format_location(
                error["loc"],
                root=root,
                tagged_paths=definition.tagged_paths,
                tags=definition.tags,
            ),
            error["msg"],
            error["type"],
        )
        for error in exc.errors(include_url=False)
    )


def validate(
    schema_name: SchemaName | str,
    value: Any,
    *,
    registry: SchemaRegistry,
    root: str = ROOT_LOCATION,
) -> ValidationOutcome:
    """Validate ``value`` and collect every structural violation in one pass."""
    definition = registry.get(schema_name)
    try:
        parsed = definition.adapter.validate_python(value)
    except ValidationError as exc:
        errors = _error_items(exc, definition, root)
        return ValidationOutcome(valid=False, errors=errors)
    return ValidationOutcome(valid=True, value=parsed)


__all__ = [
    "ROOT_LOCATION",
    "SCHEMA_VERSION",
    "SchemaDefinition",
    "SchemaName",
    "SchemaRegistry",
    "ValidationOutcome",
    "build_schema_registry",
    "format_location",
    "validate",
]
