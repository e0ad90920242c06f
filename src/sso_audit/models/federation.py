"""Closed structural schema for SSO federation configurations."""

from __future__ import annotations
from collections.abc import Mapping
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    StrictBool,
    StrictStr,
    Tag,
    field_validator,
)
from pydantic_core import PydanticCustomError


class NameIdFormat(StrEnum):
    """Name-identifier formats accepted for SAML assertions."""

    EMAIL_ADDRESS = "urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress"
    UNSPECIFIED = "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified"
    PERSISTENT = "urn:oasis:names:tc:SAML:2.0:nameid-format:persistent"
    TRANSIENT = "urn:oasis:names:tc:SAML:2.0:nameid-format:transient"


def _check_datetime(value: str) -> str:
    candidate = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    _, separator, clock = candidate.upper().partition("T")
    try:
        parsed = datetime.fromisoformat(candidate) if separator and clock else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise PydanticCustomError(
            "invalid_datetime",
            "Value must be an ISO-8601 date-time string",
        )
    return value


def _check_default(value: Any) -> Any:
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise PydanticCustomError(
        "invalid_default",
        "Default must be null, a number, a string, a boolean or a list of strings",
    )


NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]
Timestamp = Annotated[StrictStr, AfterValidator(_check_datetime)]
DefaultValue = Annotated[Any, AfterValidator(_check_default)]


class SchemaModel(BaseModel):
    """Base model rejecting properties outside the declared set."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class AttributeRule(SchemaModel):
    """Maps one or more identity-provider attributes onto a canonical name."""

    name: NonEmptyStr
    sources: list[NonEmptyStr] = Field(min_length=1)
    default: DefaultValue = None
    multi: StrictBool = False


class AttributeMapping(SchemaModel):
    """Attribute rules keyed by an arbitrary identifier."""

    keys: dict[str, AttributeRule] = Field(min_length=1)


class _SamlCommon(SchemaModel):
    id: NonEmptyStr | None = None
    entity_id: NonEmptyStr
    attribute_mapping: AttributeMapping
    name_id_format: NameIdFormat


class SamlMetadataUrl(_SamlCommon):
    """SAML descriptor whose metadata is referenced by URL."""

    metadata_url: NonEmptyStr


class SamlMetadataXml(_SamlCommon):
    """SAML descriptor whose metadata document is supplied inline."""

    metadata_xml: NonEmptyStr


SAML_TAGS = frozenset({"by_url", "by_document"})
"""Union tags used by :data:`SamlConfig`; never part of a reported location."""


def _metadata_source(value: Any) -> str | None:
    if isinstance(value, SamlMetadataUrl):
        return "by_url"
    if isinstance(value, SamlMetadataXml):
        return "by_document"
    if not isinstance(value, Mapping):
        return "by_url"
    has_url = "metadata_url" in value
    has_xml = "metadata_xml" in value
    if has_url == has_xml:
        return None
    return "by_url" if has_url else "by_document"


SamlConfig = Annotated[
    Annotated[SamlMetadataUrl, Tag("by_url")]
    | Annotated[SamlMetadataXml, Tag("by_document")],
    Discriminator(
        _metadata_source,
        custom_error_type="metadata_source_exclusive",
        custom_error_message=(
            "Exactly one of 'metadata_url' or 'metadata_xml' must be provided"
        ),
    ),
]
"""Assertion descriptor with exactly one metadata source."""


class DomainBinding(SchemaModel):
    """A verified domain bound to the federation config."""

    id: NonEmptyStr | None = None
    domain: NonEmptyStr
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class FederationConfig(SchemaModel):
    """Root federation configuration."""

    id: NonEmptyStr | None = None
    saml: SamlConfig
    domains: list[DomainBinding]
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None

    @field_validator("domains")
    @classmethod
    def _reject_duplicate_bindings(
        cls, value: list[DomainBinding]
    ) -> list[DomainBinding]:
        seen: list[DomainBinding] = []
        for binding in value:
            if binding in seen:
                raise PydanticCustomError(
                    "duplicate_domain_binding",
                    "Domain binding for '{domain}' is listed more than once",
                    {"domain": binding.domain},
                )
            seen.append(binding)
        return value


__all__ = [
    "SAML_TAGS",
    "AttributeMapping",
    "AttributeRule",
    "DomainBinding",
    "FederationConfig",
    "NameIdFormat",
    "SamlConfig",
    "SamlMetadataUrl",
    "SamlMetadataXml",
    "SchemaModel",
]
