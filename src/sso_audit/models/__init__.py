"""Domain models describing SSO federation configurations."""

from sso_audit.models.federation import (
    SAML_TAGS,
    AttributeMapping,
    AttributeRule,
    DomainBinding,
    FederationConfig,
    NameIdFormat,
    SamlConfig,
    SamlMetadataUrl,
    SamlMetadataXml,
    SchemaModel,
)


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
