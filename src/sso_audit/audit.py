"""Advisory risk checks for structurally valid federation configs."""

from __future__ import annotations
import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from enum import StrEnum
from urllib.parse import SplitResult, urlsplit
from pydantic import BaseModel, ConfigDict
from sso_audit.models import FederationConfig, SamlMetadataUrl
from sso_audit.schema import format_location


class Severity(StrEnum):
    """Finding severities, most severe first."""

    HIGH = "high"
    MEDIUM = "medium"


class FindingCode(StrEnum):
    """Stable machine-readable finding codes."""

    METADATA_URL_INVALID = "metadata_url_invalid"
    METADATA_URL_INSECURE = "metadata_url_insecure"
    ENTITY_ID_NONSTANDARD = "entity_id_nonstandard"
    DOMAIN_HAS_WHITESPACE = "domain_has_whitespace"
    DOMAIN_LOOKS_LIKE_URL = "domain_looks_like_url"
    DOMAIN_MISSING_TLD = "domain_missing_tld"
    ATTRIBUTE_MAPPING_EMPTY = "attribute_mapping_empty"
    EMAIL_MAPPING_MISSING = "email_mapping_missing"


class AuditFinding(BaseModel):
    """A non-fatal observation attached to a successful result."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    severity: Severity
    code: FindingCode
    message: str
    location: str


AuditRule = Callable[[FederationConfig], Iterable[AuditFinding]]
"""A rule inspects a config and yields zero or more findings."""

_NAMESPACE_SEPARATOR = ":"
_EMAIL_LABEL = re.compile(r"mail", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s")


def _parse_url(value: str) -> SplitResult | None:
    if _WHITESPACE.search(value):
        return None
    try:
        parts = urlsplit(value)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return parts


def check_metadata_url(config: FederationConfig) -> Iterator[AuditFinding]:
    """Flag metadata URLs that do not parse or are not served over https."""
    saml = config.saml
    if not isinstance(saml, SamlMetadataUrl):
        return
    location = format_location(("saml", "metadata_url"))
    parts = _parse_url(saml.metadata_url)
    if parts is None:
        yield AuditFinding(
            severity=Severity.HIGH,
            code=FindingCode.METADATA_URL_INVALID,
            message="metadata URL invalid.",
            location=location,
        )
        return
    if parts.scheme.lower() != "https":
        yield AuditFinding(
            severity=Severity.HIGH,
            code=FindingCode.METADATA_URL_INSECURE,
            message="metadata URL not secure.",
            location=location,
        )


def check_entity_id(config: FederationConfig) -> Iterator[AuditFinding]:
    """Flag entity identifiers that are neither URIs nor URNs."""
    if _NAMESPACE_SEPARATOR not in config.saml.entity_id:
        yield AuditFinding(
            severity=Severity.MEDIUM,
            code=FindingCode.ENTITY_ID_NONSTANDARD,
            message="entity identifier looks non-standard.",
            location=format_location(("saml", "entity_id")),
        )


def check_domains(config: FederationConfig) -> Iterator[AuditFinding]:
    """Flag domain bindings that are not bare hostnames."""
    for index, binding in enumerate(config.domains):
        domain = binding.domain
        location = format_location(("domains", index, "domain"))
        if _WHITESPACE.search(domain):
            yield AuditFinding(
                severity=Severity.HIGH,
                code=FindingCode.DOMAIN_HAS_WHITESPACE,
                message=f"domain '{domain}' contains whitespace.",
                location=location,
            )
        if "://" in domain or "/" in domain:
            yield AuditFinding(
                severity=Severity.HIGH,
                code=FindingCode.DOMAIN_LOOKS_LIKE_URL,
                message=f"domain '{domain}' looks like a URL, not a hostname.",
                location=location,
            )
        if "." not in domain:
            yield AuditFinding(
                severity=Severity.MEDIUM,
                code=FindingCode.DOMAIN_MISSING_TLD,
                message=f"domain '{domain}' has no top-level label.",
                location=location,
            )


def check_attribute_mapping(config: FederationConfig) -> Iterator[AuditFinding]:
    """Flag empty mappings and mappings without an email attribute."""
    rules = config.saml.attribute_mapping.keys
    if not rules:
        # Unreachable for schema-valid input; kept for configs built in code.
        yield AuditFinding(
            severity=Severity.HIGH,
            code=FindingCode.ATTRIBUTE_MAPPING_EMPTY,
            message="attribute mapping has no entries.",
            location=format_location(("saml", "attribute_mapping", "keys")),
        )
    labels = [
        label
        for rule in rules.values()
        for label in (rule.name, *rule.sources)
    ]
    if not any(_EMAIL_LABEL.search(label) for label in labels):
        yield AuditFinding(
            severity=Severity.MEDIUM,
            code=FindingCode.EMAIL_MAPPING_MISSING,
            message="no obvious email attribute mapping.",
            location=format_location(("saml", "attribute_mapping")),
        )


DEFAULT_RULES: tuple[AuditRule, ...] = (
    check_metadata_url,
    check_entity_id,
    check_domains,
    check_attribute_mapping,
)
"""Rule table evaluated in order; every applicable rule fires."""


def run_audit(
    config: FederationConfig, *, rules: Sequence[AuditRule] = DEFAULT_RULES
) -> list[AuditFinding]:
    """Return findings from every rule, in rule order."""
    findings: list[AuditFinding] = []
    for rule in rules:
        findings.extend(rule(config))
    return findings


__all__ = [
    "DEFAULT_RULES",
    "AuditFinding",
    "AuditRule",
    "FindingCode",
    "Severity",
    "check_attribute_mapping",
    "check_domains",
    "check_entity_id",
    "check_metadata_url",
    "run_audit",
]
