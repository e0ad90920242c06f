"""Tests for the advisory audit rules."""

from __future__ import annotations
from collections.abc import Iterator
from typing import Any
import pytest
from sso_audit.audit import (
    AuditFinding,
    FindingCode,
    Severity,
    check_attribute_mapping,
    run_audit,
)
from sso_audit.models import FederationConfig


def _config(payload: dict[str, Any]) -> FederationConfig:
    return FederationConfig.model_validate(payload)


def _codes(findings: list[AuditFinding]) -> list[str]:
    return [finding.code.value for finding in findings]


def test_clean_config_has_no_findings(saml_config: dict[str, Any]) -> None:
    saml_config["domains"][0]["domain"] = "example.com"

    assert run_audit(_config(saml_config)) == []


def test_plain_http_metadata_url_is_high_risk(saml_config: dict[str, Any]) -> None:
    saml_config["saml"]["metadata_url"] = "http://idp.example.com/metadata"

    findings = run_audit(_config(saml_config))

    assert findings == [
        AuditFinding(
            severity=Severity.HIGH,
            code=FindingCode.METADATA_URL_INSECURE,
            message="metadata URL not secure.",
            location="payload.saml.metadata_url",
        )
    ]


@pytest.mark.parametrize(
    "url", ["not a url", "idp.example.com/metadata", "https://", "http://[::1"]
)
def test_unparseable_metadata_url_is_invalid(
    saml_config: dict[str, Any], url: str
) -> None:
    saml_config["saml"]["metadata_url"] = url

    findings = run_audit(_config(saml_config))

    assert _codes(findings) == ["metadata_url_invalid"]
    assert findings[0].severity is Severity.HIGH
    assert findings[0].message == "metadata URL invalid."


def test_uppercase_https_scheme_is_secure(saml_config: dict[str, Any]) -> None:
    saml_config["saml"]["metadata_url"] = "HTTPS://idp.example.com/metadata"

    assert run_audit(_config(saml_config)) == []


def test_inline_metadata_skips_the_url_rule(saml_config: dict[str, Any]) -> None:
    del saml_config["saml"]["metadata_url"]
    saml_config["saml"]["metadata_xml"] = "<EntityDescriptor/>"

    assert run_audit(_config(saml_config)) == []


def test_entity_id_without_namespace_is_flagged(saml_config: dict[str, Any]) -> None:
    saml_config["saml"]["entity_id"] = "my-idp"

    findings = run_audit(_config(saml_config))

    assert _codes(findings) == ["entity_id_nonstandard"]
    assert findings[0].severity is Severity.MEDIUM
    assert findings[0].location == "payload.saml.entity_id"


@pytest.mark.parametrize("entity_id", ["urn:example:idp", "https://idp.example.com"])
def test_uri_and_urn_entity_ids_pass(
    saml_config: dict[str, Any], entity_id: str
) -> None:
    saml_config["saml"]["entity_id"] = entity_id

    assert run_audit(_config(saml_config)) == []


@pytest.mark.parametrize(
    ("domain", "codes"),
    [
        ("example .com", ["domain_has_whitespace"]),
        ("https://example.com", ["domain_looks_like_url"]),
        ("example.com/login", ["domain_looks_like_url"]),
        ("localhost", ["domain_missing_tld"]),
        ("https://intranet", ["domain_looks_like_url", "domain_missing_tld"]),
        ("my host", ["domain_has_whitespace", "domain_missing_tld"]),
    ],
)
def test_domain_rules(
    saml_config: dict[str, Any], domain: str, codes: list[str]
) -> None:
    saml_config["domains"] = [{"domain": domain}]

    findings = run_audit(_config(saml_config))

    assert _codes(findings) == codes
    assert {finding.location for finding in findings} == {"payload.domains[0].domain"}


def test_domain_findings_follow_binding_order(saml_config: dict[str, Any]) -> None:
    saml_config["domains"] = [
        {"domain": "example.com"},
        {"domain": "intranet"},
        {"domain": "http://corp.example.com"},
    ]

    findings = run_audit(_config(saml_config))

    assert [(f.code.value, f.location) for f in findings] == [
        ("domain_missing_tld", "payload.domains[1].domain"),
        ("domain_looks_like_url", "payload.domains[2].domain"),
    ]
    assert findings[1].severity is Severity.HIGH


def test_missing_email_mapping_is_flagged(saml_config: dict[str, Any]) -> None:
    saml_config["saml"]["attribute_mapping"]["keys"] = {
        "given_name": {"name": "given_name", "sources": ["givenName"]},
    }

    findings = run_audit(_config(saml_config))

    assert _codes(findings) == ["email_mapping_missing"]
    assert findings[0].severity is Severity.MEDIUM
    assert findings[0].message == "no obvious email attribute mapping."
    assert findings[0].location == "payload.saml.attribute_mapping"


def test_email_label_may_come_from_a_source(saml_config: dict[str, Any]) -> None:
    saml_config["saml"]["attribute_mapping"]["keys"] = {
        "primary": {
            "name": "login",
            "sources": ["urn:oid:0.9.2342.19200300.100.1.3", "MAIL"],
        },
    }

    assert run_audit(_config(saml_config)) == []


def test_empty_mapping_built_in_code_is_high_risk(
    saml_config: dict[str, Any],
) -> None:
    config = _config(saml_config)
    mapping = config.saml.attribute_mapping.model_copy(update={"keys": {}})
    saml = config.saml.model_copy(update={"attribute_mapping": mapping})
    config = config.model_copy(update={"saml": saml})

    findings = list(check_attribute_mapping(config))

    assert _codes(findings) == ["attribute_mapping_empty", "email_mapping_missing"]
    assert findings[0].severity is Severity.HIGH
    assert findings[0].location == "payload.saml.attribute_mapping.keys"


def test_findings_follow_rule_order(saml_config: dict[str, Any]) -> None:
    saml_config["saml"]["metadata_url"] = "http://idp.example.com/metadata"
    saml_config["saml"]["entity_id"] = "my-idp"
    saml_config["saml"]["attribute_mapping"]["keys"] = {
        "uid": {"name": "uid", "sources": ["uid"]},
    }
    saml_config["domains"] = [{"domain": "intranet"}]

    findings = run_audit(_config(saml_config))

    assert _codes(findings) == [
        "metadata_url_insecure",
        "entity_id_nonstandard",
        "domain_missing_tld",
        "email_mapping_missing",
    ]


def test_custom_rule_table_is_honoured(saml_config: dict[str, Any]) -> None:
    def always(config: FederationConfig) -> Iterator[AuditFinding]:
        yield AuditFinding(
            severity=Severity.MEDIUM,
            code=FindingCode.ENTITY_ID_NONSTANDARD,
            message=config.saml.entity_id,
            location="payload.saml.entity_id",
        )

    findings = run_audit(_config(saml_config), rules=[always])

    assert [finding.message for finding in findings] == [
        "https://idp.example.com/saml"
    ]
