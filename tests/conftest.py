"""Configure test environment for the SSO audit engine."""

import copy
import sys
from pathlib import Path
from typing import Any
import pytest


ROOT = Path(__file__).resolve().parents[1]
for source in (ROOT / "src", ROOT / "apps" / "backend" / "src"):
    if str(source) not in sys.path:
        sys.path.insert(0, str(source))

from sso_audit.dispatcher import Engine, build_engine  # noqa: E402


SAML_EXAMPLE: dict[str, Any] = {
    "saml": {
        "entity_id": "https://idp.example.com/saml",
        "metadata_url": "https://idp.example.com/saml/metadata.xml",
        "attribute_mapping": {
            "keys": {
                "email": {"name": "email", "sources": ["mail", "emailAddress"]},
            }
        },
        "name_id_format": "urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress",
    },
    "domains": [{"domain": "Example.COM"}],
}


@pytest.fixture
def engine() -> Engine:
    """Return a freshly built engine with the default rule table."""
    return build_engine()


@pytest.fixture
def saml_config() -> dict[str, Any]:
    """Return an independent copy of the documented SAML example."""
    return copy.deepcopy(SAML_EXAMPLE)
