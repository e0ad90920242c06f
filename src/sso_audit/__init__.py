"""SSO federation configuration validator, normalizer and risk auditor."""

from sso_audit.audit import AuditFinding, FindingCode, Severity, run_audit
from sso_audit.contract import (
    ErrorDetail,
    ErrorItem,
    ErrorStatus,
    FailureEnvelope,
    SuccessEnvelope,
    failure,
    success,
)
from sso_audit.dispatcher import (
    Engine,
    Mode,
    build_engine,
    describe,
    dispatch,
    get_engine,
    health,
    query,
)
from sso_audit.normalizer import normalize
from sso_audit.schema import SchemaName, build_schema_registry, validate


__all__ = [
    "AuditFinding",
    "Engine",
    "ErrorDetail",
    "ErrorItem",
    "ErrorStatus",
    "FailureEnvelope",
    "FindingCode",
    "Mode",
    "SchemaName",
    "Severity",
    "SuccessEnvelope",
    "build_engine",
    "build_schema_registry",
    "describe",
    "dispatch",
    "failure",
    "get_engine",
    "health",
    "normalize",
    "query",
    "run_audit",
    "success",
    "validate",
]
