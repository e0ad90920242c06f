"""Mode dispatch from a request to the normalize/validate/audit pipeline."""

from __future__ import annotations
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from functools import lru_cache
from typing import Any
from sso_audit.audit import DEFAULT_RULES, AuditRule, run_audit
from sso_audit.config import get_settings
from sso_audit.contract import (
    ErrorStatus,
    FailureEnvelope,
    SuccessEnvelope,
    error_item,
    failure_for,
    success,
)
from sso_audit.normalizer import MAX_NESTING_DEPTH, exceeds_depth, normalize
from sso_audit.schema import (
    SchemaName,
    SchemaRegistry,
    ValidationOutcome,
    build_schema_registry,
    validate,
)


logger = logging.getLogger(__name__)

CONTRACT_TAG = "xor_envelope"

EnvelopeResult = SuccessEnvelope | FailureEnvelope


class Mode(StrEnum):
    """Modes accepted in a POST body."""

    VALIDATE_ENVELOPE_CONTRACT = "validate_envelope_contract"
    VALIDATE_SAML_CONFIG = "validate_saml_config"
    AUDIT_SAML_CONFIG = "audit_saml_config"


_MODE_VALUES = frozenset(mode.value for mode in Mode)


class QueryMode(StrEnum):
    """Modes accepted as a GET query parameter."""

    HEALTH = "health"
    SPEC = "spec"


@dataclass(frozen=True, slots=True)
class Engine:
    """Compiled schemas and audit rules shared read-only across requests."""

    registry: SchemaRegistry
    rules: tuple[AuditRule, ...]
    service_name: str = "sso-audit"


def build_engine(
    *,
    rules: Sequence[AuditRule] = DEFAULT_RULES,
    service_name: str = "sso-audit",
) -> Engine:
    """Construct a new engine from the bundled schemas and ``rules``."""
    return Engine(
        registry=build_schema_registry(),
        rules=tuple(rules),
        service_name=service_name,
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide engine, building it on first use."""
    settings = get_settings()
    return build_engine(service_name=str(settings.service_name))


def _invalid(
    message: str, location: str, reason: str, *, location_type: str = "body"
) -> FailureEnvelope:
    return failure_for(
        ErrorStatus.INVALID_ARGUMENT,
        message,
        [error_item(location, message, reason, location_type=location_type)],
    )


def _rejected(
    message: str, mode: Mode, outcome: ValidationOutcome
) -> FailureEnvelope:
    logger.info(
        "Payload rejected by schema validation",
        extra={"mode": str(mode), "error_count": len(outcome.errors)},
    )
    return failure_for(ErrorStatus.INVALID_ARGUMENT, message, outcome.errors)


def _internal(message: str) -> FailureEnvelope:
    return failure_for(ErrorStatus.INTERNAL, message)


def _run(request: Any, engine: Engine) -> EnvelopeResult:
    if not isinstance(request, Mapping):
        return _invalid(
            "Request body must be a JSON object.", "body", "invalid_request"
        )

    mode_raw = request.get("mode")
    if not isinstance(mode_raw, str) or mode_raw not in _MODE_VALUES:
        supported = ", ".join(mode.value for mode in Mode)
        return _invalid(
            f"Unsupported mode {mode_raw!r}; expected one of: {supported}.",
            "mode",
            "invalid_mode",
        )
    mode = Mode(mode_raw)

    payload = request.get("payload")
    if not isinstance(payload, Mapping):
        return _invalid(
            "Field 'payload' must be a JSON object.", "payload", "invalid_payload"
        )
    if exceeds_depth(payload):
        return _invalid(
            f"Field 'payload' nests deeper than {MAX_NESTING_DEPTH} levels.",
            "payload",
            "payload_too_deep",
        )

    logger.debug("Dispatching federation request", extra={"mode": mode.value})

    if mode is Mode.VALIDATE_ENVELOPE_CONTRACT:
        outcome = validate(SchemaName.ENVELOPE, payload, registry=engine.registry)
        if not outcome.valid:
            return _rejected("Envelope failed contract validation.", mode, outcome)
        return success([{"type": "envelope_validation", "valid": True}])

    normalized = normalize(payload)
    outcome = validate(
        SchemaName.FEDERATION_CONFIG, normalized, registry=engine.registry
    )
    if not outcome.valid:
        return _rejected("SAML config failed schema validation.", mode, outcome)

    if mode is Mode.VALIDATE_SAML_CONFIG:
        return success(
            [
                {
                    "type": "saml_config_validation",
                    "valid": True,
                    "normalized": normalized,
                }
            ]
        )

    findings = run_audit(outcome.value, rules=engine.rules)
    return success(
        [
            {
                "type": "saml_config_audit",
                "valid": True,
                "normalized": normalized,
                "findings": [finding.model_dump(mode="json") for finding in findings],
            }
        ]
    )


def dispatch(request: Any, *, engine: Engine | None = None) -> EnvelopeResult:
    """Run the pipeline selected by ``request['mode']``.

    Caller data errors come back as ``INVALID_ARGUMENT`` envelopes; any other
    exception is logged and reported as ``INTERNAL``.
    """
    try:
        return _run(request, engine or get_engine())
    except Exception:
        logger.exception("Unhandled fault while dispatching request")
        return _internal("Internal error while processing the request.")


def health(*, engine: Engine | None = None) -> EnvelopeResult:
    """Return a liveness result."""
    try:
        active = engine or get_engine()
        return success(
            [
                {
                    "type": "health",
                    "status": "ok",
                    "service": active.service_name,
                    "schema_version": active.registry.version,
                    "server_time": datetime.now(tz=UTC).isoformat(),
                }
            ]
        )
    except Exception:
        logger.exception("Health check failed")
        return _internal("Health check failed.")


def describe(*, engine: Engine | None = None) -> EnvelopeResult:
    """Return the static list of supported modes and the contract tag."""
    try:
        active = engine or get_engine()
        return success(
            [
                {
                    "type": "spec",
                    "modes": [mode.value for mode in Mode],
                    "get_modes": [mode.value for mode in QueryMode],
                    "contract": CONTRACT_TAG,
                    "schema_version": active.registry.version,
                    "schemas": active.registry.names(),
                }
            ]
        )
    except Exception:
        logger.exception("Spec description failed")
        return _internal("Spec description failed.")


def query(mode: str | None, *, engine: Engine | None = None) -> EnvelopeResult:
    """Answer a GET request for ``mode``."""
    if mode == QueryMode.HEALTH:
        return health(engine=engine)
    if mode == QueryMode.SPEC:
        return describe(engine=engine)
    supported = ", ".join(item.value for item in QueryMode)
    return _invalid(
        f"Unsupported mode {mode!r}; expected one of: {supported}.",
        "mode",
        "invalid_mode",
        location_type="query",
    )


__all__ = [
    "CONTRACT_TAG",
    "Engine",
    "EnvelopeResult",
    "Mode",
    "QueryMode",
    "build_engine",
    "describe",
    "dispatch",
    "get_engine",
    "health",
    "query",
]
