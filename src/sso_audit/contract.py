"""Response envelope shared by every federation-config operation.

An envelope carries exactly one of ``result`` or ``error``. Both shapes are
closed pydantic models joined by a tagged union, so a value holding both or
neither field cannot be constructed. Callers build envelopes through
:func:`success` and :func:`failure` only.
"""

from __future__ import annotations
import json
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from typing import Annotated, Any
from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    StrictInt,
    StrictStr,
    Tag,
)


class ErrorStatus(StrEnum):
    """Error taxonomy surfaced to callers."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INTERNAL = "INTERNAL"

    @property
    def code(self) -> int:
        """Return the numeric code paired with the status label."""
        return _STATUS_CODES[self]


_STATUS_CODES: dict[ErrorStatus, int] = {
    ErrorStatus.INVALID_ARGUMENT: 400,
    ErrorStatus.METHOD_NOT_ALLOWED: 405,
    ErrorStatus.INTERNAL: 500,
}


class ContractModel(BaseModel):
    """Closed, strictly typed base for envelope shapes."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class ErrorItem(ContractModel):
    """One violation, addressed by a dotted path into the request."""

    domain: StrictStr
    location: StrictStr
    location_type: StrictStr = Field(alias="locationType")
    message: StrictStr
    reason: StrictStr


class ErrorDetail(ContractModel):
    """Structured error payload; every field is always populated."""

    code: StrictInt
    status: StrictStr
    message: StrictStr
    errors: list[ErrorItem]


def _error_variant(value: Any) -> str:
    if isinstance(value, str):
        return "text"
    return "detail"


ErrorValue = Annotated[
    Annotated[StrictStr, Tag("text")] | Annotated[ErrorDetail, Tag("detail")],
    Discriminator(_error_variant),
]
"""Plain error text or a structured :class:`ErrorDetail`."""


class SuccessEnvelope(ContractModel):
    """Envelope carrying an ordered list of result objects."""

    result: list[dict[str, Any]]


class FailureEnvelope(ContractModel):
    """Envelope carrying a single error value."""

    error: ErrorValue


ENVELOPE_TAGS = frozenset({"success", "failure"})
"""Union tags used by :data:`Envelope`; never part of a reported location."""


def _envelope_variant(value: Any) -> str | None:
    if isinstance(value, SuccessEnvelope):
        return "success"
    if isinstance(value, FailureEnvelope):
        return "failure"
    if not isinstance(value, Mapping):
        # Route to an arm so the ordinary model_type error is reported.
        return "success"
    has_result = "result" in value
    has_error = "error" in value
    if has_result == has_error:
        return None
    return "success" if has_result else "failure"


Envelope = Annotated[
    Annotated[SuccessEnvelope, Tag("success")]
    | Annotated[FailureEnvelope, Tag("failure")],
    Discriminator(
        _envelope_variant,
        custom_error_type="envelope_exclusive",
        custom_error_message="Exactly one of 'result' or 'error' must be present",
    ),
]
"""Exactly one of :class:`SuccessEnvelope` or :class:`FailureEnvelope`."""


def error_item(
    location: str,
    message: str,
    reason: str,
    *,
    location_type: str = "body",
    domain: str = "global",
) -> ErrorItem:
    """Build an :class:`ErrorItem` with the default domain."""
    return ErrorItem(
        domain=domain,
        location=location,
        locationType=location_type,
        message=message,
        reason=reason,
    )


def success(results: Iterable[Mapping[str, Any]]) -> SuccessEnvelope:
    """Return ``{result: results}``."""
    return SuccessEnvelope(result=[dict(item) for item in results])


def failure(
    code: int,
    status: ErrorStatus | str,
    message: str,
    items: Sequence[ErrorItem] | None = None,
) -> FailureEnvelope:
    """Return ``{error: {...}}``; ``items`` defaults to an empty list."""
    return FailureEnvelope(
        error=ErrorDetail(
            code=code,
            status=str(status),
            message=message,
            errors=list(items or []),
        )
    )


def failure_for(
    status: ErrorStatus,
    message: str,
    items: Sequence[ErrorItem] | None = None,
) -> FailureEnvelope:
    """Return a failure whose code is taken from the taxonomy."""
    return failure(status.code, status, message, items)


def to_payload(envelope: SuccessEnvelope | FailureEnvelope) -> dict[str, Any]:
    """Serialize an envelope to its JSON wire shape."""
    return envelope.model_dump(mode="json", by_alias=True)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not a JSON value")


def load_json(raw: str | bytes) -> Any:
    """Decode request JSON, rejecting the non-standard NaN and Infinity tokens.

    Raises ``ValueError`` for malformed input and ``RecursionError`` for input
    nested beyond what the decoder can handle.
    """
    return json.loads(raw, parse_constant=_reject_constant)


def status_code_for(envelope: SuccessEnvelope | FailureEnvelope) -> int:
    """Return the HTTP status matching ``envelope``."""
    if isinstance(envelope, FailureEnvelope) and isinstance(
        envelope.error, ErrorDetail
    ):
        return envelope.error.code
    if isinstance(envelope, FailureEnvelope):
        return ErrorStatus.INTERNAL.code
    return 200


__all__ = [
    "ENVELOPE_TAGS",
    "ContractModel",
    "Envelope",
    "ErrorDetail",
    "ErrorItem",
    "ErrorStatus",
    "ErrorValue",
    "FailureEnvelope",
    "SuccessEnvelope",
    "error_item",
    "failure",
    "failure_for",
    "load_json",
    "status_code_for",
    "success",
    "to_payload",
]
