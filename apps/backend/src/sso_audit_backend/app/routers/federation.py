"""Federation config validation routes.

A single path carries every mode: ``GET ?mode=`` answers health and spec
queries, ``POST`` runs a pipeline on ``{mode, payload}``, and every response
body is an envelope whose status code mirrors ``error.code``.
"""

from __future__ import annotations
from typing import Any
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from sso_audit.contract import (
    ErrorStatus,
    FailureEnvelope,
    SuccessEnvelope,
    error_item,
    failure_for,
    load_json,
    status_code_for,
    to_payload,
)
from sso_audit.dispatcher import Engine, dispatch, query
from sso_audit_backend.app.logging_config import get_logger


logger = get_logger(__name__)

router = APIRouter()

FEDERATION_PATH = "/federation"


def cors_headers(request: Request) -> dict[str, str]:
    """Return the CORS headers attached to every federation response."""
    return {
        "Access-Control-Allow-Origin": request.app.state.cors_allow_origin,
        "Access-Control-Allow-Headers": "content-type, authorization",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    }


def envelope_response(
    request: Request,
    envelope: SuccessEnvelope | FailureEnvelope,
    *,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Serialize ``envelope`` with a matching HTTP status."""
    return JSONResponse(
        status_code=status_code_for(envelope),
        content=to_payload(envelope),
        headers={**cors_headers(request), **(headers or {})},
    )


def method_not_allowed(method: str) -> FailureEnvelope:
    """Return the envelope for a verb the federation path does not serve."""
    message = f"Method {method} not allowed. Use POST or GET ?mode=."
    return failure_for(
        ErrorStatus.METHOD_NOT_ALLOWED,
        message,
        [error_item("method", message, "method_not_allowed", location_type="header")],
    )


def _engine(request: Request) -> Engine:
    return request.app.state.engine


def _parse_body(raw: bytes) -> Any | FailureEnvelope:
    try:
        return load_json(raw)
    except (ValueError, RecursionError):
        message = "Request body is not valid JSON."
        return failure_for(
            ErrorStatus.INVALID_ARGUMENT,
            message,
            [error_item("body", message, "invalid_json")],
        )


@router.options(FEDERATION_PATH)
def federation_preflight(request: Request) -> Response:
    """Answer CORS preflight requests."""
    return Response(status_code=204, headers=cors_headers(request))


@router.get(FEDERATION_PATH)
def federation_query(request: Request, mode: str | None = None) -> JSONResponse:
    """Answer ``health`` and ``spec`` queries."""
    return envelope_response(request, query(mode, engine=_engine(request)))


@router.post(FEDERATION_PATH)
async def federation_dispatch(request: Request) -> JSONResponse:
    """Run the pipeline selected by the body's ``mode``."""
    parsed = _parse_body(await request.body())
    if isinstance(parsed, FailureEnvelope):
        logger.info("Rejected malformed JSON body")
        return envelope_response(request, parsed)
    return envelope_response(request, dispatch(parsed, engine=_engine(request)))


__all__ = [
    "FEDERATION_PATH",
    "cors_headers",
    "envelope_response",
    "method_not_allowed",
    "router",
]
