"""Application factory for the SSO audit backend."""

from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sso_audit.config import get_settings
from sso_audit.contract import ErrorStatus, error_item, failure_for
from sso_audit.dispatcher import Engine, get_engine
from sso_audit_backend.app.logging_config import get_logger
from sso_audit_backend.app.routers import federation, system


logger = get_logger(__name__)


async def _internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report unexpected faults as an INTERNAL envelope."""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    envelope = failure_for(ErrorStatus.INTERNAL, "Internal server error.")
    return federation.envelope_response(request, envelope)


async def _http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Report routing and protocol errors raised by the framework as envelopes."""
    if exc.status_code == 405:
        envelope = federation.method_not_allowed(request.method)
    elif exc.status_code >= 500:
        envelope = failure_for(ErrorStatus.INTERNAL, "Internal server error.")
    else:
        reason = "not_found" if exc.status_code == 404 else "http_error"
        message = str(exc.detail)
        envelope = failure_for(
            ErrorStatus.INVALID_ARGUMENT,
            message,
            [error_item(request.url.path, message, reason, location_type="path")],
        )
    return federation.envelope_response(request, envelope, headers=exc.headers)


def create_app(*, engine: Engine | None = None) -> FastAPI:
    """Build the FastAPI application around ``engine``."""
    settings = get_settings()
    app = FastAPI(title="SSO Audit API")
    app.state.engine = engine or get_engine()
    app.state.cors_allow_origin = str(settings.cors_allow_origin)
    app.include_router(federation.router, prefix="/api")
    app.include_router(system.router, prefix="/api")
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _internal_error_handler)
    return app


__all__ = ["create_app"]
