"""Liveness route for load balancers and orchestrators."""

from __future__ import annotations
from fastapi import APIRouter, Request
from sso_audit.dispatcher import Engine


router = APIRouter()


@router.get("/system/health")
def get_system_health(request: Request) -> dict[str, str]:
    """Return a plain, envelope-free liveness status."""
    engine: Engine = request.app.state.engine
    return {
        "status": "ok",
        "service": engine.service_name,
        "schema_version": engine.registry.version,
    }


__all__ = ["router"]
