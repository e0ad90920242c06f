"""FastAPI application entrypoint for the SSO audit backend."""

from __future__ import annotations
from sso_audit_backend.app.factory import create_app
from sso_audit_backend.app.logging_config import get_logger


logger = get_logger()

app = create_app()


__all__ = ["app", "create_app", "logger"]

