"""API routers for the SSO audit backend."""

from sso_audit_backend.app.routers import federation, system


__all__ = ["federation", "system"]
