"""Command line interface for the SSO audit engine."""

from __future__ import annotations
from .main import app, run


__all__ = ["app", "run"]
