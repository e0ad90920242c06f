"""Shared pytest fixtures for backend tests."""

from __future__ import annotations
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sso_audit.dispatcher import Engine
from sso_audit_backend.app.factory import create_app


@pytest.fixture
def app(engine: Engine) -> FastAPI:
    """Create an application bound to a fresh engine."""
    return create_app(engine=engine)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Return a test client for the application."""
    return TestClient(app)
