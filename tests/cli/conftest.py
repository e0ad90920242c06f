"""Shared fixtures for CLI tests."""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any
import pytest
from typer.testing import CliRunner


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def env() -> dict[str, str]:
    return {"NO_COLOR": "1", "COLUMNS": "200"}


@pytest.fixture()
def write_payload(tmp_path: Path):
    def _write(payload: Any, name: str = "config.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
