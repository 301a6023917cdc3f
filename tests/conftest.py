"""
Global pytest fixtures.

The logger is a process-wide singleton; every test starts without one so the
environment a test sets up is what the logger sees on first use.
"""

import io

import pytest  # type: ignore[import-not-found]
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dynamo_autoscale.api.main import build_app
from dynamo_autoscale.commons import logging as log_facade


@pytest.fixture(autouse=True)
def fresh_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    """No logger built yet, and no LOG_LEVEL override in the environment."""
    monkeypatch.setattr(log_facade, "_HANDLE", None)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_NAME", raising=False)


@pytest.fixture()
def sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """Session-scoped FastAPI app for tests."""
    return build_app()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
