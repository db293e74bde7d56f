from __future__ import annotations

from typing import Iterator

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from livadai.api.dependencies.services import get_now
from livadai.main import create_app
from tests._utils.snapshots import NOW


@pytest.fixture
def app() -> Iterator[FastAPI]:
    application = create_app()
    application.dependency_overrides[get_now] = lambda: NOW
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
