"""API test specific fixtures."""

import pytest
from fastapi.testclient import TestClient

from liveeditor.main import create_app


@pytest.fixture
def test_client(fake_bridge):
    """Create FastAPI TestClient wired to the fake reflection bridge."""
    with TestClient(create_app(fake_bridge)) as client:
        yield client
